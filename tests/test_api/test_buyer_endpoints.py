"""Tests for the buyer-facing endpoints: onboarding, saved listings, inquiries."""

from unittest.mock import patch

import pytest

from api import leads, onboarding, saved
from src.utils.http import ApiHandler
from tests.conftest import BUYER_USER_ID
from tests.utils.assertions import assert_redirect_response, assert_valid_response
from tests.utils.fakes import FakeIdentity
from tests.utils.helpers import invoke_handler


@pytest.fixture
def buyer_session(store, buyer_identity):
    with patch.object(ApiHandler, "identity", return_value=buyer_identity), \
            patch.object(ApiHandler, "store", return_value=store):
        yield buyer_identity


@pytest.mark.unit
def test_saved_requires_sign_in(store):
    with patch.object(ApiHandler, "identity", return_value=FakeIdentity()), \
            patch.object(ApiHandler, "store", return_value=store):
        response = invoke_handler(saved.handler, "GET", "/api/saved")

    assert_redirect_response(response, "/sign-in?redirect_url=%2Fapi%2Fsaved")


@pytest.mark.integration
def test_onboarding_then_save_then_inquire(buyer_session, store, listing):
    onboarded = invoke_handler(onboarding.handler, "POST", "/api/onboarding", {"name": "Jane Doe"})
    assert onboarded["status"] == 303
    assert onboarded["headers"]["Location"] == "/"
    assert buyer_session.metadata_updates == [(BUYER_USER_ID, {"onboarding_complete": True})]

    toggled = invoke_handler(saved.handler, "POST", "/api/saved", {"propertyId": listing["id"]})
    assert_valid_response(toggled, 200)
    assert toggled["json"]["data"] == {"saved": True}

    ids = invoke_handler(saved.handler, "GET", "/api/saved")
    assert ids["json"]["data"] == [listing["id"]]

    expanded = invoke_handler(saved.handler, "GET", "/api/saved?expand=1")
    assert [row["id"] for row in expanded["json"]["data"]] == [listing["id"]]

    inquiry = invoke_handler(leads.handler, "POST", "/api/leads", {"propertyId": listing["id"]})
    assert_valid_response(inquiry, 200)
    assert inquiry["json"]["success"] is True

    repeat = invoke_handler(leads.handler, "POST", "/api/leads", {"propertyId": listing["id"]})
    assert repeat["json"] == {"success": True, "message": "You have already contacted this agent."}
    assert len(store.all("lead")) == 1


@pytest.mark.unit
def test_inquiry_before_onboarding(buyer_session, store, listing):
    response = invoke_handler(leads.handler, "POST", "/api/leads", {"propertyId": listing["id"]})

    assert response["status"] == 409
    assert response["json"]["success"] is False
    assert response["json"]["requiresOnboarding"] is True
    assert store.all("lead") == []


@pytest.mark.unit
def test_toggle_before_onboarding(buyer_session, listing):
    response = invoke_handler(saved.handler, "POST", "/api/saved", {"propertyId": listing["id"]})

    assert response["status"] == 409
    assert response["json"]["requiresOnboarding"] is True


@pytest.mark.unit
@pytest.mark.parametrize("body", [{}, {"propertyId": ""}])
def test_toggle_requires_property_id(buyer_session, buyer, body):
    response = invoke_handler(saved.handler, "POST", "/api/saved", body)

    assert response["status"] == 400
    assert response["json"] == {"error": "propertyId is required"}


@pytest.mark.unit
@pytest.mark.parametrize("body", ["not json", "[1, 2]"])
def test_inquiry_rejects_non_object_body(buyer_session, buyer, body):
    response = invoke_handler(leads.handler, "POST", "/api/leads", body)

    assert response["status"] == 400


@pytest.mark.unit
def test_profile_update(buyer_session, store, buyer):
    response = invoke_handler(onboarding.handler, "PUT", "/api/onboarding", {"name": "Renamed", "phone": "555-0111"})

    assert_valid_response(response, 200)
    assert store.get("user", buyer["id"])["phone"] == "555-0111"


@pytest.mark.unit
def test_profile_update_requires_name(buyer_session, buyer):
    response = invoke_handler(onboarding.handler, "PUT", "/api/onboarding", {"phone": "555-0111"})

    assert response["status"] == 400
