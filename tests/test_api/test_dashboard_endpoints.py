"""Tests for the agent dashboard endpoints."""

from unittest.mock import patch

import pytest

from api.dashboard import analytics, leads, listings, onboarding, profile
from src.utils.http import ApiHandler
from tests.conftest import AGENT_USER_ID, BUYER_USER_ID
from tests.utils.assertions import assert_redirect_response, assert_valid_response
from tests.utils.factories import create_lead_data, create_listing_input
from tests.utils.fakes import FakeIdentity
from tests.utils.helpers import invoke_handler


@pytest.fixture
def as_caller(store):
    """Serve requests as the given identity against the in-memory store."""
    patches = []

    def _as(identity):
        for p in (
            patch.object(ApiHandler, "identity", return_value=identity),
            patch.object(ApiHandler, "store", return_value=store),
        ):
            p.start()
            patches.append(p)
        return identity

    yield _as
    for p in reversed(patches):
        p.stop()


@pytest.mark.unit
def test_signed_out_dashboard_redirects_to_sign_in(as_caller):
    as_caller(FakeIdentity())

    response = invoke_handler(analytics.handler, "GET", "/api/dashboard/analytics")

    assert_redirect_response(response, "/sign-in?redirect_url=%2Fapi%2Fdashboard%2Fanalytics")


@pytest.mark.unit
def test_dashboard_without_plan_redirects_to_pricing(as_caller, store):
    as_caller(FakeIdentity(user_id=BUYER_USER_ID))

    response = invoke_handler(leads.handler, "GET", "/api/dashboard/leads")

    assert_redirect_response(response, "/pricing")
    assert store.all("agent") == []


@pytest.mark.unit
def test_first_dashboard_visit_provisions_agent(as_caller, store):
    as_caller(FakeIdentity(user_id=AGENT_USER_ID, plans={"agent"}))

    response = invoke_handler(analytics.handler, "GET", "/api/dashboard/analytics")

    assert_redirect_response(response, "/dashboard/onboarding")
    assert response["json"] == {"redirect": "/dashboard/onboarding"}
    assert len(store.all("agent")) == 1


@pytest.mark.integration
def test_onboarding_flow_unlocks_dashboard(as_caller, store):
    as_caller(FakeIdentity(user_id=AGENT_USER_ID, plans={"agent"}))

    first = invoke_handler(onboarding.handler, "GET", "/api/dashboard/onboarding")
    assert_redirect_response(first, "/dashboard/onboarding")

    form = invoke_handler(onboarding.handler, "GET", "/api/dashboard/onboarding")
    assert_valid_response(form, 200)
    assert form["json"]["data"]["onboarding_complete"] is False

    submitted = invoke_handler(onboarding.handler, "POST", "/api/dashboard/onboarding", {
        "bio": "Helping families find homes.",
        "phone": "555-0101",
        "license_number": "RE44821",
    })
    assert submitted["status"] == 303
    assert submitted["headers"]["Location"] == "/dashboard"
    assert submitted["json"] == {"success": True, "redirect": "/dashboard"}

    dashboard = invoke_handler(analytics.handler, "GET", "/api/dashboard/analytics")
    assert_valid_response(dashboard, 200)
    assert dashboard["json"]["data"]["listings"]["total"] == 0

    again = invoke_handler(onboarding.handler, "GET", "/api/dashboard/onboarding")
    assert_redirect_response(again, "/dashboard")


@pytest.mark.unit
def test_onboarding_rejects_incomplete_form(as_caller, store, incomplete_agent):
    as_caller(FakeIdentity(user_id=AGENT_USER_ID, plans={"agent"}))

    response = invoke_handler(onboarding.handler, "POST", "/api/dashboard/onboarding", {"bio": "x"})

    assert response["status"] == 400
    assert response["json"]["error"] == "invalid input"
    assert store.get("agent", incomplete_agent["id"])["onboarding_complete"] is False


@pytest.mark.unit
def test_profile_load(as_caller, onboarded_agent):
    as_caller(FakeIdentity(user_id=AGENT_USER_ID, plans={"agent"}))

    response = invoke_handler(profile.handler, "GET", "/api/dashboard/profile")

    assert_valid_response(response, 200)
    assert response["json"]["data"]["id"] == onboarded_agent["id"]
    assert response["json"]["data"]["license_number"] == onboarded_agent["license_number"]


@pytest.mark.unit
def test_create_and_edit_listing(as_caller, store, onboarded_agent):
    as_caller(FakeIdentity(user_id=AGENT_USER_ID, plans={"agent"}))

    created = invoke_handler(listings.handler, "POST", "/api/dashboard/listings", create_listing_input())
    assert_valid_response(created, 200)
    listing_id = created["json"]["data"]["id"]

    updated = invoke_handler(
        listings.handler, "PUT", f"/api/dashboard/listings?id={listing_id}",
        create_listing_input(title="Updated Craftsman Home"),
    )
    assert_valid_response(updated, 200)
    assert store.get("property", listing_id)["title"] == "Updated Craftsman Home"

    loaded = invoke_handler(listings.handler, "GET", f"/api/dashboard/listings?id={listing_id}")
    assert loaded["json"]["data"]["title"] == "Updated Craftsman Home"

    listed = invoke_handler(listings.handler, "GET", "/api/dashboard/listings")
    assert [row["id"] for row in listed["json"]["data"]] == [listing_id]


@pytest.mark.unit
def test_invalid_listing_input(as_caller, store, onboarded_agent):
    as_caller(FakeIdentity(user_id=AGENT_USER_ID, plans={"agent"}))

    response = invoke_handler(listings.handler, "POST", "/api/dashboard/listings", create_listing_input(price=0))

    assert response["status"] == 400
    assert store.all("property") == []


@pytest.mark.unit
def test_update_requires_id(as_caller, onboarded_agent):
    as_caller(FakeIdentity(user_id=AGENT_USER_ID, plans={"agent"}))

    response = invoke_handler(listings.handler, "PUT", "/api/dashboard/listings", create_listing_input())

    assert response["status"] == 400


@pytest.mark.unit
def test_foreign_listing_edit_page_is_404(as_caller, store, onboarded_agent):
    as_caller(FakeIdentity(user_id=AGENT_USER_ID, plans={"agent"}))

    response = invoke_handler(listings.handler, "GET", "/api/dashboard/listings?id=not-mine")

    assert response["status"] == 404


@pytest.mark.unit
def test_lead_status_update(as_caller, store, listing, onboarded_agent):
    lead = store.seed("lead", **create_lead_data(listing["id"], onboarded_agent["id"]))
    as_caller(FakeIdentity(user_id=AGENT_USER_ID, plans={"agent"}))

    response = invoke_handler(leads.handler, "PATCH", "/api/dashboard/leads", {"leadId": lead["id"], "status": "closed"})

    assert_valid_response(response, 200)
    assert response["json"] == {"success": True, "data": {"id": lead["id"], "status": "closed"}}
    assert store.get("lead", lead["id"])["status"] == "closed"


@pytest.mark.unit
def test_lead_status_update_for_foreign_lead(as_caller, store, listing):
    lead = store.seed("lead", **create_lead_data(listing["id"], "another-agent"))
    as_caller(FakeIdentity(user_id=AGENT_USER_ID, plans={"agent"}))

    response = invoke_handler(leads.handler, "PATCH", "/api/dashboard/leads", {"leadId": lead["id"], "status": "closed"})

    assert response["status"] == 403
    assert response["json"] == {"success": False, "error": "unauthorized", "message": "Unauthorized"}


@pytest.mark.unit
def test_store_failure_is_500(as_caller, onboarded_agent):
    as_caller(FakeIdentity(user_id=AGENT_USER_ID, plans={"agent"}))

    with patch("api.dashboard.analytics.get_agent_analytics", side_effect=RuntimeError("database down")):
        response = invoke_handler(analytics.handler, "GET", "/api/dashboard/analytics")

    assert response["status"] == 500
    assert response["json"] == {"error": "internal server error"}
