"""Tests for agent onboarding and profile mutations."""

import pytest

from src.models.agent import AgentOnboardingData, AgentProfileData
from src.models.result import ErrorKind
from src.services.agent_gate import require_agent
from src.services.agents import complete_agent_onboarding, update_agent_profile
from tests.utils.assertions import assert_result_error, assert_result_ok


def _onboarding(**overrides):
    data = {"bio": "Helping families find homes since 2010.", "phone": "555-0101", "license_number": "RE44821"}
    data.update(overrides)
    return AgentOnboardingData(**data)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_complete_onboarding_sets_flag_and_fields(store, agent_identity, incomplete_agent):
    result = await complete_agent_onboarding(agent_identity, store, _onboarding(agency="Harbor Realty"))

    assert_result_ok(result)
    assert result.redirect == "/dashboard"
    agent = store.get("agent", incomplete_agent["id"])
    assert agent["onboarding_complete"] is True
    assert agent["license_number"] == "RE44821"
    assert agent["agency"] == "Harbor Realty"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_gate_passes_after_onboarding(store, agent_identity, incomplete_agent):
    await complete_agent_onboarding(agent_identity, store, _onboarding())

    agent = await require_agent(agent_identity, store)

    assert agent["id"] == incomplete_agent["id"]
    assert agent["onboarding_complete"] is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_complete_onboarding_defaults_agency_to_empty(store, agent_identity, incomplete_agent):
    await complete_agent_onboarding(agent_identity, store, _onboarding())

    assert store.get("agent", incomplete_agent["id"])["agency"] == ""


@pytest.mark.unit
@pytest.mark.asyncio
async def test_complete_onboarding_requires_authentication(store, signed_out_identity):
    result = await complete_agent_onboarding(signed_out_identity, store, _onboarding())

    assert_result_error(result, ErrorKind.NOT_AUTHENTICATED)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_complete_onboarding_without_agent_document(store, agent_identity):
    result = await complete_agent_onboarding(agent_identity, store, _onboarding())

    assert_result_error(result, ErrorKind.NOT_FOUND)
    assert store.all("agent") == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_profile_keeps_onboarding_flag(store, agent_identity, onboarded_agent):
    data = AgentProfileData(bio="New bio", phone="555-0199", license_number="RE99999", agency=None)

    result = await update_agent_profile(agent_identity, store, data)

    assert_result_ok(result)
    agent = store.get("agent", onboarded_agent["id"])
    assert agent["bio"] == "New bio"
    assert agent["agency"] == ""
    assert agent["onboarding_complete"] is True
