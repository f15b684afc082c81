"""Agent profile and onboarding mutations."""

from typing import Optional

from src.models.agent import AgentOnboardingData, AgentProfileData
from src.models.result import ActionResult, ErrorKind
from src.services.document_store import DocumentStore
from src.services.identity import IdentityProvider
from src.services.queries import AGENT_BY_USER_ID_QUERY, Query
from src.utils.config import DASHBOARD_PATH
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


async def get_agent_by_user_id(
    store: DocumentStore,
    user_id: str,
    query: Query = AGENT_BY_USER_ID_QUERY,
) -> Optional[dict]:
    return await store.fetch(query, {"user_id": user_id})


def _profile_fields(data: AgentProfileData) -> dict:
    return {
        "bio": data.bio,
        "phone": data.phone,
        "license_number": data.license_number,
        "agency": data.agency or "",
    }


async def complete_agent_onboarding(
    identity: IdentityProvider,
    store: DocumentStore,
    data: AgentOnboardingData,
) -> ActionResult:
    """Save the onboarding form and mark the agent onboarded."""
    user_id = await identity.current_user_id()
    if not user_id:
        return ActionResult.err(ErrorKind.NOT_AUTHENTICATED, "Not authenticated")

    agent = await get_agent_by_user_id(store, user_id)
    if not agent:
        return ActionResult.err(ErrorKind.NOT_FOUND, "Agent not found")

    await store.patch("agent", agent["id"]).set({
        **_profile_fields(data),
        "onboarding_complete": True,
    }).commit()

    logger.info("Agent onboarding completed", user_id=mask_user_id(user_id), agent_id=agent["id"])
    return ActionResult.ok(redirect=DASHBOARD_PATH)


async def update_agent_profile(
    identity: IdentityProvider,
    store: DocumentStore,
    data: AgentProfileData,
) -> ActionResult:
    user_id = await identity.current_user_id()
    if not user_id:
        return ActionResult.err(ErrorKind.NOT_AUTHENTICATED, "Not authenticated")

    agent = await get_agent_by_user_id(store, user_id)
    if not agent:
        return ActionResult.err(ErrorKind.NOT_FOUND, "Agent not found")

    await store.patch("agent", agent["id"]).set(_profile_fields(data)).commit()
    return ActionResult.ok()
