"""Agent access gate: auth, plan check, lazy agent provisioning, onboarding check."""

from datetime import datetime, timezone
from typing import Any, Optional, Type

from pydantic import BaseModel

from src.models.agent import Agent
from src.models.identity import UserProfile
from src.services.document_store import DocumentStore
from src.services.identity import IdentityProvider
from src.services.queries import (
    AGENT_BY_USER_ID_QUERY,
    AGENT_EXISTS_BY_USER_QUERY,
    AGENT_ONBOARDING_CHECK_QUERY,
    Query,
)
from src.utils.config import (
    AGENT_ONBOARDING_PATH,
    DASHBOARD_PATH,
    PRICING_PATH,
    SIGN_IN_PATH,
    get_agent_plan_id,
)
from src.utils.errors import DuplicateDocumentError, RedirectRequired
from src.utils.logging import get_structured_logger, mask_user_id, timed

logger = get_structured_logger(__name__)

DEFAULT_AGENT_NAME = "Agent"


def default_agent_document(user_id: str, profile: Optional[UserProfile]) -> dict[str, Any]:
    """Agent document created on first access, before onboarding."""
    agent = Agent(
        user_id=user_id,
        name=(profile.display_name if profile else "") or DEFAULT_AGENT_NAME,
        email=(profile.primary_email if profile else None) or "",
        onboarding_complete=False,
        created_at=datetime.now(timezone.utc).isoformat(),
    )
    return {"_type": "agent", **agent.model_dump(exclude_none=True)}


async def provision_agent(
    identity: IdentityProvider,
    store: DocumentStore,
    user_id: str,
    profile: Optional[UserProfile] = None,
) -> tuple[Optional[dict], bool]:
    """
    Create the agent document for `user_id` unless one exists.

    Returns (agent, created). `agents.user_id` is unique, so a concurrent
    creator losing the race gets DuplicateDocumentError and reports the
    existing document instead of a second one.
    """
    existing = await store.fetch(AGENT_EXISTS_BY_USER_QUERY, {"user_id": user_id})
    if existing:
        return existing, False

    if profile is None:
        profile = await identity.get_user_profile(user_id)

    try:
        agent = await store.create(default_agent_document(user_id, profile))
    except DuplicateDocumentError:
        logger.info("Agent already provisioned concurrently", user_id=mask_user_id(user_id))
        existing = await store.fetch(AGENT_EXISTS_BY_USER_QUERY, {"user_id": user_id})
        return existing, False

    logger.info(
        "Provisioned agent document",
        user_id=mask_user_id(user_id),
        agent_id=agent.get("id"),
    )
    return agent, True


@timed("require_agent")
async def require_agent(
    identity: IdentityProvider,
    store: DocumentStore,
    query: Query = AGENT_BY_USER_ID_QUERY,
    allow_incomplete: bool = False,
    model: Optional[Type[BaseModel]] = None,
) -> Any:
    """
    Unified gate for every agent-only page and action.

    Returns the agent as selected by `query` (validated into `model` when
    given). Every other outcome raises RedirectRequired:

    - signed out -> /sign-in
    - no agent plan -> /pricing
    - no agent document -> one is created, then /dashboard/onboarding
      (the new document is not returned; the next request fetches it)
    - onboarding incomplete and not `allow_incomplete` -> /dashboard/onboarding

    `query` must take a `user_id` param and select `onboarding_complete`.
    """
    if not query.selects("onboarding_complete"):
        raise ValueError(f"Agent gate query on {query.table} must select onboarding_complete")

    user_id = await identity.current_user_id()
    if not user_id:
        raise RedirectRequired(SIGN_IN_PATH)

    if not await identity.has_plan(get_agent_plan_id()):
        logger.info("Agent gate: no agent plan", user_id=mask_user_id(user_id))
        raise RedirectRequired(PRICING_PATH)

    agent = await store.fetch(query, {"user_id": user_id})

    if not agent:
        await provision_agent(identity, store, user_id)
        raise RedirectRequired(AGENT_ONBOARDING_PATH)

    if not allow_incomplete and not agent.get("onboarding_complete"):
        raise RedirectRequired(AGENT_ONBOARDING_PATH)

    if model is not None:
        return model.model_validate(agent)
    return agent


async def load_agent_onboarding(identity: IdentityProvider, store: DocumentStore) -> dict:
    """Onboarding page load: agents who already finished go to the dashboard."""
    agent = await require_agent(identity, store, AGENT_ONBOARDING_CHECK_QUERY, allow_incomplete=True)
    if agent.get("onboarding_complete"):
        raise RedirectRequired(DASHBOARD_PATH)
    return agent
