"""Clerk webhook event handling."""

from typing import Any

from src.models.identity import UserProfile
from src.services.agent_gate import provision_agent
from src.services.document_store import DocumentStore
from src.services.identity import IdentityProvider
from src.utils.config import get_agent_plan_id
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


async def handle_clerk_event(event: dict[str, Any], identity: IdentityProvider, store: DocumentStore) -> str:
    """
    Apply a verified Clerk event. Returns a short outcome label for logging.

    Agent provisioning here is the same create-if-absent the gate runs, so a
    webhook and a first dashboard visit can race without duplicating agents.
    """
    event_type = event.get("type")
    data = event.get("data") or {}

    if event_type == "subscription.created":
        user_id = data.get("user_id")
        if data.get("status") != "active" or not user_id:
            return "ignored"

        _, created = await provision_agent(identity, store, user_id)
        logger.info("Subscription created", user_id=mask_user_id(user_id), agent_created=created)
        return "agent_created" if created else "agent_exists"

    if event_type == "user.updated":
        metadata = data.get("public_metadata") or {}
        if metadata.get("plan") != get_agent_plan_id() or not data.get("id"):
            return "ignored"

        # Legacy path: plan stored in public metadata, profile is in the payload
        profile = UserProfile.from_clerk(data)
        _, created = await provision_agent(identity, store, profile.id, profile=profile)
        logger.info("User updated with agent plan", user_id=mask_user_id(profile.id), agent_created=created)
        return "agent_created" if created else "agent_exists"

    # user.created: the buyer onboarding flow creates the user document
    return "ignored"
