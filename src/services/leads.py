"""Lead lifecycle: buyer inquiries and agent-side status updates."""

from datetime import datetime, timezone
from typing import Union

from src.models.lead import Lead, LeadStatus
from src.models.result import ActionResult, ErrorKind
from src.services.agent_gate import require_agent
from src.services.agents import get_agent_by_user_id
from src.services.document_store import DocumentStore
from src.services.identity import IdentityProvider
from src.services.queries import (
    AGENT_LEADS_QUERY,
    LEAD_EXISTS_QUERY,
    LEAD_OWNER_QUERY,
    PROPERTY_AGENT_QUERY,
    USER_CONTACT_QUERY,
)
from src.utils.errors import DuplicateDocumentError
from src.utils.logging import get_structured_logger, mask_sensitive_data, mask_user_id

logger = get_structured_logger(__name__)

ALREADY_CONTACTED_MESSAGE = "You have already contacted this agent."
ONBOARDING_REQUIRED_MESSAGE = "User profile not found. Please complete onboarding first."


async def create_lead(
    identity: IdentityProvider,
    store: DocumentStore,
    property_id: str,
) -> ActionResult:
    """
    Record a buyer's inquiry about a property.

    Buyer details come from the caller's user document and the agent from the
    property document, so a buyer cannot route a lead to an arbitrary agent.
    At most one lead exists per (property, buyer email).
    """
    user_id = await identity.current_user_id()
    if not user_id:
        return ActionResult.err(ErrorKind.NOT_AUTHENTICATED, "Not authenticated")

    user = await store.fetch(USER_CONTACT_QUERY, {"clerk_id": user_id})
    if not user:
        return ActionResult.err(ErrorKind.REQUIRES_ONBOARDING, ONBOARDING_REQUIRED_MESSAGE)

    existing = await store.fetch(LEAD_EXISTS_QUERY, {"property_id": property_id, "email": user["email"]})
    if existing:
        return ActionResult.ok(message=ALREADY_CONTACTED_MESSAGE)

    listing = await store.fetch(PROPERTY_AGENT_QUERY, {"property_id": property_id})
    if not listing:
        return ActionResult.err(ErrorKind.NOT_FOUND, "Property not found")

    try:
        lead = await store.create({"_type": "lead", **Lead(
            property_id=property_id,
            agent_id=listing["agent_id"],
            buyer_name=user["name"],
            buyer_email=user["email"],
            buyer_phone=user.get("phone") or "",
            status=LeadStatus.NEW,
            created_at=datetime.now(timezone.utc).isoformat(),
        ).model_dump(mode="json", exclude_none=True)})
    except DuplicateDocumentError:
        # Same buyer submitted twice concurrently; the unique index kept one
        return ActionResult.ok(message=ALREADY_CONTACTED_MESSAGE)

    logger.info(
        "Lead created",
        lead_id=lead.get("id"),
        property_id=property_id,
        buyer=mask_sensitive_data(user["email"]),
    )
    return ActionResult.ok(data={"id": lead.get("id")})


async def update_lead_status(
    identity: IdentityProvider,
    store: DocumentStore,
    lead_id: str,
    status: Union[LeadStatus, str],
) -> ActionResult:
    """Set a lead's status. Only the agent the lead belongs to may do this."""
    try:
        status = LeadStatus(status)
    except ValueError:
        return ActionResult.err(ErrorKind.INVALID_INPUT, f"Invalid lead status: {status}")

    user_id = await identity.current_user_id()
    if not user_id:
        return ActionResult.err(ErrorKind.NOT_AUTHENTICATED, "Not authenticated")

    agent = await get_agent_by_user_id(store, user_id)
    if not agent:
        return ActionResult.err(ErrorKind.NOT_FOUND, "Agent not found")

    lead = await store.fetch(LEAD_OWNER_QUERY, {"lead_id": lead_id})
    if not lead or lead.get("agent_id") != agent["id"]:
        logger.warning(
            "Rejected lead status update",
            lead_id=lead_id,
            user_id=mask_user_id(user_id),
        )
        return ActionResult.err(ErrorKind.UNAUTHORIZED, "Unauthorized")

    # Any status may follow any other; no transition table
    await store.patch("lead", lead_id).set({"status": status.value}).commit()
    return ActionResult.ok(data={"id": lead_id, "status": status.value})


async def list_agent_leads(identity: IdentityProvider, store: DocumentStore) -> list[dict]:
    """Leads for the gated agent, newest first, with property title and slug."""
    agent = await require_agent(identity, store)
    return await store.fetch(AGENT_LEADS_QUERY, {"agent_id": agent["id"]})
