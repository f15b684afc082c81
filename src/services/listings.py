"""Listing (property) mutations restricted to the owning agent."""

import re
from datetime import datetime, timezone

from src.models.property import ListingInput, Property
from src.models.result import ActionResult, ErrorKind
from src.services.agent_gate import require_agent
from src.services.agents import get_agent_by_user_id
from src.services.document_store import DocumentStore, generate_document_id
from src.services.identity import IdentityProvider
from src.services.queries import (
    AGENT_LISTINGS_QUERY,
    AGENT_ONBOARDING_CHECK_QUERY,
    LISTING_BY_ID_QUERY,
    LISTING_OWNER_QUERY,
)
from src.utils.errors import NotFoundError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


def slugify(title: str, suffix: str) -> str:
    """URL slug from the title plus a short unique suffix."""
    base = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")[:80].rstrip("-")
    return f"{base}-{suffix.lower()}" if base else suffix.lower()


async def _onboarded_agent(identity: IdentityProvider, store: DocumentStore):
    """(agent, None) for an onboarded agent caller, else (None, error result)."""
    user_id = await identity.current_user_id()
    if not user_id:
        return None, ActionResult.err(ErrorKind.NOT_AUTHENTICATED, "Not authenticated")

    agent = await get_agent_by_user_id(store, user_id, AGENT_ONBOARDING_CHECK_QUERY)
    if not agent or not agent.get("onboarding_complete"):
        return None, ActionResult.err(ErrorKind.REQUIRES_ONBOARDING, "Complete your agent profile first.")
    return agent, None


async def create_listing(
    identity: IdentityProvider,
    store: DocumentStore,
    data: ListingInput,
) -> ActionResult:
    agent, error = await _onboarded_agent(identity, store)
    if error:
        return error

    listing_id = generate_document_id()
    document = Property(
        **data.to_document_fields(),
        id=listing_id,
        slug=slugify(data.title, listing_id[-6:]),
        agent_id=agent["id"],
        featured=False,
        created_at=datetime.now(timezone.utc).isoformat(),
    )

    listing = await store.create({"_type": "property", **document.model_dump(mode="json", exclude_none=True)})

    logger.info("Listing created", listing_id=listing_id, agent_id=agent["id"])
    return ActionResult.ok(data={"id": listing["id"], "slug": listing.get("slug")})


async def update_listing(
    identity: IdentityProvider,
    store: DocumentStore,
    listing_id: str,
    data: ListingInput,
) -> ActionResult:
    """Patch a listing after re-checking the caller owns it."""
    agent, error = await _onboarded_agent(identity, store)
    if error:
        return error

    listing = await store.fetch(LISTING_OWNER_QUERY, {"id": listing_id})
    if not listing:
        return ActionResult.err(ErrorKind.NOT_FOUND, "Listing not found")
    if listing.get("agent_id") != agent["id"]:
        logger.warning("Rejected listing update by non-owner", listing_id=listing_id, agent_id=agent["id"])
        return ActionResult.err(ErrorKind.UNAUTHORIZED, "Unauthorized")

    await store.patch("property", listing_id).set(data.to_document_fields()).commit()
    return ActionResult.ok(data={"id": listing_id})


async def load_listing_for_edit(
    identity: IdentityProvider,
    store: DocumentStore,
    listing_id: str,
) -> dict:
    """Edit page load. A listing owned by someone else looks like a missing one."""
    agent = await require_agent(identity, store)

    listing = await store.fetch(LISTING_BY_ID_QUERY, {"id": listing_id})
    if not listing or listing.get("agent_id") != agent["id"]:
        raise NotFoundError(f"Listing not found: {listing_id}")
    return listing


async def list_agent_listings(identity: IdentityProvider, store: DocumentStore) -> list[dict]:
    agent = await require_agent(identity, store)
    return await store.fetch(AGENT_LISTINGS_QUERY, {"agent_id": agent["id"]})
