"""Buyer onboarding, profile and saved listings."""

from datetime import datetime, timezone

from src.models.result import ActionResult, ErrorKind
from src.models.user import User, UserOnboardingData, UserProfileData
from src.services.document_store import DocumentStore
from src.services.identity import IdentityProvider
from src.services.queries import SAVED_PROPERTIES_QUERY, USER_EXISTS_QUERY, USER_SAVED_IDS_QUERY
from src.utils.config import HOME_PATH
from src.utils.errors import DuplicateDocumentError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


async def complete_user_onboarding(
    identity: IdentityProvider,
    store: DocumentStore,
    data: UserOnboardingData,
) -> ActionResult:
    """
    Create or update the buyer's user document.

    The user document is the canonical onboarding record; the Clerk metadata
    flag written afterwards is only a mirror for the frontend.
    """
    user_id = await identity.current_user_id()
    if not user_id:
        return ActionResult.err(ErrorKind.NOT_AUTHENTICATED, "Not authenticated")

    profile = await identity.get_user_profile(user_id)
    email = profile.primary_email or data.email
    if not email:
        return ActionResult.err(ErrorKind.INVALID_INPUT, "An email address is required")

    existing = await store.fetch(USER_EXISTS_QUERY, {"clerk_id": user_id})
    if not existing:
        try:
            await store.create({"_type": "user", **User(
                clerk_id=user_id,
                name=data.name,
                email=email,
                phone=data.phone,
                saved_listings=[],
                created_at=datetime.now(timezone.utc).isoformat(),
            ).model_dump(exclude_none=True)})
        except DuplicateDocumentError:
            # A concurrent submission created it; fall through to the update
            existing = await store.fetch(USER_EXISTS_QUERY, {"clerk_id": user_id})

    if existing:
        await store.patch("user", existing["id"]).set({
            "name": data.name,
            "phone": data.phone,
        }).commit()

    await identity.update_user_metadata(user_id, {"onboarding_complete": True})

    logger.info("User onboarding completed", user_id=mask_user_id(user_id), user_created=not existing)
    return ActionResult.ok(redirect=HOME_PATH)


async def update_user_profile(
    identity: IdentityProvider,
    store: DocumentStore,
    data: UserProfileData,
) -> ActionResult:
    user_id = await identity.current_user_id()
    if not user_id:
        return ActionResult.err(ErrorKind.NOT_AUTHENTICATED, "Not authenticated")

    user = await store.fetch(USER_EXISTS_QUERY, {"clerk_id": user_id})
    if not user:
        return ActionResult.err(ErrorKind.NOT_FOUND, "User not found")

    await store.patch("user", user["id"]).set({"name": data.name, "phone": data.phone}).commit()
    return ActionResult.ok()


async def toggle_saved_listing(
    identity: IdentityProvider,
    store: DocumentStore,
    property_id: str,
) -> ActionResult:
    """
    Save the property if it is not saved, otherwise unsave it.

    Read-then-write with no concurrency token: two tabs toggling at once can
    both read the same state.
    """
    user_id = await identity.current_user_id()
    if not user_id:
        return ActionResult.err(ErrorKind.NOT_AUTHENTICATED, "Not authenticated")

    user = await store.fetch(USER_SAVED_IDS_QUERY, {"clerk_id": user_id})
    if not user:
        return ActionResult.err(ErrorKind.REQUIRES_ONBOARDING, "Complete your profile to save listings.")

    is_saved = property_id in (user.get("saved_listings") or [])

    if is_saved:
        await store.patch("user", user["id"]).remove("saved_listings", [property_id]).commit()
    else:
        await store.patch("user", user["id"]) \
            .set_if_missing({"saved_listings": []}) \
            .append("saved_listings", [property_id]) \
            .commit()

    return ActionResult.ok(data={"saved": not is_saved})


async def get_user_saved_ids(identity: IdentityProvider, store: DocumentStore) -> list[str]:
    user_id = await identity.current_user_id()
    if not user_id:
        return []

    user = await store.fetch(USER_SAVED_IDS_QUERY, {"clerk_id": user_id})
    if not user:
        return []
    return list(user.get("saved_listings") or [])


async def is_property_saved(identity: IdentityProvider, store: DocumentStore, property_id: str) -> bool:
    return property_id in await get_user_saved_ids(identity, store)


async def list_saved_properties(identity: IdentityProvider, store: DocumentStore) -> list[dict]:
    """Saved properties in the order they were saved."""
    saved_ids = await get_user_saved_ids(identity, store)
    if not saved_ids:
        return []

    rows = await store.fetch(SAVED_PROPERTIES_QUERY, {"ids": saved_ids})
    by_id = {row["id"]: row for row in rows}
    return [by_id[saved_id] for saved_id in saved_ids if saved_id in by_id]
