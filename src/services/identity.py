"""Identity/billing capability backed by Clerk.

Session tokens are verified locally with PyJWT; profile reads and metadata
writes go to the Clerk Backend API over httpx.
"""

import logging
import os
from http.cookies import CookieError, SimpleCookie
from typing import Any, Mapping, Optional
from urllib.parse import quote

import httpx
import jwt

from src.models.identity import UserProfile
from src.utils.config import get_clerk_api_url, get_clerk_jwt_key, get_clerk_secret_key
from src.utils.errors import IdentityProviderError

logger = logging.getLogger(__name__)

SESSION_COOKIE = "__session"
CLERK_API_TIMEOUT_SECONDS = 10.0


class IdentityProvider:
    """What the app needs from the identity/billing provider."""

    async def current_user_id(self) -> Optional[str]:
        raise NotImplementedError

    async def has_plan(self, plan_id: str) -> bool:
        raise NotImplementedError

    async def get_user_profile(self, user_id: str) -> UserProfile:
        raise NotImplementedError

    async def update_user_metadata(self, user_id: str, metadata: dict[str, Any]) -> None:
        raise NotImplementedError


def session_token_from_headers(headers: Mapping[str, str]) -> Optional[str]:
    """Bearer token from Authorization, else the `__session` cookie."""
    authorization = headers.get("Authorization") or headers.get("authorization") or ""
    if authorization.startswith("Bearer "):
        token = authorization[len("Bearer "):].strip()
        if token:
            return token

    cookie_header = headers.get("Cookie") or headers.get("cookie")
    if cookie_header:
        try:
            cookies = SimpleCookie(cookie_header)
        except CookieError:
            return None
        morsel = cookies.get(SESSION_COOKIE)
        if morsel and morsel.value:
            return morsel.value
    return None


def _authorized_parties() -> list[str]:
    raw = os.environ.get("CLERK_AUTHORIZED_PARTIES", "")
    return [party.strip() for party in raw.split(",") if party.strip()]


def verify_session_token(token: str) -> Optional[dict[str, Any]]:
    """
    Verify a Clerk session JWT (RS256).

    Returns the claims, or None for any invalid, expired or foreign token.
    """
    try:
        claims = jwt.decode(
            token,
            get_clerk_jwt_key(),
            algorithms=["RS256"],
            options={"require": ["sub", "exp"]},
            leeway=5,
        )
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected session token: {e}")
        return None

    parties = _authorized_parties()
    if parties and claims.get("azp") not in parties:
        logger.warning("Rejected session token from unauthorized party", extra={"azp": claims.get("azp")})
        return None
    return claims


def session_plans(claims: Optional[dict[str, Any]]) -> set[str]:
    """Plan slugs from the `pla` claim, e.g. "u:agent,o:team" -> {"agent", "team"}."""
    if not claims:
        return set()
    raw = claims.get("pla") or ""
    plans = set()
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        plans.add(entry.split(":", 1)[1] if ":" in entry else entry)
    return plans


class ClerkIdentity(IdentityProvider):
    """Identity for one request (claims may be None when signed out)."""

    def __init__(
        self,
        claims: Optional[dict[str, Any]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.claims = claims
        self._http = http_client

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "ClerkIdentity":
        token = session_token_from_headers(headers)
        return cls(verify_session_token(token) if token else None)

    async def current_user_id(self) -> Optional[str]:
        if not self.claims:
            return None
        return self.claims.get("sub")

    async def has_plan(self, plan_id: str) -> bool:
        return plan_id in session_plans(self.claims)

    async def get_user_profile(self, user_id: str) -> UserProfile:
        payload = await self._request("GET", f"/users/{quote(user_id, safe='')}")
        return UserProfile.from_clerk(payload)

    async def update_user_metadata(self, user_id: str, metadata: dict[str, Any]) -> None:
        """Merge `metadata` into the user's public metadata."""
        await self._request(
            "PATCH",
            f"/users/{quote(user_id, safe='')}/metadata",
            json={"public_metadata": metadata},
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{get_clerk_api_url()}{path}"
        headers = {"Authorization": f"Bearer {get_clerk_secret_key()}"}

        try:
            if self._http is not None:
                response = await self._http.request(method, url, headers=headers, **kwargs)
            else:
                async with httpx.AsyncClient(timeout=CLERK_API_TIMEOUT_SECONDS) as client:
                    response = await client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Clerk API {method} {path} failed: {e}")

        if response.status_code >= 400:
            raise IdentityProviderError(
                f"Clerk API {method} {path} returned {response.status_code}"
            )
        return response.json()
