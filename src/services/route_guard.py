"""Route-level protection applied before any handler logic runs."""

import re
from urllib.parse import urlencode

from src.services.identity import IdentityProvider
from src.utils.config import PRICING_PATH, SIGN_IN_PATH, get_agent_plan_id
from src.utils.errors import RedirectRequired

PUBLIC_ROUTES = [
    re.compile(r"^/api/health(/.*)?$"),
    re.compile(r"^/api/webhooks(/.*)?$"),
]

PROTECTED_ROUTES = [
    re.compile(r"^/api/dashboard(/.*)?$"),
    re.compile(r"^/api/saved(/.*)?$"),
    re.compile(r"^/api/onboarding(/.*)?$"),
    re.compile(r"^/api/leads(/.*)?$"),
]

AGENT_ROUTES = [
    re.compile(r"^/api/dashboard(/.*)?$"),
]


def _matches(patterns, path: str) -> bool:
    return any(pattern.match(path) for pattern in patterns)


async def guard_route(path: str, identity: IdentityProvider) -> None:
    """
    Raise RedirectRequired when `path` needs a signed-in user or the agent plan.

    `path` is the request path without the query string.
    """
    if _matches(PUBLIC_ROUTES, path):
        return

    user_id = await identity.current_user_id()

    if _matches(PROTECTED_ROUTES, path) and not user_id:
        raise RedirectRequired(f"{SIGN_IN_PATH}?{urlencode({'redirect_url': path})}")

    if _matches(AGENT_ROUTES, path) and user_id:
        if not await identity.has_plan(get_agent_plan_id()):
            raise RedirectRequired(PRICING_PATH)
