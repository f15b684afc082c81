"""Application configuration read from the environment."""

import os

from src.utils.errors import IdentityProviderError, WebhookVerificationError

# Redirect targets for page-level operations
SIGN_IN_PATH = "/sign-in"
PRICING_PATH = "/pricing"
AGENT_ONBOARDING_PATH = "/dashboard/onboarding"
DASHBOARD_PATH = "/dashboard"
HOME_PATH = "/"

DEFAULT_CLERK_API_URL = "https://api.clerk.com/v1"


def get_environment() -> str:
    """Deployment environment name (production, preview, development, test...)."""
    return os.environ.get("ENVIRONMENT", "production").lower()


def get_agent_plan_id() -> str:
    """Billing plan slug that grants agent access."""
    return os.environ.get("AGENT_PLAN_ID", "agent")


def get_clerk_api_url() -> str:
    return os.environ.get("CLERK_API_URL", DEFAULT_CLERK_API_URL).rstrip("/")


def get_clerk_secret_key() -> str:
    """Get Clerk secret key for Backend API calls."""
    secret = os.environ.get("CLERK_SECRET_KEY", "").strip()
    if not secret:
        raise IdentityProviderError("CLERK_SECRET_KEY not set")
    return secret


def get_clerk_jwt_key() -> str:
    """PEM public key used to verify session tokens."""
    key = os.environ.get("CLERK_JWT_KEY", "").strip()
    if not key:
        raise IdentityProviderError("CLERK_JWT_KEY not set")
    # Vercel env vars often carry escaped newlines
    return key.replace("\\n", "\n")


def get_webhook_secret() -> str:
    """Get Clerk webhook signing secret from environment."""
    secret = os.environ.get("CLERK_WEBHOOK_SECRET", "").strip()
    if not secret:
        raise WebhookVerificationError("CLERK_WEBHOOK_SECRET not set")
    return secret
