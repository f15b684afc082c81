"""Shared pytest fixtures and configuration."""

import os
import pytest
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("CLERK_SECRET_KEY", "sk_test_secret")
os.environ.setdefault("CLERK_API_URL", "https://api.clerk.test/v1")
os.environ.setdefault("CLERK_WEBHOOK_SECRET", "whsec_dGVzdC13ZWJob29rLXNlY3JldA==")
os.environ.setdefault("AGENT_PLAN_ID", "agent")
os.environ.setdefault("LOG_FORMAT", "text")

from tests.utils.fakes import FakeIdentity, InMemoryDocumentStore  # noqa: E402
from tests.utils.factories import create_agent_data, create_property_data, create_user_data  # noqa: E402

AGENT_USER_ID = "user_2agentABCDEF123456"
BUYER_USER_ID = "user_2buyerABCDEF123456"


@pytest.fixture
def store():
    """Empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def signed_out_identity():
    return FakeIdentity()


@pytest.fixture
def agent_identity():
    """Signed-in user holding the agent plan."""
    return FakeIdentity(user_id=AGENT_USER_ID, plans={"agent"})


@pytest.fixture
def buyer_identity():
    """Signed-in user with no plan."""
    return FakeIdentity(user_id=BUYER_USER_ID)


@pytest.fixture
def onboarded_agent(store):
    """Agent document for AGENT_USER_ID with onboarding finished."""
    return store.seed("agent", **create_agent_data(user_id=AGENT_USER_ID, onboarding_complete=True))


@pytest.fixture
def incomplete_agent(store):
    """Agent document for AGENT_USER_ID still in onboarding."""
    return store.seed("agent", **create_agent_data(user_id=AGENT_USER_ID, onboarding_complete=False))


@pytest.fixture
def listing(store, onboarded_agent):
    """Active listing owned by the onboarded agent."""
    return store.seed("property", **create_property_data(agent_id=onboarded_agent["id"]))


@pytest.fixture
def buyer(store):
    """User document for BUYER_USER_ID."""
    return store.seed("user", **create_user_data(clerk_id=BUYER_USER_ID))


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2025-03-14 12:00:00") as frozen_time:
        yield frozen_time
