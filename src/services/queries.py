"""Declared document-store reads.

Every query binds caller values through named params; nothing is ever
formatted into the select or filter text.
"""

import re
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class Query(BaseModel):
    """A parameterized read against one table."""
    model_config = ConfigDict(frozen=True)

    table: str
    columns: str = "*"
    filters: dict[str, str] = Field(default_factory=dict, description="column -> param name (equality)")
    in_filters: dict[str, str] = Field(default_factory=dict, description="column -> param name (membership)")
    where: dict[str, Any] = Field(default_factory=dict, description="column -> constant (equality)")
    order_by: Optional[str] = None
    descending: bool = True
    limit: Optional[int] = None
    first: bool = False
    count: bool = False

    def selects(self, column: str) -> bool:
        """Whether the query returns `column` at the top level."""
        if self.columns.strip() == "*":
            return True
        top_level = re.sub(r"\([^)]*\)", "", self.columns)
        return re.search(rf"(^|,)\s*{re.escape(column)}\s*(,|$)", top_level) is not None

    def param_names(self) -> set[str]:
        return set(self.filters.values()) | set(self.in_filters.values())


# Agents

AGENT_BY_USER_ID_QUERY = Query(
    table="agents",
    columns="id, user_id, name, email, onboarding_complete",
    filters={"user_id": "user_id"},
    first=True,
)

AGENT_PROFILE_QUERY = Query(
    table="agents",
    columns="id, name, email, phone, photo, bio, license_number, agency, onboarding_complete",
    filters={"user_id": "user_id"},
    first=True,
)

AGENT_EXISTS_BY_USER_QUERY = Query(
    table="agents",
    columns="id",
    filters={"user_id": "user_id"},
    first=True,
)

AGENT_ONBOARDING_CHECK_QUERY = Query(
    table="agents",
    columns="id, onboarding_complete",
    filters={"user_id": "user_id"},
    first=True,
)

ANALYTICS_AGENT_QUERY = Query(
    table="agents",
    columns="id, name, onboarding_complete",
    filters={"user_id": "user_id"},
    first=True,
)

# Properties

AGENT_LISTINGS_QUERY = Query(
    table="properties",
    columns="id, title, slug, price, status, bedrooms, bathrooms, images, created_at",
    filters={"agent_id": "agent_id"},
    order_by="created_at",
)

LISTING_BY_ID_QUERY = Query(
    table="properties",
    columns=(
        "id, title, description, price, property_type, status, bedrooms, bathrooms, "
        "square_feet, year_built, address, location, images, amenities, agent_id"
    ),
    filters={"id": "id"},
    first=True,
)

LISTING_OWNER_QUERY = Query(
    table="properties",
    columns="id, agent_id",
    filters={"id": "id"},
    first=True,
)

PROPERTY_AGENT_QUERY = Query(
    table="properties",
    columns="id, agent_id",
    filters={"id": "property_id"},
    first=True,
)

SAVED_PROPERTIES_QUERY = Query(
    table="properties",
    columns="id, title, slug, price, bedrooms, bathrooms, square_feet, address, images, status",
    in_filters={"id": "ids"},
)

# Leads

AGENT_LEADS_QUERY = Query(
    table="leads",
    columns="id, buyer_name, buyer_email, buyer_phone, status, created_at, property:properties(id, title, slug)",
    filters={"agent_id": "agent_id"},
    order_by="created_at",
)

LEAD_OWNER_QUERY = Query(
    table="leads",
    columns="id, agent_id",
    filters={"id": "lead_id"},
    first=True,
)

LEAD_EXISTS_QUERY = Query(
    table="leads",
    columns="id",
    filters={"property_id": "property_id", "buyer_email": "email"},
    first=True,
)

# Users

USER_EXISTS_QUERY = Query(
    table="users",
    columns="id",
    filters={"clerk_id": "clerk_id"},
    first=True,
)

USER_CONTACT_QUERY = Query(
    table="users",
    columns="id, name, email, phone",
    filters={"clerk_id": "clerk_id"},
    first=True,
)

USER_SAVED_IDS_QUERY = Query(
    table="users",
    columns="id, saved_listings",
    filters={"clerk_id": "clerk_id"},
    first=True,
)

# Analytics


def _listing_count(status: Optional[str] = None) -> Query:
    return Query(
        table="properties",
        columns="id",
        filters={"agent_id": "agent_id"},
        where={"status": status} if status else {},
        count=True,
    )


def _lead_count(status: Optional[str] = None) -> Query:
    return Query(
        table="leads",
        columns="id",
        filters={"agent_id": "agent_id"},
        where={"status": status} if status else {},
        count=True,
    )


ANALYTICS_LISTINGS_TOTAL_QUERY = _listing_count()
ANALYTICS_LISTINGS_ACTIVE_QUERY = _listing_count("active")
ANALYTICS_LISTINGS_PENDING_QUERY = _listing_count("pending")
ANALYTICS_LISTINGS_SOLD_QUERY = _listing_count("sold")

ANALYTICS_LEADS_TOTAL_QUERY = _lead_count()
ANALYTICS_LEADS_NEW_QUERY = _lead_count("new")
ANALYTICS_LEADS_CONTACTED_QUERY = _lead_count("contacted")
ANALYTICS_LEADS_CLOSED_QUERY = _lead_count("closed")

ANALYTICS_LEAD_PROPERTIES_QUERY = Query(
    table="leads",
    columns="property_id, property:properties(title)",
    filters={"agent_id": "agent_id"},
)
