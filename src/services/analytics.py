"""Agent dashboard analytics."""

import asyncio
from collections import Counter

from src.models.analytics import AnalyticsData, LeadCounts, ListingCounts, PropertyLeadCount
from src.services.agent_gate import require_agent
from src.services.document_store import DocumentStore
from src.services.identity import IdentityProvider
from src.services.queries import (
    ANALYTICS_AGENT_QUERY,
    ANALYTICS_LEAD_PROPERTIES_QUERY,
    ANALYTICS_LEADS_CLOSED_QUERY,
    ANALYTICS_LEADS_CONTACTED_QUERY,
    ANALYTICS_LEADS_NEW_QUERY,
    ANALYTICS_LEADS_TOTAL_QUERY,
    ANALYTICS_LISTINGS_ACTIVE_QUERY,
    ANALYTICS_LISTINGS_PENDING_QUERY,
    ANALYTICS_LISTINGS_SOLD_QUERY,
    ANALYTICS_LISTINGS_TOTAL_QUERY,
)

TITLE_MAX_LENGTH = 20


def chart_label(title):
    if not title:
        return "Unknown"
    if len(title) > TITLE_MAX_LENGTH:
        return f"{title[:TITLE_MAX_LENGTH]}..."
    return title


def leads_by_property(rows: list[dict]) -> list[PropertyLeadCount]:
    """Count leads per property, most leads first."""
    counts: Counter = Counter()
    titles: dict = {}
    for row in rows:
        property_id = row.get("property_id")
        counts[property_id] += 1
        titles[property_id] = (row.get("property") or {}).get("title")

    return [
        PropertyLeadCount(name=chart_label(titles[property_id]), leads=count)
        for property_id, count in counts.most_common()
    ]


async def get_agent_analytics(identity: IdentityProvider, store: DocumentStore) -> AnalyticsData:
    agent = await require_agent(identity, store, ANALYTICS_AGENT_QUERY)
    params = {"agent_id": agent["id"]}

    # Independent reads, issued together
    (
        total_listings,
        active_listings,
        pending_listings,
        sold_listings,
        total_leads,
        new_leads,
        contacted_leads,
        closed_leads,
        lead_rows,
    ) = await asyncio.gather(
        store.fetch(ANALYTICS_LISTINGS_TOTAL_QUERY, params),
        store.fetch(ANALYTICS_LISTINGS_ACTIVE_QUERY, params),
        store.fetch(ANALYTICS_LISTINGS_PENDING_QUERY, params),
        store.fetch(ANALYTICS_LISTINGS_SOLD_QUERY, params),
        store.fetch(ANALYTICS_LEADS_TOTAL_QUERY, params),
        store.fetch(ANALYTICS_LEADS_NEW_QUERY, params),
        store.fetch(ANALYTICS_LEADS_CONTACTED_QUERY, params),
        store.fetch(ANALYTICS_LEADS_CLOSED_QUERY, params),
        store.fetch(ANALYTICS_LEAD_PROPERTIES_QUERY, params),
    )

    return AnalyticsData(
        listings=ListingCounts(
            total=total_listings,
            active=active_listings,
            pending=pending_listings,
            sold=sold_listings,
        ),
        leads=LeadCounts(
            total=total_leads,
            new=new_leads,
            contacted=contacted_leads,
            closed=closed_leads,
        ),
        leads_by_property=leads_by_property(lead_rows),
    )
