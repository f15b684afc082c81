"""Agent dashboard analytics."""

from pydantic import BaseModel


class ListingCounts(BaseModel):
    total: int = 0
    active: int = 0
    pending: int = 0
    sold: int = 0


class LeadCounts(BaseModel):
    total: int = 0
    new: int = 0
    contacted: int = 0
    closed: int = 0


class PropertyLeadCount(BaseModel):
    name: str
    leads: int


class AnalyticsData(BaseModel):
    listings: ListingCounts
    leads: LeadCounts
    leads_by_property: list[PropertyLeadCount]
