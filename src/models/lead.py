"""Lead model - buyer inquiries."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class LeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    CLOSED = "closed"


class Lead(BaseModel):
    """Inquiry from one buyer about one property, routed to its agent."""
    id: Optional[str] = Field(None, description="Document ID (ULID)")
    property_id: str = Field(..., description="Property ID (FK)")
    agent_id: str = Field(..., description="Agent ID (FK)")
    buyer_name: str = Field(..., description="Buyer name")
    buyer_email: str = Field(..., description="Buyer email")
    buyer_phone: str = Field(default="", description="Buyer phone")
    status: LeadStatus = Field(default=LeadStatus.NEW, description="Status: new, contacted, closed")
    created_at: Optional[str] = None
