"""Agent model - subscribed real-estate professionals."""

from typing import Optional
from pydantic import BaseModel, Field


class Agent(BaseModel):
    """Agent document, one per Clerk user with an agent subscription."""
    id: Optional[str] = Field(None, description="Document ID (ULID)")
    user_id: str = Field(..., description="Clerk user ID (unique, immutable)")
    name: str = Field(default="Agent", description="Display name")
    email: str = Field(default="", description="Email address")
    phone: Optional[str] = Field(None, description="Phone number")
    bio: Optional[str] = Field(None, description="Short professional bio")
    license_number: Optional[str] = Field(None, description="Real estate license number")
    agency: Optional[str] = Field(None, description="Agency / brokerage name")
    photo: Optional[str] = Field(None, description="Profile photo asset reference")
    onboarding_complete: bool = Field(default=False, description="Agent finished onboarding")
    created_at: Optional[str] = None


class AgentProfile(BaseModel):
    """Shape returned by the agent profile query."""
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    photo: Optional[str] = None
    bio: Optional[str] = None
    license_number: Optional[str] = None
    agency: Optional[str] = None
    onboarding_complete: bool = False


class AgentProfileData(BaseModel):
    """Agent profile form submission."""
    bio: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    license_number: str = Field(..., min_length=1)
    agency: Optional[str] = None


class AgentOnboardingData(AgentProfileData):
    """Agent onboarding form submission (same fields as the profile form)."""
    pass
