"""User model - buyers who completed onboarding."""

from typing import Optional
from pydantic import BaseModel, Field


class User(BaseModel):
    """Buyer document, one per Clerk user."""
    id: Optional[str] = Field(None, description="Document ID (ULID)")
    clerk_id: str = Field(..., description="Clerk user ID (unique)")
    name: str = Field(..., description="Full name")
    email: str = Field(..., description="Email address")
    phone: Optional[str] = Field(None, description="Phone number")
    saved_listings: list[str] = Field(default_factory=list, description="Saved property IDs, in save order")
    created_at: Optional[str] = None


class UserProfileData(BaseModel):
    """Buyer profile form submission."""
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None


class UserOnboardingData(UserProfileData):
    """Buyer onboarding form submission."""
    email: Optional[str] = Field(None, description="Fallback when Clerk has no email on file")
