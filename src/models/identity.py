"""Identity provider (Clerk) user profile."""

from typing import Any, Optional
from pydantic import BaseModel, Field


class UserProfile(BaseModel):
    """The parts of a Clerk user this app reads."""
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email_addresses: list[str] = Field(default_factory=list)
    public_metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def primary_email(self) -> Optional[str]:
        return self.email_addresses[0] if self.email_addresses else None

    @classmethod
    def from_clerk(cls, payload: dict[str, Any]) -> "UserProfile":
        """Build from a Clerk Backend API user or a webhook `user.*` payload."""
        emails = [
            entry.get("email_address")
            for entry in payload.get("email_addresses") or []
            if isinstance(entry, dict) and entry.get("email_address")
        ]
        return cls(
            id=payload["id"],
            first_name=payload.get("first_name"),
            last_name=payload.get("last_name"),
            email_addresses=emails,
            public_metadata=payload.get("public_metadata") or {},
        )
