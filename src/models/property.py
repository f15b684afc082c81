"""Property (listing) models."""

from datetime import date
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator


class PropertyType(str, Enum):
    HOUSE = "house"
    APARTMENT = "apartment"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    LAND = "land"


class PropertyStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    SOLD = "sold"


class Address(BaseModel):
    street: str = Field(..., min_length=1, description="Street is required")
    city: str = Field(..., min_length=1, description="City is required")
    state: str = Field(..., min_length=1, description="State is required")
    zip_code: str = Field(..., min_length=1, description="ZIP code is required")


class GeoPoint(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class Property(BaseModel):
    """Real estate listing."""
    id: Optional[str] = Field(None, description="Document ID (ULID)")
    title: str = Field(..., description="Listing title")
    slug: Optional[str] = Field(None, description="URL slug")
    description: Optional[str] = Field(None, description="Listing description")
    price: float = Field(..., description="Asking price")
    property_type: PropertyType = Field(..., description="house, apartment, condo, townhouse, land")
    status: PropertyStatus = Field(default=PropertyStatus.ACTIVE, description="active, pending, sold")
    bedrooms: int = Field(default=0, ge=0)
    bathrooms: float = Field(default=0, ge=0)
    square_feet: int = Field(default=0, ge=0)
    year_built: Optional[int] = None
    address: Optional[Address] = None
    location: Optional[GeoPoint] = None
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list, description="Image asset references")
    agent_id: str = Field(..., description="Owning agent ID (FK)")
    featured: bool = False
    created_at: Optional[str] = None


class ListingInput(BaseModel):
    """Create/edit listing form submission."""
    title: str = Field(..., min_length=5)
    description: str = Field(..., min_length=20)
    price: float = Field(..., gt=0)
    property_type: PropertyType
    status: Optional[PropertyStatus] = None
    bedrooms: int = Field(..., ge=0)
    bathrooms: float = Field(..., ge=0)
    square_feet: int = Field(..., ge=0)
    year_built: Optional[int] = None
    address: Address
    location: Optional[GeoPoint] = None
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)

    @field_validator("year_built")
    @classmethod
    def check_year_built(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return value
        if value < 1800 or value > date.today().year:
            raise ValueError(f"year_built must be between 1800 and {date.today().year}")
        return value

    def to_document_fields(self) -> dict[str, Any]:
        """Fields written to the properties table (status only when given)."""
        return self.model_dump(mode="json", exclude_none=True)
