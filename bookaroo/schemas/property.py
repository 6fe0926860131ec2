"""Pydantic v2 request/response schemas for property endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PropertyImageCreate(BaseModel):
    """An image to attach to a property."""

    image_url: str = Field(..., min_length=1, max_length=1024)


class PropertyCreate(BaseModel):
    """Schema for creating a new property. The owner is always the caller."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    location: str | None = Field(None, max_length=255)
    price_per_night: Decimal = Field(..., ge=0)
    amenities: list[str] | None = None
    images: list[PropertyImageCreate] = Field(default_factory=list)


class PropertyUpdate(BaseModel):
    """Schema for partially updating a property. All fields optional.

    When ``images`` is given it replaces the whole image list.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    location: str | None = Field(None, max_length=255)
    price_per_night: Decimal | None = Field(None, ge=0)
    amenities: list[str] | None = None
    images: list[PropertyImageCreate] | None = None

    @field_validator("name", "price_per_night")
    @classmethod
    def _not_null(cls, value: str | Decimal | None) -> str | Decimal:
        """Omit a required field to leave it unchanged; null cannot clear it."""
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PropertyImageResponse(BaseModel):
    id: uuid.UUID
    image_url: str

    model_config = ConfigDict(from_attributes=True)


class PropertyResponse(BaseModel):
    """Public property information returned from the API."""

    id: uuid.UUID
    owner_id: uuid.UUID
    name: str
    description: str | None = None
    location: str | None = None
    price_per_night: Decimal
    amenities: list | None = None
    images: list[PropertyImageResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PropertyListResponse(BaseModel):
    """Paginated list of properties."""

    items: list[PropertyResponse]
    total: int
