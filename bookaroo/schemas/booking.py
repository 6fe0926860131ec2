"""Pydantic v2 request/response schemas for booking endpoints and statistics."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from bookaroo.schemas.property import PropertyResponse
from bookaroo.services.availability import AvailabilitySnapshot

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    """Schema for creating a new booking. The guest is always the caller."""

    property_id: uuid.UUID
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        """Store instants as naive UTC; aware inputs are converted first."""
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @model_validator(mode="after")
    def check_dates(self) -> "BookingCreate":
        """Validate that end_date is strictly after start_date."""
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingResponse(BaseModel):
    """Booking as returned right after creation."""

    id: uuid.UUID
    property_id: uuid.UUID
    guest_id: uuid.UUID
    start_date: datetime
    end_date: datetime
    total_price: Decimal
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GuestBookingResponse(BaseModel):
    """A guest's booking with the booked property embedded."""

    id: uuid.UUID
    property: PropertyResponse
    start_date: datetime
    end_date: datetime
    status: str
    total_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class BookingHistoryItem(BaseModel):
    """One row of a property's booking history as seen by its owner."""

    id: uuid.UUID
    guest_id: uuid.UUID
    guest_name: str
    start_date: datetime
    end_date: datetime
    status: str
    total_price: Decimal


class GuestBookingStatistics(BaseModel):
    total_bookings: int
    total_spent: Decimal
    upcoming_bookings: int

    @classmethod
    def from_snapshot(cls, snapshot: AvailabilitySnapshot) -> "GuestBookingStatistics":
        return cls(
            total_bookings=snapshot.total_bookings,
            total_spent=snapshot.total_amount,
            upcoming_bookings=snapshot.upcoming_bookings,
        )


class OwnerBookingStatistics(BaseModel):
    total_bookings: int
    total_revenue: Decimal
    upcoming_bookings: int

    @classmethod
    def from_snapshot(cls, snapshot: AvailabilitySnapshot) -> "OwnerBookingStatistics":
        return cls(
            total_bookings=snapshot.total_bookings,
            total_revenue=snapshot.total_amount,
            upcoming_bookings=snapshot.upcoming_bookings,
        )


class GuestBookingsResponse(BaseModel):
    """All of a guest's bookings plus spend statistics."""

    bookings: list[GuestBookingResponse]
    statistics: GuestBookingStatistics


class PropertyDetailResponse(PropertyResponse):
    """Owner view of a property: availability, history, and revenue."""

    is_available: bool
    next_available_date: datetime | None = None
    booking_history: list[BookingHistoryItem]
    statistics: OwnerBookingStatistics
