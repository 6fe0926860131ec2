"""Pydantic v2 schemas for the role-dependent dashboard."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from bookaroo.schemas.booking import GuestBookingResponse, GuestBookingStatistics, OwnerBookingStatistics
from bookaroo.schemas.property import PropertyResponse


class OwnerPropertyOverview(BaseModel):
    """A property with its current availability and revenue statistics."""

    property: PropertyResponse
    is_available: bool
    next_available_date: datetime | None = None
    statistics: OwnerBookingStatistics


class OwnerDashboardResponse(BaseModel):
    role: Literal["owner"] = "owner"
    properties: list[OwnerPropertyOverview]


class GuestDashboardResponse(BaseModel):
    role: Literal["guest"] = "guest"
    bookings: list[GuestBookingResponse]
    statistics: GuestBookingStatistics
