"""Availability and booking statistics derived from a set of bookings.

The same single pass serves owners (revenue for one property) and guests
(spend across their stays). Results are recomputed on every read.
"""

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from bookaroo.models.booking import OCCUPYING_STATUSES, Booking


def utcnow() -> datetime:
    """Current time as naive UTC, matching how booking dates are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class AvailabilitySnapshot:
    """Derived view of a booking set at a given instant."""

    is_available: bool
    next_available_date: datetime | None
    total_bookings: int
    total_amount: Decimal  # revenue for owners, spend for guests
    upcoming_bookings: int
    property_id: uuid.UUID | None = None


def summarize(
    bookings: Iterable[Booking],
    now: datetime,
    property_id: uuid.UUID | None = None,
) -> AvailabilitySnapshot:
    """Scan bookings once and compute availability and totals.

    Every booking counts toward ``total_bookings`` and ``total_amount``,
    whatever its status. Only pending and confirmed bookings affect
    availability and ``upcoming_bookings``. When several occupying stays
    span ``now`` the property is free again at the latest of their ends.
    """
    is_available = True
    next_available: datetime | None = None
    total_bookings = 0
    total_amount = Decimal("0")
    upcoming = 0

    for booking in bookings:
        total_bookings += 1
        total_amount += Decimal(booking.total_price or 0)

        if booking.status not in OCCUPYING_STATUSES:
            continue

        if booking.start_date < now < booking.end_date:
            is_available = False
            if next_available is None or booking.end_date > next_available:
                next_available = booking.end_date
        if booking.start_date > now:
            upcoming += 1

    return AvailabilitySnapshot(
        is_available=is_available,
        next_available_date=None if is_available else next_available,
        total_bookings=total_bookings,
        total_amount=total_amount,
        upcoming_bookings=upcoming,
        property_id=property_id,
    )
