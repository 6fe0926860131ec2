"""Booking creation with conflict detection, and the booking summaries built on it.

Operations here run inside the caller's session and transaction. They raise
``bookaroo.errors`` exceptions and leave logging to the API layer.
"""

import uuid
from datetime import datetime

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bookaroo.config import settings
from bookaroo.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from bookaroo.models.booking import Booking, BookingStatus
from bookaroo.models.property import Property
from bookaroo.models.user import User, UserRole
from bookaroo.schemas.booking import (
    BookingHistoryItem,
    GuestBookingResponse,
    GuestBookingsResponse,
    GuestBookingStatistics,
    OwnerBookingStatistics,
    PropertyDetailResponse,
)
from bookaroo.schemas.property import PropertyResponse
from bookaroo.services.availability import AvailabilitySnapshot, summarize, utcnow
from bookaroo.services.overlap import get_overlap_checker
from bookaroo.services.pricing import calculate_total_price

# Name of the PostgreSQL exclusion constraint created by the initial migration.
NO_OVERLAP_CONSTRAINT = "ex_bookings_no_overlap"

STATISTICS_VIEWS: dict[UserRole, type[GuestBookingStatistics] | type[OwnerBookingStatistics]] = {
    UserRole.GUEST: GuestBookingStatistics,
    UserRole.OWNER: OwnerBookingStatistics,
}


def statistics_for(snapshot: AvailabilitySnapshot, role: UserRole) -> GuestBookingStatistics | OwnerBookingStatistics:
    """Label a snapshot's totals for the viewer: spend for guests, revenue for owners."""
    return STATISTICS_VIEWS[role].from_snapshot(snapshot)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def locked_property_query(property_id: uuid.UUID) -> Select:
    """Select a property row with ``FOR UPDATE`` so reservations on it serialize."""
    return select(Property).where(Property.id == property_id).with_for_update()


async def get_property(db: AsyncSession, property_id: uuid.UUID, *, lock: bool = False) -> Property:
    """Fetch a property by id or raise ``NotFoundError``."""
    query = locked_property_query(property_id) if lock else select(Property).where(Property.id == property_id)
    result = await db.execute(query)
    prop = result.scalar_one_or_none()
    if prop is None:
        raise NotFoundError("Property not found")
    return prop


async def get_user(db: AsyncSession, user_id: uuid.UUID, *, label: str = "User") -> User:
    """Fetch a user by id or raise ``NotFoundError`` naming ``label``."""
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError(f"{label} not found")
    return user


async def list_bookings_for_property(
    db: AsyncSession,
    property_id: uuid.UUID,
    exclude_statuses: tuple[str, ...] = (),
) -> list[Booking]:
    """All bookings on a property, oldest stay first, with guests loaded."""
    query = select(Booking).where(Booking.property_id == property_id)
    if exclude_statuses:
        query = query.where(Booking.status.not_in(exclude_statuses))
    result = await db.execute(query.order_by(Booking.start_date))
    return list(result.scalars().all())


async def list_bookings_for_guest(db: AsyncSession, guest_id: uuid.UUID) -> list[Booking]:
    """All bookings made by a guest, oldest stay first, with properties loaded."""
    result = await db.execute(select(Booking).where(Booking.guest_id == guest_id).order_by(Booking.start_date))
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# CreateBooking
# ---------------------------------------------------------------------------


async def create_booking(
    db: AsyncSession,
    *,
    property_id: uuid.UUID,
    guest_id: uuid.UUID,
    start_date: datetime,
    end_date: datetime,
    overlap_policy: str | None = None,
) -> Booking:
    """Reserve a property for a guest, or fail without writing anything.

    The property row stays locked until the surrounding transaction ends,
    so a concurrent request for the same property waits and then sees this
    booking when it reads the active bookings.

    Raises:
        ValidationError: If ``end_date`` is not after ``start_date``.
        NotFoundError: If the property or guest does not exist.
        ConflictError: If an active booking overlaps the requested range.
    """
    if end_date <= start_date:
        raise ValidationError("end_date must be after start_date")

    prop = await get_property(db, property_id, lock=True)
    await get_user(db, guest_id, label="Guest")

    overlaps = get_overlap_checker(overlap_policy or settings.booking_overlap_policy)
    active = await list_bookings_for_property(db, prop.id, exclude_statuses=(BookingStatus.CANCELLED.value,))
    if any(overlaps(b.start_date, b.end_date, start_date, end_date) for b in active):
        raise ConflictError("Property is not available for these dates")

    booking = Booking(
        property_id=prop.id,
        guest_id=guest_id,
        start_date=start_date,
        end_date=end_date,
        total_price=calculate_total_price(prop.price_per_night, start_date, end_date),
        status=BookingStatus.PENDING.value,
    )
    db.add(booking)
    try:
        await db.flush()
    except IntegrityError as exc:
        if NO_OVERLAP_CONSTRAINT in str(exc.orig):
            raise ConflictError("Property is not available for these dates") from exc
        raise
    await db.refresh(booking)
    return booking


# ---------------------------------------------------------------------------
# GetGuestBookingSummary
# ---------------------------------------------------------------------------


async def get_guest_booking_summary(
    db: AsyncSession,
    guest_id: uuid.UUID,
    now: datetime | None = None,
) -> GuestBookingsResponse:
    """List a guest's bookings with their spend statistics."""
    await get_user(db, guest_id, label="Guest")
    bookings = await list_bookings_for_guest(db, guest_id)
    snapshot = summarize(bookings, now or utcnow())
    return GuestBookingsResponse(
        bookings=[GuestBookingResponse.model_validate(b) for b in bookings],
        statistics=statistics_for(snapshot, UserRole.GUEST),
    )


# ---------------------------------------------------------------------------
# GetOwnerPropertyDetail
# ---------------------------------------------------------------------------


async def get_owner_property_detail(
    db: AsyncSession,
    property_id: uuid.UUID,
    requesting_owner_id: uuid.UUID,
    now: datetime | None = None,
) -> PropertyDetailResponse:
    """Property detail with availability, booking history, and revenue.

    Raises:
        NotFoundError: If the property does not exist.
        ForbiddenError: If ``requesting_owner_id`` does not own the property.
    """
    prop = await get_property(db, property_id)
    if prop.owner_id != requesting_owner_id:
        raise ForbiddenError("You don't have permission to view this property's details")

    bookings = await list_bookings_for_property(db, prop.id)
    snapshot = summarize(bookings, now or utcnow(), property_id=prop.id)
    history = [
        BookingHistoryItem(
            id=b.id,
            guest_id=b.guest_id,
            guest_name=b.guest.name,
            start_date=b.start_date,
            end_date=b.end_date,
            status=b.status,
            total_price=b.total_price,
        )
        for b in bookings
    ]
    return PropertyDetailResponse(
        **PropertyResponse.model_validate(prop).model_dump(),
        is_available=snapshot.is_available,
        next_available_date=snapshot.next_available_date,
        booking_history=history,
        statistics=statistics_for(snapshot, UserRole.OWNER),
    )
