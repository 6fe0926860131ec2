"""Role-dependent dashboard assembly."""

import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookaroo.errors import ForbiddenError
from bookaroo.models.booking import Booking
from bookaroo.models.property import Property
from bookaroo.models.user import User, UserRole
from bookaroo.schemas.booking import OwnerBookingStatistics
from bookaroo.schemas.dashboard import GuestDashboardResponse, OwnerDashboardResponse, OwnerPropertyOverview
from bookaroo.schemas.property import PropertyResponse
from bookaroo.services.availability import summarize, utcnow
from bookaroo.services.booking_service import get_guest_booking_summary

DashboardBuilder = Callable[[AsyncSession, User, datetime], Awaitable[OwnerDashboardResponse | GuestDashboardResponse]]


async def build_owner_dashboard(db: AsyncSession, user: User, now: datetime) -> OwnerDashboardResponse:
    """Every property the owner lists, each with its availability and revenue."""
    result = await db.execute(select(Property).where(Property.owner_id == user.id).order_by(Property.created_at))
    properties = list(result.scalars().all())

    bookings_result = await db.execute(
        select(Booking).where(Booking.property_id.in_([p.id for p in properties])).order_by(Booking.start_date)
    )
    by_property: dict[uuid.UUID, list[Booking]] = {p.id: [] for p in properties}
    for booking in bookings_result.scalars().all():
        by_property[booking.property_id].append(booking)

    overviews = []
    for prop in properties:
        snapshot = summarize(by_property[prop.id], now, property_id=prop.id)
        overviews.append(
            OwnerPropertyOverview(
                property=PropertyResponse.model_validate(prop),
                is_available=snapshot.is_available,
                next_available_date=snapshot.next_available_date,
                statistics=OwnerBookingStatistics.from_snapshot(snapshot),
            )
        )
    return OwnerDashboardResponse(properties=overviews)


async def build_guest_dashboard(db: AsyncSession, user: User, now: datetime) -> GuestDashboardResponse:
    """The guest's bookings and spend statistics."""
    summary = await get_guest_booking_summary(db, user.id, now)
    return GuestDashboardResponse(bookings=summary.bookings, statistics=summary.statistics)


DASHBOARDS: dict[UserRole, DashboardBuilder] = {
    UserRole.OWNER: build_owner_dashboard,
    UserRole.GUEST: build_guest_dashboard,
}


async def build_dashboard(
    db: AsyncSession,
    user: User,
    now: datetime | None = None,
) -> OwnerDashboardResponse | GuestDashboardResponse:
    """Dispatch to the dashboard for the user's role.

    Raises:
        ForbiddenError: If the stored role has no dashboard.
    """
    try:
        builder = DASHBOARDS[UserRole(user.role)]
    except ValueError:
        raise ForbiddenError(f"No dashboard for role {user.role!r}") from None
    return await builder(db, user, now or utcnow())
