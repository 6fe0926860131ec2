"""Tests for role-based dashboard dispatch."""

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from bookaroo.errors import ForbiddenError
from bookaroo.models.property import Property
from bookaroo.models.user import User, UserRole
from bookaroo.schemas.dashboard import GuestDashboardResponse, OwnerDashboardResponse
from bookaroo.services.dashboard_service import DASHBOARDS, build_dashboard
from conftest import add_booking, day


def test_every_role_has_a_dashboard():
    assert set(DASHBOARDS) == set(UserRole)


async def test_owner_dashboard(
    db_session: AsyncSession, property_row: Property, test_owner: User, test_guest: User
):
    await add_booking(db_session, property_row, test_guest, day(-1), day(2), status="confirmed")
    await add_booking(db_session, property_row, test_guest, day(5), day(6), status="pending")

    dashboard = await build_dashboard(db_session, test_owner)

    assert isinstance(dashboard, OwnerDashboardResponse)
    assert len(dashboard.properties) == 1
    overview = dashboard.properties[0]
    assert overview.property.id == property_row.id
    assert overview.is_available is False
    assert overview.next_available_date == day(2)
    assert overview.statistics.total_bookings == 2
    assert overview.statistics.total_revenue == Decimal("400")
    assert overview.statistics.upcoming_bookings == 1


async def test_owner_without_properties(db_session: AsyncSession, other_owner: User):
    dashboard = await build_dashboard(db_session, other_owner)
    assert isinstance(dashboard, OwnerDashboardResponse)
    assert dashboard.properties == []


async def test_guest_dashboard(db_session: AsyncSession, property_row: Property, test_guest: User):
    await add_booking(db_session, property_row, test_guest, day(3), day(5), status="confirmed")

    dashboard = await build_dashboard(db_session, test_guest)

    assert isinstance(dashboard, GuestDashboardResponse)
    assert dashboard.role == "guest"
    assert len(dashboard.bookings) == 1
    assert dashboard.statistics.total_spent == Decimal("200")
    assert dashboard.statistics.upcoming_bookings == 1


async def test_unknown_role_is_forbidden(db_session: AsyncSession, test_guest: User):
    test_guest.role = "admin"
    with pytest.raises(ForbiddenError):
        await build_dashboard(db_session, test_guest)
