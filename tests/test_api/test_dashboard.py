"""Tests for the role-dependent dashboard endpoint."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from bookaroo.models.property import Property
from bookaroo.models.user import User
from conftest import add_booking, day

pytestmark = pytest.mark.asyncio


class TestDashboard:
    async def test_owner_dashboard(
        self,
        client: AsyncClient,
        owner_headers: dict,
        test_guest: User,
        property_row: Property,
        db_session: AsyncSession,
    ) -> None:
        await add_booking(db_session, property_row, test_guest, day(-1), day(2), status="confirmed")
        await add_booking(db_session, property_row, test_guest, day(6), day(7), status="pending")

        response = await client.get("/api/v1/dashboard", headers=owner_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "owner"
        assert len(data["properties"]) == 1

        overview = data["properties"][0]
        assert overview["property"]["id"] == str(property_row.id)
        assert overview["is_available"] is False
        assert overview["next_available_date"] == day(2).isoformat()
        assert overview["statistics"]["total_bookings"] == 2
        assert float(overview["statistics"]["total_revenue"]) == 400.00
        assert overview["statistics"]["upcoming_bookings"] == 1

    async def test_owner_without_properties(self, client: AsyncClient, other_owner_headers: dict) -> None:
        response = await client.get("/api/v1/dashboard", headers=other_owner_headers)
        assert response.status_code == 200
        assert response.json() == {"role": "owner", "properties": []}

    async def test_guest_dashboard(
        self,
        client: AsyncClient,
        guest_headers: dict,
        test_guest: User,
        property_row: Property,
        db_session: AsyncSession,
    ) -> None:
        await add_booking(db_session, property_row, test_guest, day(-20), day(-17), status="completed")
        await add_booking(db_session, property_row, test_guest, day(5), day(7), status="confirmed")

        response = await client.get("/api/v1/dashboard", headers=guest_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "guest"
        assert len(data["bookings"]) == 2
        assert data["bookings"][0]["property"]["name"] == "Test Cottage"
        assert data["statistics"]["total_bookings"] == 2
        assert float(data["statistics"]["total_spent"]) == 500.00
        assert data["statistics"]["upcoming_bookings"] == 1

    async def test_unauthenticated(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/dashboard")
        assert response.status_code == 401
