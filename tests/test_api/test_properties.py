"""Tests for property endpoints."""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from bookaroo.models.property import Property
from bookaroo.models.user import User
from conftest import add_booking, day

pytestmark = pytest.mark.asyncio


async def _create(client: AsyncClient, headers: dict, **overrides) -> dict:
    body = {"name": "Seaside Flat", "location": "Manly, NSW", "price_per_night": 180.00}
    body.update(overrides)
    response = await client.post("/api/v1/properties", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


# ---------------------------------------------------------------------------
# POST /api/v1/properties
# ---------------------------------------------------------------------------


class TestCreateProperty:
    async def test_create_success(self, client: AsyncClient, owner_headers: dict, test_owner: User) -> None:
        response = await client.post(
            "/api/v1/properties",
            json={
                "name": "Harbour Loft",
                "description": "Two bedrooms above the water",
                "location": "Sydney, NSW",
                "price_per_night": 250.00,
                "amenities": ["wifi", "parking"],
                "images": [
                    {"image_url": "https://img.test/loft-1.jpg"},
                    {"image_url": "https://img.test/loft-2.jpg"},
                ],
            },
            headers=owner_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Harbour Loft"
        assert data["location"] == "Sydney, NSW"
        assert float(data["price_per_night"]) == 250.00
        assert data["amenities"] == ["wifi", "parking"]
        assert [img["image_url"] for img in data["images"]] == [
            "https://img.test/loft-1.jpg",
            "https://img.test/loft-2.jpg",
        ]
        assert data["owner_id"] == str(test_owner.id)
        assert "created_at" in data

    async def test_create_minimal(self, client: AsyncClient, owner_headers: dict) -> None:
        data = await _create(client, owner_headers, location=None)
        assert data["images"] == []
        assert data["location"] is None

    async def test_guest_cannot_create(self, client: AsyncClient, guest_headers: dict) -> None:
        response = await client.post(
            "/api/v1/properties",
            json={"name": "Nope", "price_per_night": 10},
            headers=guest_headers,
        )
        assert response.status_code == 403

    async def test_negative_price_rejected(self, client: AsyncClient, owner_headers: dict) -> None:
        response = await client.post(
            "/api/v1/properties",
            json={"name": "Bad", "price_per_night": -5},
            headers=owner_headers,
        )
        assert response.status_code == 422

    async def test_missing_price_rejected(self, client: AsyncClient, owner_headers: dict) -> None:
        response = await client.post("/api/v1/properties", json={"name": "No price"}, headers=owner_headers)
        assert response.status_code == 422

    async def test_unauthenticated(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/properties", json={"name": "Anon", "price_per_night": 10})
        assert response.status_code == 401


# ---------------------------------------------------------------------------
# GET /api/v1/properties
# ---------------------------------------------------------------------------


class TestListProperties:
    async def test_public_listing(self, client: AsyncClient, test_property: dict) -> None:
        response = await client.get("/api/v1/properties")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["id"] == test_property["id"]

    async def test_location_filter_is_case_insensitive(self, client: AsyncClient, owner_headers: dict) -> None:
        await _create(client, owner_headers, name="Bondi Studio", location="Bondi Beach, NSW")
        await _create(client, owner_headers, name="Fitzroy Room", location="Melbourne, VIC")

        response = await client.get("/api/v1/properties", params={"location": "bondi"})
        names = [p["name"] for p in response.json()["items"]]
        assert names == ["Bondi Studio"]

    async def test_price_filters(self, client: AsyncClient, owner_headers: dict) -> None:
        await _create(client, owner_headers, name="Cheap", price_per_night=50)
        await _create(client, owner_headers, name="Mid", price_per_night=150)
        await _create(client, owner_headers, name="Luxe", price_per_night=900)

        response = await client.get("/api/v1/properties", params={"min_price": 100, "max_price": 500})
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "Mid"

    async def test_pagination(self, client: AsyncClient, owner_headers: dict) -> None:
        for i in range(3):
            await _create(client, owner_headers, name=f"Page {i}")

        response = await client.get("/api/v1/properties", params={"skip": 0, "limit": 2})
        data = response.json()
        assert len(data["items"]) == 2
        assert data["total"] == 3


# ---------------------------------------------------------------------------
# GET /api/v1/properties/{property_id}
# ---------------------------------------------------------------------------


class TestGetProperty:
    async def test_get_success(self, client: AsyncClient, test_property: dict) -> None:
        response = await client.get(f"/api/v1/properties/{test_property['id']}")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Test Cottage"
        assert data["images"][0]["image_url"] == "https://img.test/cottage-1.jpg"

    async def test_get_not_found(self, client: AsyncClient) -> None:
        response = await client.get(f"/api/v1/properties/{uuid.uuid4()}")
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# PUT /api/v1/properties/{property_id}
# ---------------------------------------------------------------------------


class TestUpdateProperty:
    async def test_partial_update(self, client: AsyncClient, owner_headers: dict, test_property: dict) -> None:
        response = await client.put(
            f"/api/v1/properties/{test_property['id']}",
            json={"price_per_night": 120.50},
            headers=owner_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert float(data["price_per_night"]) == 120.50
        assert data["name"] == "Test Cottage"
        assert len(data["images"]) == 1

    async def test_replace_images(self, client: AsyncClient, owner_headers: dict, test_property: dict) -> None:
        response = await client.put(
            f"/api/v1/properties/{test_property['id']}",
            json={"images": [{"image_url": "https://img.test/new-a.jpg"}, {"image_url": "https://img.test/new-b.jpg"}]},
            headers=owner_headers,
        )
        assert response.status_code == 200
        assert [img["image_url"] for img in response.json()["images"]] == [
            "https://img.test/new-a.jpg",
            "https://img.test/new-b.jpg",
        ]

    @pytest.mark.parametrize("field", ["name", "price_per_night"])
    async def test_null_required_field_rejected(
        self, client: AsyncClient, owner_headers: dict, test_property: dict, field: str
    ) -> None:
        response = await client.put(
            f"/api/v1/properties/{test_property['id']}",
            json={field: None},
            headers=owner_headers,
        )
        assert response.status_code == 422

        unchanged = await client.get(f"/api/v1/properties/{test_property['id']}")
        assert unchanged.json()[field] == test_property[field]

    async def test_null_optional_field_clears_it(
        self, client: AsyncClient, owner_headers: dict, test_property: dict
    ) -> None:
        response = await client.put(
            f"/api/v1/properties/{test_property['id']}",
            json={"description": None},
            headers=owner_headers,
        )
        assert response.status_code == 200
        assert response.json()["description"] is None

    async def test_other_owner_forbidden(
        self, client: AsyncClient, other_owner_headers: dict, test_property: dict
    ) -> None:
        response = await client.put(
            f"/api/v1/properties/{test_property['id']}",
            json={"name": "Hijacked"},
            headers=other_owner_headers,
        )
        assert response.status_code == 403

    async def test_not_found(self, client: AsyncClient, owner_headers: dict) -> None:
        response = await client.put(
            f"/api/v1/properties/{uuid.uuid4()}",
            json={"name": "Ghost"},
            headers=owner_headers,
        )
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# GET /api/v1/properties/{property_id}/details
# ---------------------------------------------------------------------------


class TestPropertyDetails:
    async def test_occupied_property(
        self,
        client: AsyncClient,
        owner_headers: dict,
        test_guest: User,
        property_row: Property,
        db_session: AsyncSession,
    ) -> None:
        """A confirmed stay spanning now makes the property unavailable until it ends."""
        await add_booking(db_session, property_row, test_guest, day(-2), day(3), status="confirmed")
        await add_booking(db_session, property_row, test_guest, day(8), day(10), status="pending")
        await add_booking(db_session, property_row, test_guest, day(12), day(14), status="cancelled")

        response = await client.get(f"/api/v1/properties/{property_row.id}/details", headers=owner_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["is_available"] is False
        assert data["next_available_date"] == day(3).isoformat()
        assert data["statistics"]["total_bookings"] == 3
        assert float(data["statistics"]["total_revenue"]) == 900.00
        assert data["statistics"]["upcoming_bookings"] == 1
        assert len(data["booking_history"]) == 3
        assert data["booking_history"][0]["guest_name"] == test_guest.name
        assert data["name"] == "Test Cottage"

    async def test_available_property(self, client: AsyncClient, owner_headers: dict, test_property: dict) -> None:
        response = await client.get(f"/api/v1/properties/{test_property['id']}/details", headers=owner_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["is_available"] is True
        assert data["next_available_date"] is None
        assert data["booking_history"] == []

    async def test_other_owner_forbidden(
        self, client: AsyncClient, other_owner_headers: dict, test_property: dict
    ) -> None:
        response = await client.get(
            f"/api/v1/properties/{test_property['id']}/details", headers=other_owner_headers
        )
        assert response.status_code == 403

    async def test_guest_forbidden(self, client: AsyncClient, guest_headers: dict, test_property: dict) -> None:
        response = await client.get(f"/api/v1/properties/{test_property['id']}/details", headers=guest_headers)
        assert response.status_code == 403

    async def test_not_found(self, client: AsyncClient, owner_headers: dict) -> None:
        response = await client.get(f"/api/v1/properties/{uuid.uuid4()}/details", headers=owner_headers)
        assert response.status_code == 404
