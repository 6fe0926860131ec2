"""Seed the database with a demo owner, demo guests, and sample bookings.

Bookings are spread across past, current and future stays with a mix of
statuses so that the dashboard and property details show non-trivial
availability and revenue figures.

Run from the project root:
    python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import datetime, time, timedelta
from decimal import Decimal
from pathlib import Path

# Add project root to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select

from bookaroo.auth.security import hash_password
from bookaroo.database import async_session_factory
from bookaroo.models.booking import Booking
from bookaroo.models.property import Property, PropertyImage
from bookaroo.models.user import User, UserRole
from bookaroo.services.availability import utcnow
from bookaroo.services.pricing import calculate_total_price

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_PASSWORD = "demo1234"

DEMO_OWNER = {
    "email": "owner@bookaroo.dev",
    "name": "Demo Owner",
    "phone": "+61400111222",
    "address": "12 Lighthouse Road, Byron Bay NSW",
    "business_name": "Coastline Stays",
}

DEMO_GUESTS = [
    {
        "email": "guest@bookaroo.dev",
        "name": "Demo Guest",
        "phone": "+61400333444",
        "address": "7 Collins Street, Melbourne VIC",
    },
    {
        "email": "sam@bookaroo.dev",
        "name": "Sam Nguyen",
        "phone": "+61400555666",
        "address": "44 Queen Street, Brisbane QLD",
    },
]

PROPERTIES = [
    {
        "name": "Wategos Beach House",
        "description": (
            "Three-bedroom timber house a short walk from Wategos Beach, "
            "with an open deck facing the ocean and an outdoor shower."
        ),
        "location": "Byron Bay, NSW",
        "price_per_night": Decimal("320.00"),
        "amenities": ["wifi", "kitchen", "deck", "ocean_view", "parking"],
        "images": [
            "https://images.bookaroo.dev/wategos/front.jpg",
            "https://images.bookaroo.dev/wategos/deck.jpg",
        ],
    },
    {
        "name": "Noosa River Cabin",
        "description": "One-bedroom cabin on the river with kayaks and a fire pit.",
        "location": "Noosa Heads, QLD",
        "price_per_night": Decimal("145.00"),
        "amenities": ["wifi", "kayaks", "fire_pit", "bbq"],
        "images": ["https://images.bookaroo.dev/noosa/cabin.jpg"],
    },
    {
        "name": "Fitzroy Loft",
        "description": "Converted warehouse loft close to Brunswick Street cafes.",
        "location": "Melbourne, VIC",
        "price_per_night": Decimal("189.50"),
        "amenities": ["wifi", "ac", "washer", "workspace"],
        "images": [],
    },
]


def _at_noon(days_from_today: int) -> datetime:
    today = utcnow().date()
    return datetime.combine(today + timedelta(days=days_from_today), time(12, 0))


def _build_bookings(
    properties: dict[str, Property],
    guests: dict[str, User],
) -> list[dict]:
    """Booking rows relative to today. No two occupying stays on one property overlap."""
    wategos = properties["Wategos Beach House"]
    noosa = properties["Noosa River Cabin"]
    fitzroy = properties["Fitzroy Loft"]
    demo = guests["Demo Guest"]
    sam = guests["Sam Nguyen"]

    return [
        # --- Wategos Beach House ---
        # Past: completed
        {"property": wategos, "guest": demo, "start": -40, "end": -35, "status": "completed"},
        # Current: confirmed, property is occupied today
        {"property": wategos, "guest": sam, "start": -2, "end": 3, "status": "confirmed"},
        # Future: pending
        {"property": wategos, "guest": demo, "start": 14, "end": 18, "status": "pending"},
        # --- Noosa River Cabin ---
        # Past: cancelled
        {"property": noosa, "guest": sam, "start": -10, "end": -7, "status": "cancelled"},
        # Future: confirmed
        {"property": noosa, "guest": demo, "start": 6, "end": 9, "status": "confirmed"},
        # Future: cancelled, dates free again
        {"property": noosa, "guest": sam, "start": 20, "end": 25, "status": "cancelled"},
        # --- Fitzroy Loft ---
        # Past: completed
        {"property": fitzroy, "guest": sam, "start": -25, "end": -21, "status": "completed"},
        # Future: confirmed
        {"property": fitzroy, "guest": demo, "start": 30, "end": 33, "status": "confirmed"},
    ]


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def _delete_demo_users(session) -> None:
    """Remove demo users and everything hanging off them."""
    emails = [DEMO_OWNER["email"], *(g["email"] for g in DEMO_GUESTS)]
    result = await session.execute(select(User.id).where(User.email.in_(emails)))
    user_ids = list(result.scalars().all())
    if not user_ids:
        return

    print("⚠️  Demo users already exist. Deleting and re-seeding...")
    result = await session.execute(select(Property.id).where(Property.owner_id.in_(user_ids)))
    property_ids = list(result.scalars().all())

    await session.execute(delete(Booking).where(Booking.guest_id.in_(user_ids)))
    if property_ids:
        await session.execute(delete(Booking).where(Booking.property_id.in_(property_ids)))
        await session.execute(delete(PropertyImage).where(PropertyImage.property_id.in_(property_ids)))
        await session.execute(delete(Property).where(Property.id.in_(property_ids)))
    await session.execute(delete(User).where(User.id.in_(user_ids)))
    await session.flush()


async def seed() -> None:
    """Populate the database with demo data.

    Idempotent: existing demo users and their properties and bookings are
    deleted before re-seeding.
    """
    async with async_session_factory() as session:
        await _delete_demo_users(session)

        # ------------------------------------------------------------------
        # 1. Users
        # ------------------------------------------------------------------
        owner = User(
            hashed_password=hash_password(DEMO_PASSWORD),
            role=UserRole.OWNER.value,
            **DEMO_OWNER,
        )
        session.add(owner)

        guests: dict[str, User] = {}
        for guest_data in DEMO_GUESTS:
            guest = User(
                hashed_password=hash_password(DEMO_PASSWORD),
                role=UserRole.GUEST.value,
                **guest_data,
            )
            session.add(guest)
            guests[guest.name] = guest
        await session.flush()

        print(f"✅ Created owner {owner.email} and {len(guests)} guests")

        # ------------------------------------------------------------------
        # 2. Properties
        # ------------------------------------------------------------------
        properties: dict[str, Property] = {}
        for prop_data in PROPERTIES:
            data = dict(prop_data)
            image_urls = data.pop("images")
            prop = Property(
                owner_id=owner.id,
                images=[PropertyImage(image_url=url, position=i) for i, url in enumerate(image_urls)],
                **data,
            )
            session.add(prop)
            properties[prop.name] = prop
            print(f"   🏠 {prop.name} — {prop.location} (${prop.price_per_night}/night)")
        await session.flush()

        # ------------------------------------------------------------------
        # 3. Bookings
        # ------------------------------------------------------------------
        bookings_data = _build_bookings(properties, guests)
        for bdata in bookings_data:
            prop = bdata["property"]
            start_date = _at_noon(bdata["start"])
            end_date = _at_noon(bdata["end"])
            session.add(
                Booking(
                    property_id=prop.id,
                    guest_id=bdata["guest"].id,
                    start_date=start_date,
                    end_date=end_date,
                    total_price=calculate_total_price(prop.price_per_night, start_date, end_date),
                    status=bdata["status"],
                )
            )

        await session.commit()

        print(f"✅ Created {len(bookings_data)} bookings")
        print()
        print("=" * 60)
        print("📊 Seed Summary")
        print("=" * 60)
        print(f"   Owner:       {DEMO_OWNER['email']} / {DEMO_PASSWORD}")
        print(f"   Guests:      {', '.join(g['email'] for g in DEMO_GUESTS)}")
        print(f"   Properties:  {len(properties)}")
        print(f"   Bookings:    {len(bookings_data)}")
        print("=" * 60)
        print("🎉 Done! You can now log in at /api/v1/auth/login")


if __name__ == "__main__":
    asyncio.run(seed())
