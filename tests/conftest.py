"""Shared test configuration and fixtures.

Each test gets a fresh in-memory SQLite database (aiosqlite) and a session
wrapped in a transaction that rolls back afterwards. The API client shares
that session through a ``get_db`` override.
"""

import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from bookaroo.auth.security import create_token_pair, hash_password
from bookaroo.database import Base, get_db
from bookaroo.main import app
from bookaroo.models.booking import Booking
from bookaroo.models.property import Property
from bookaroo.models.user import User, UserRole
from bookaroo.services.availability import utcnow

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# ---------------------------------------------------------------------------
# Per-test database: in-memory SQLite, transactional rollback for isolation
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory database with all tables for one test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def create_user(db_session: AsyncSession, role: UserRole, name: str = "Test User") -> User:
    """Insert an active user with the given role directly in the DB."""
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=f"{role.value}-{unique}@test.com",
        hashed_password=hash_password("testpass123"),
        name=name,
        phone="+61400000000",
        address="1 Test Street",
        business_name="Test Stays" if role is UserRole.OWNER else None,
        role=role.value,
        is_active=True,
    )
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


def headers_for(user: User) -> dict[str, str]:
    """Authorization headers carrying an access token for ``user``."""
    tokens = create_token_pair(str(user.id), user.role)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


async def add_booking(
    db_session: AsyncSession,
    prop: Property,
    guest: User,
    start_date: datetime,
    end_date: datetime,
    status: str = "confirmed",
    total_price: Decimal | str | None = None,
) -> Booking:
    """Insert a booking directly, bypassing conflict checks (for history setup)."""
    if total_price is None:
        nights = Decimal((end_date - start_date).days)
        total_price = prop.price_per_night * nights
    booking = Booking(
        property_id=prop.id,
        guest_id=guest.id,
        start_date=start_date,
        end_date=end_date,
        total_price=Decimal(total_price),
        status=status,
    )
    db_session.add(booking)
    await db_session.flush()
    await db_session.refresh(booking)
    return booking


def day(offset: int, hour: int = 12) -> datetime:
    """Naive UTC instant ``offset`` days from today at ``hour``:00."""
    today = utcnow().replace(hour=hour, minute=0, second=0, microsecond=0)
    return today + timedelta(days=offset)


# ---------------------------------------------------------------------------
# Convenience fixtures: users
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_owner(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.OWNER, name="Olivia Owner")


@pytest_asyncio.fixture
async def other_owner(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.OWNER, name="Oscar Owner")


@pytest_asyncio.fixture
async def test_guest(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.GUEST, name="Grace Guest")


@pytest_asyncio.fixture
async def owner_headers(test_owner: User) -> dict[str, str]:
    return headers_for(test_owner)


@pytest_asyncio.fixture
async def other_owner_headers(other_owner: User) -> dict[str, str]:
    return headers_for(other_owner)


@pytest_asyncio.fixture
async def guest_headers(test_guest: User) -> dict[str, str]:
    return headers_for(test_guest)


# ---------------------------------------------------------------------------
# Convenience fixtures: property
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_property(client: AsyncClient, owner_headers: dict) -> dict:
    """Create and return a test property via the API (nightly rate 100)."""
    response = await client.post(
        "/api/v1/properties",
        json={
            "name": "Test Cottage",
            "description": "A test cottage for automated tests.",
            "location": "Byron Bay, NSW",
            "price_per_night": 100.00,
            "amenities": ["wifi", "kitchen"],
            "images": [{"image_url": "https://img.test/cottage-1.jpg"}],
        },
        headers=owner_headers,
    )
    assert response.status_code == 201, f"Failed to create test property: {response.text}"
    return response.json()


@pytest_asyncio.fixture
async def property_row(db_session: AsyncSession, test_property: dict) -> Property:
    """The ORM row behind ``test_property``."""
    prop = await db_session.get(Property, uuid.UUID(test_property["id"]))
    assert prop is not None
    return prop
