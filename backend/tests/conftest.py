"""
Pytest fixtures for test database, client, and authentication.

Each test gets a fresh in-memory SQLite database, so tests never share rows.
Redis is disabled; the app falls back to uncached reads.
"""

import os

os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("SEED_ON_STARTUP", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import date, timedelta
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from housebooking.main import app
from housebooking.db.base import Base
from housebooking.db.session import get_db
from housebooking.core.security import create_access_token, hash_password
from housebooking.models.user import User
from housebooking.models.property import Property
from housebooking.models.booking import Booking
from housebooking.models.invitation_code import InvitationCode
from housebooking.schemas.common import utc_now, utc_today

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "testpassword123"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables in a private in-memory database and yield a session on it."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def create_user(
    db_session: AsyncSession,
    username: str,
    email: str,
    first_name: str = "",
    last_name: str = "",
    is_admin: bool = False,
) -> User:
    user = User(
        username=username,
        email=email,
        first_name=first_name,
        last_name=last_name,
        phone_number="12345678",
        hashed_password=hash_password(TEST_PASSWORD),
        is_admin=is_admin,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


async def create_booking_row(
    db_session: AsyncSession,
    property_id: int,
    user: User,
    start: date,
    end: date,
    expected_people: int = 2,
) -> Booking:
    """Insert a booking directly, bypassing validation (e.g. for past stays)."""
    booking = Booking(
        property_id=property_id,
        user_id=user.username,
        start_date=start,
        end_date=end,
        expected_people=expected_people,
    )
    db_session.add(booking)
    await db_session.commit()
    await db_session.refresh(booking)
    return booking


def headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(data={'sub': user.id})}"}


def days_from_today(days: int) -> date:
    return utc_today() + timedelta(days=days)


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, "guest", "guest@example.com", "Grete", "Gæst")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, "neighbour", "neighbour@example.com", "Niels", "")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await create_user(
        db_session, "admin@example.com", "admin@example.com", "Administrator", "User", is_admin=True
    )


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    return headers_for(test_user)


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict:
    return headers_for(admin_user)


@pytest_asyncio.fixture
async def properties(db_session: AsyncSession) -> list[Property]:
    """The two houses, ids 1 and 2."""
    houses = [Property(id=1, name="Røde Hus"), Property(id=2, name="Søhuset")]
    db_session.add_all(houses)
    await db_session.commit()
    return houses


@pytest_asyncio.fixture
async def invitation_code(db_session: AsyncSession, admin_user: User) -> InvitationCode:
    now = utc_now()
    code = InvitationCode(
        code="ABCD1234",
        created_date=now,
        expiry_date=now + timedelta(days=7),
        is_used=False,
        created_by_user_id=admin_user.id,
    )
    db_session.add(code)
    await db_session.commit()
    await db_session.refresh(code)
    return code
