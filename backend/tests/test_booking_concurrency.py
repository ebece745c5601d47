"""
Tests for the optimistic lock that serializes bookings per property.

The in-memory fixtures share one connection and cannot interleave two real
transactions, so most tests simulate the lost race by making the
compare-and-set fail. The last test races two sessions on a file database.
"""

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from housebooking.core.exceptions import Conflict
from housebooking.db.base import Base
from housebooking.models.booking import Booking
from housebooking.models.property import Property
from housebooking.models.user import User
from housebooking.schemas.booking import BookingCreate
from housebooking.services import booking_service
from conftest import days_from_today


def make_request(start=10, end=12):
    return BookingCreate(
        property_id=1,
        start_date=days_from_today(start),
        end_date=days_from_today(end),
        expected_people=2,
    )


@pytest.mark.asyncio
async def test_claim_property_is_compare_and_set(db_session, properties):
    assert await booking_service._claim_property(db_session, 1, version=1) is True
    # The version moved on; a writer that read version 1 loses
    assert await booking_service._claim_property(db_session, 1, version=1) is False

    house = await db_session.get(Property, 1, populate_existing=True)
    assert house.booking_version == 2


@pytest.mark.asyncio
async def test_create_booking_bumps_property_version(db_session, test_user, properties):
    await booking_service.create_booking(db_session, test_user, make_request())
    house = await db_session.get(Property, 1, populate_existing=True)
    assert house.booking_version == 2


@pytest.mark.asyncio
async def test_lost_race_is_retried(db_session, test_user, properties, monkeypatch):
    real_claim = booking_service._claim_property
    calls = []

    async def flaky_claim(db, property_id, version):
        calls.append(version)
        if len(calls) == 1:
            return False
        return await real_claim(db, property_id, version)

    monkeypatch.setattr(booking_service, "_claim_property", flaky_claim)

    booking = await booking_service.create_booking(db_session, test_user, make_request())
    assert booking.id is not None
    assert booking.user_id == "guest"
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_gives_up_after_max_attempts(db_session, test_user, properties, monkeypatch):
    async def always_lose(db, property_id, version):
        return False

    monkeypatch.setattr(booking_service, "_claim_property", always_lose)

    with pytest.raises(Conflict, match="concurrently"):
        await booking_service.create_booking(db_session, test_user, make_request())


@pytest_asyncio.fixture
async def shared_db(tmp_path):
    """A file-backed database that several sessions (connections) can share."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/race.db")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as setup:
        guest = User(username="guest", email="guest@example.com", hashed_password="x")
        rival = User(username="rival", email="rival@example.com", hashed_password="x")
        setup.add_all([guest, rival, Property(id=1, name="Røde Hus")])
        await setup.commit()

    yield session_factory, guest, rival
    await engine.dispose()


@pytest.mark.asyncio
async def test_two_writers_race_for_the_same_dates(shared_db, monkeypatch):
    """
    The rival books and commits after the first writer has checked for
    conflicts but before it claims the property. The first writer must lose.
    """
    session_factory, guest, rival = shared_db
    real_find_conflicts = booking_service.find_conflicts
    raced = []
    winners = []

    async def rival_books_in_between(db, property_id, start, end):
        conflicts = await real_find_conflicts(db, property_id, start, end)
        if not raced:
            raced.append(True)
            async with session_factory() as rival_db:
                winners.append(await booking_service.create_booking(rival_db, rival, make_request()))
                await rival_db.commit()
        return conflicts

    monkeypatch.setattr(booking_service, "find_conflicts", rival_books_in_between)

    async with session_factory() as guest_db:
        with pytest.raises(Conflict) as exc_info:
            await booking_service.create_booking(guest_db, guest, make_request())
        await guest_db.rollback()

    conflicting = exc_info.value.extra["conflictingBookings"]
    assert [c["id"] for c in conflicting] == [winners[0].id]
    assert conflicting[0]["userId"] == "rival"

    async with session_factory() as check:
        rows = (await check.execute(select(Booking))).scalars().all()
    assert [(b.user_id, b.property_id) for b in rows] == [("rival", 1)]
