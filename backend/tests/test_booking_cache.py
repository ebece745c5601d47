"""
Tests for booking-list cache invalidation ordering.

Listings are cached, so invalidation must only happen once the write is
committed; otherwise a listing request in between re-caches the old rows.
"""

import pytest
from httpx import AsyncClient

from housebooking.api.routes import bookings as booking_routes
from housebooking.api.routes import users as user_routes
from conftest import days_from_today


@pytest.fixture
def invalidations(db_session, monkeypatch):
    """Record whether the request transaction was still open at each invalidation."""
    seen = []

    async def record_invalidation():
        seen.append(db_session.in_transaction())
        return 0

    monkeypatch.setattr(booking_routes, "invalidate_booking_cache", record_invalidation)
    monkeypatch.setattr(user_routes, "invalidate_booking_cache", record_invalidation)
    return seen


def booking_payload():
    return {
        "propertyId": 1,
        "startDate": days_from_today(10).isoformat(),
        "endDate": days_from_today(12).isoformat(),
        "expectedPeople": 2,
    }


@pytest.mark.asyncio
async def test_create_invalidates_after_commit(client: AsyncClient, auth_headers, properties, invalidations):
    response = await client.post("/api/Bookings", json=booking_payload(), headers=auth_headers)
    assert response.status_code == 201
    assert invalidations == [False]


@pytest.mark.asyncio
async def test_delete_invalidates_after_commit(client: AsyncClient, auth_headers, properties, invalidations):
    created = await client.post("/api/Bookings", json=booking_payload(), headers=auth_headers)
    response = await client.delete(f"/api/Bookings/{created.json()['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert invalidations == [False, False]


@pytest.mark.asyncio
async def test_profile_update_invalidates_after_commit(client: AsyncClient, auth_headers, invalidations):
    response = await client.put("/api/User/profile", headers=auth_headers, json={
        "firstName": "Greta",
        "lastName": "Gæst",
        "phoneNumber": "",
        "email": "greta@example.com",
    })
    assert response.status_code == 200
    assert invalidations == [False]


@pytest.mark.asyncio
async def test_rejected_booking_does_not_invalidate(client: AsyncClient, auth_headers, properties, invalidations):
    await client.post("/api/Bookings", json=booking_payload(), headers=auth_headers)
    response = await client.post("/api/Bookings", json=booking_payload(), headers=auth_headers)
    assert response.status_code == 409
    assert invalidations == [False]
