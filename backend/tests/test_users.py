"""
Tests for the user directory.
"""

import pytest
from httpx import AsyncClient

from conftest import create_booking_row, days_from_today


@pytest.mark.asyncio
async def test_directory_requires_login(client: AsyncClient):
    response = await client.get("/api/User/all")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_directory_shows_next_upcoming_stay(
    client: AsyncClient, db_session, auth_headers, test_user, other_user, properties
):
    # Past, ongoing and two upcoming stays; only the nearest upcoming one counts
    await create_booking_row(db_session, 1, test_user, days_from_today(-10), days_from_today(-7))
    await create_booking_row(db_session, 1, test_user, days_from_today(-1), days_from_today(2))
    await create_booking_row(db_session, 1, test_user, days_from_today(30), days_from_today(33))
    await create_booking_row(db_session, 2, test_user, days_from_today(12), days_from_today(14))

    response = await client.get("/api/User/all", headers=auth_headers)
    assert response.status_code == 200
    users = {u["username"]: u for u in response.json()}

    guest = users["guest"]
    assert guest["firstName"] == "Grete"
    assert guest["email"] == "guest@example.com"
    assert guest["nextBookingDate"] == f"{days_from_today(12).isoformat()}T00:00:00Z"
    assert guest["nextBookingPropertyName"] == "Søhuset"

    neighbour = users["neighbour"]
    assert neighbour["nextBookingDate"] is None
    assert neighbour["nextBookingPropertyName"] is None


@pytest.mark.asyncio
async def test_directory_ordered_by_username(client: AsyncClient, auth_headers, other_user, admin_user):
    response = await client.get("/api/User/all", headers=auth_headers)
    usernames = [u["username"] for u in response.json()]
    assert usernames == sorted(usernames)
    assert len(usernames) == 3
    assert all("hashedPassword" not in u for u in response.json())
