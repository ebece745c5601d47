"""
Tests for application wiring: health, metrics, request IDs, error bodies.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_without_cache(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["cache"] == {"status": "disabled"}


@pytest.mark.asyncio
async def test_metrics_exposed(client: AsyncClient):
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "booking_attempts_total" in response.text


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    assert response.headers["X-Response-Time"].endswith("ms")


@pytest.mark.asyncio
async def test_request_id_is_generated(client: AsyncClient):
    response = await client.get("/")
    assert len(response.headers["X-Request-ID"]) == 8


@pytest.mark.asyncio
async def test_domain_errors_have_uniform_body(client: AsyncClient):
    response = await client.get("/api/User/profile")
    assert response.status_code == 401
    assert response.json() == {
        "error": "UNAUTHENTICATED",
        "message": "Authentication required",
    }
