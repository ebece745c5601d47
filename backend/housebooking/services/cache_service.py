"""
Redis caching for booking listings.

What we cache:
  - The full booking list and the per-property lists (JSON, camelCase)
  - Key pattern: "bookings:list:scope=all" / "bookings:list:scope=property:{id}"

Future-only listings depend on today's date and are always read live.

Invalidation:
  - Booking created or deleted: drop every "bookings:list:*" key
  - Profile updated: same, because the lists embed owner names and emails
  - TTL as safety net

Redis is advisory. Any Redis error is logged and treated as a cache miss;
the database stays the source of truth.
"""

import json
from typing import Optional

import redis.asyncio as redis
from housebooking.core.config import get_settings
from housebooking.core.logging import get_logger
from housebooking.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

BOOKING_LIST_PREFIX = "bookings:list:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled or down."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def booking_list_key(property_id: Optional[int] = None) -> str:
    scope = "all" if property_id is None else f"property:{property_id}"
    return f"{BOOKING_LIST_PREFIX}scope={scope}"


async def get_cached_bookings(property_id: Optional[int] = None) -> Optional[list[dict]]:
    client = await get_redis()
    if not client:
        return None

    key = booking_list_key(property_id)
    try:
        data = await client.get(key)
        record_cache_operation("get", hit=data is not None)
        if data:
            logger.debug("cache_hit", key=key)
            return json.loads(data)
        logger.debug("cache_miss", key=key)
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_bookings(data: list[dict], property_id: Optional[int] = None) -> None:
    client = await get_redis()
    if not client:
        return

    key = booking_list_key(property_id)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data))
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_booking_cache() -> None:
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{BOOKING_LIST_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
