"""
Redis caching for movie catalog listings.

What we cache:
  - Movie list responses keyed by their filter set:
    "movies:list:genre=..&language=..&rating=..&title=.."

Invalidation:
  - Creating a movie deletes every "movies:list:*" key.
  - TTL (REDIS_CACHE_TTL) as a safety net.

Bookings and seat lists are never cached. Redis is optional: if it is
disabled or unreachable every call here degrades to a no-op.
"""

import json
from typing import Optional

import redis.asyncio as redis
from cinebook.core.config import get_settings
from cinebook.core.logging import get_logger
from cinebook.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

MOVIE_LIST_PREFIX = "movies:list:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
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
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def make_movie_list_key(filters: dict[str, Optional[str]]) -> str:
    parts = [f"{name}={(value or '').lower()}" for name, value in sorted(filters.items())]
    return MOVIE_LIST_PREFIX + "&".join(parts)


async def get_cached_movies(filters: dict[str, Optional[str]]) -> Optional[dict]:
    client = await get_redis()
    if not client:
        return None

    key = make_movie_list_key(filters)
    try:
        data = await client.get(key)
        if data:
            record_cache_operation("get", "hit")
            return json.loads(data)
        record_cache_operation("get", "miss")
    except Exception as e:
        record_cache_operation("get", "error")
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_movies(filters: dict[str, Optional[str]], data: dict) -> None:
    client = await get_redis()
    if not client:
        return

    key = make_movie_list_key(filters)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", "ok")
    except Exception as e:
        record_cache_operation("set", "error")
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_movie_cache() -> None:
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=MOVIE_LIST_PREFIX + "*", count=100):
            await client.delete(key)
            deleted += 1
        record_cache_operation("invalidate", "ok")
        logger.info("cache_invalidated", keys_deleted=deleted)
    except Exception as e:
        record_cache_operation("invalidate", "error")
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Redis keyspace hit/miss statistics for /health."""
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
