"""
Redis cache for upstream MRData bodies.

Dashboard views repeat the same handful of Ergast requests, so each response
body is stored under a key derived from its endpoint and query parameters.
Live-season endpoints expire after minutes, finished seasons after a day.
Lap payloads are large and get zlib-compressed.

Until init_redis succeeds every call is a miss or a no-op.
"""

import hashlib
import json
import logging
import zlib
from datetime import datetime, timezone
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

# Seconds to keep a body, by endpoint kind
CACHE_TTL = {
    "current": 300,
    "season": 86400,
    "race_detail": 86400,
    "default": 3600,
}

# Bodies larger than this many bytes are compressed
COMPRESSION_THRESHOLD = 1024

# Stored values start with one marker byte
RAW_MARKER = b"R"
ZLIB_MARKER = b"Z"

_redis_pool: redis.Redis | None = None


async def init_redis(redis_url: str) -> redis.Redis:
    """
    Connect to Redis and check the connection.

    Raises:
        RedisError: If the server cannot be reached
    """
    global _redis_pool

    if _redis_pool is None:
        pool = redis.from_url(redis_url, decode_responses=False)
        try:
            await pool.ping()
        except RedisError as e:
            logger.error(f"Redis at {redis_url} unreachable: {e}")
            await pool.aclose()
            raise
        _redis_pool = pool
        logger.info(f"Response cache connected to {redis_url}")

    return _redis_pool


async def close_redis():
    global _redis_pool
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None
        logger.info("Response cache disconnected")


def get_redis() -> redis.Redis | None:
    return _redis_pool


def ttl_for(endpoint: str) -> int:
    """Pick the expiry for an upstream endpoint path such as ``2021/5/laps``."""
    if endpoint.startswith("current"):
        return CACHE_TTL["current"]

    year = endpoint[:4]
    if not year.isdigit():
        return CACHE_TTL["default"]
    if int(year) >= datetime.now(timezone.utc).year:
        return CACHE_TTL["current"]
    if endpoint.endswith(("/laps", "/pitstops")):
        return CACHE_TTL["race_detail"]
    return CACHE_TTL["season"]


def _generate_cache_key(endpoint: str, **params) -> str:
    """Key for an endpoint and its query parameters; None values are ignored."""
    query = sorted((name, value) for name, value in params.items() if value is not None)
    digest = hashlib.md5(json.dumps(query, default=str).encode()).hexdigest()[:12]
    return f"f1:{endpoint}:{digest}"


def _compress(data: bytes) -> bytes:
    if len(data) > COMPRESSION_THRESHOLD:
        packed = zlib.compress(data, level=6)
        if len(packed) < len(data):
            return ZLIB_MARKER + packed
    return RAW_MARKER + data


def _decompress(data: bytes) -> bytes:
    if data.startswith(ZLIB_MARKER):
        return zlib.decompress(data[1:])
    return data[1:]


async def cache_get(key: str) -> Any | None:
    """Cached body for ``key``, None on a miss or a Redis error."""
    if _redis_pool is None:
        return None

    try:
        stored = await _redis_pool.get(key)
        if stored is None:
            return None
        return json.loads(_decompress(stored))
    except Exception as e:
        logger.warning(f"Cache read failed for {key}: {e}")
        return None


async def cache_set(key: str, value: Any, ttl: int | None = None) -> bool:
    """
    Store a JSON-serializable body.

    Returns:
        True if the body was written
    """
    if _redis_pool is None:
        return False

    try:
        payload = _compress(json.dumps(value).encode("utf-8"))
        await _redis_pool.set(key, payload, ex=ttl or CACHE_TTL["default"])
        return True
    except Exception as e:
        logger.warning(f"Cache write failed for {key}: {e}")
        return False


async def cache_stats() -> dict:
    """Key count and memory use, reported by the health endpoint."""
    if _redis_pool is None:
        return {"status": "disconnected"}

    try:
        info = await _redis_pool.info("memory")
        return {
            "status": "connected",
            "keys": await _redis_pool.dbsize(),
            "used_memory": info.get("used_memory_human", "unknown"),
        }
    except RedisError as e:
        return {"status": "error", "error": str(e)}
