"""Upstream response cache."""

from db.cache import (
    init_redis,
    close_redis,
    get_redis,
    cache_get,
    cache_set,
    cache_stats,
    ttl_for,
    CACHE_TTL,
)

__all__ = [
    "init_redis",
    "close_redis",
    "get_redis",
    "cache_get",
    "cache_set",
    "cache_stats",
    "ttl_for",
    "CACHE_TTL",
]
