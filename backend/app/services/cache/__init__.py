"""
Cache module for Crypto Charts.

Provides Redis caching for upstream klines.
"""

from app.services.cache.redis_client import (
    KlinesCache,
    get_klines_cache,
    init_redis,
    close_redis,
)

__all__ = [
    "KlinesCache",
    "get_klines_cache",
    "init_redis",
    "close_redis",
]
