"""
Redis cache client for exchange klines.

Upstream candles are cached for a short window so rapid parameter changes on
the dashboard do not hammer the exchange. Falls back to process memory when
Redis is unavailable.
"""

import json
import logging
import time
from typing import Optional, Dict, List, Any, Tuple

import redis.asyncio as redis

from app.core.config import settings

logger = logging.getLogger(__name__)

# Global Redis connection pool
_redis_pool: Optional[redis.Redis] = None


async def init_redis() -> Optional[redis.Redis]:
    """
    Initialize Redis connection pool.
    Called on application startup.
    """
    global _redis_pool

    if _redis_pool is not None:
        return _redis_pool

    try:
        _redis_pool = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        # Test connection
        await _redis_pool.ping()
        logger.info(f"Redis connected: {settings.redis_url}")
        return _redis_pool
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Using in-memory fallback.")
        _redis_pool = None
        return None


async def close_redis() -> None:
    """Close Redis connection pool."""
    global _redis_pool
    if _redis_pool:
        await _redis_pool.close()
        _redis_pool = None
        logger.info("Redis connection closed")


class KlinesCache:
    """
    Redis-based cache for upstream candle rows.

    Keys:
    - klines:{pair}:{interval}:{limit} → JSON list of {date, open, high, low, close, volume}
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None, ttl: Optional[int] = None):
        self._redis = redis_client
        self.ttl = ttl if ttl is not None else settings.klines_cache_ttl
        # In-memory fallback: key → (expires_at, value)
        self._memory_cache: Dict[str, Tuple[float, str]] = {}

    @property
    def redis(self) -> Optional[redis.Redis]:
        return self._redis or _redis_pool

    @staticmethod
    def key(pair: str, interval: str, limit: int) -> str:
        return f"klines:{pair.upper()}:{interval}:{limit}"

    def _memory_get(self, key: str) -> Optional[str]:
        """Fallback to memory cache, dropping expired entries."""
        entry = self._memory_cache.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if time.monotonic() >= expires_at:
            del self._memory_cache[key]
            return None
        return value

    def _memory_set(self, key: str, value: str) -> None:
        """Fallback to memory cache, purging every expired entry first."""
        now = time.monotonic()
        expired = [k for k, (expires_at, _) in self._memory_cache.items() if now >= expires_at]
        for k in expired:
            del self._memory_cache[k]
        self._memory_cache[key] = (now + self.ttl, value)

    async def get_rows(
        self,
        pair: str,
        interval: str,
        limit: int,
    ) -> Optional[List[Dict[str, Any]]]:
        """Get cached rows, or None if absent or expired."""
        key = self.key(pair, interval, limit)

        if self.redis:
            try:
                value = await self.redis.get(key)
                return json.loads(value) if value else None
            except Exception as e:
                logger.debug(f"Redis get_rows failed: {e}")

        value = self._memory_get(key)
        return json.loads(value) if value else None

    async def set_rows(
        self,
        pair: str,
        interval: str,
        limit: int,
        rows: List[Dict[str, Any]],
    ) -> bool:
        """Store rows for `ttl` seconds."""
        if self.ttl <= 0:
            return False

        key = self.key(pair, interval, limit)
        value = json.dumps(rows)

        if self.redis:
            try:
                await self.redis.set(key, value, ex=self.ttl)
                return True
            except Exception as e:
                logger.debug(f"Redis set_rows failed: {e}")

        self._memory_set(key, value)
        return True

    def clear_memory(self) -> None:
        """Drop every in-memory entry."""
        self._memory_cache.clear()


# Singleton instance
_klines_cache: Optional[KlinesCache] = None


def get_klines_cache() -> KlinesCache:
    """Get the klines cache singleton."""
    global _klines_cache
    if _klines_cache is None:
        _klines_cache = KlinesCache()
    return _klines_cache
