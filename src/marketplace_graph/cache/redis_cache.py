"""
Redis cache for computed recommendation lists.

Provides a caching layer for the multi-hop traversal with:
- Configurable TTL (default 60 seconds), which bounds staleness
- Per-user invalidation when that user records a new interaction
- JSON serialization of the scored candidate list

Every cache failure is logged and treated as a miss; the cache never fails a
recommendation request.
"""

import json
import logging
import re
from typing import Any

from redis.asyncio import ConnectionPool, Redis

logger = logging.getLogger(__name__)

# Characters with special meaning in Redis SCAN MATCH patterns
_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def _escape_glob(value: str) -> str:
    return _GLOB_SPECIAL.sub(r"\\\1", value)


def generate_cache_key(user_id: str, limit: int) -> str:
    """
    Cache key for one user's recommendation list at a given limit.

    Returns:
        Key string in format: user:<user_id>:limit:<limit>
    """
    return f"user:{user_id}:limit:{limit}"


class RecommendationCache:
    """
    Redis-based cache for recommendation results.

    Values are stored as JSON under ``key_prefix + generate_cache_key(...)``
    with ``SETEX`` so every entry expires after ``ttl_seconds``.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379",
        ttl_seconds: int = 60,
        key_prefix: str = "mkt:recs:",
        max_connections: int = 10,
    ):
        """
        Args:
            url: Redis connection URL
            ttl_seconds: TTL for cache entries; upper bound on staleness
            key_prefix: Prefix for all cache keys
            max_connections: Maximum Redis connections in pool
        """
        self.url = url
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix
        self.max_connections = max_connections

        self._pool: ConnectionPool | None = None
        self._redis: Redis | None = None
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize Redis connection pool."""
        if self._initialized:
            return

        self._pool = ConnectionPool.from_url(
            self.url,
            max_connections=self.max_connections,
            decode_responses=True,
        )

        self._redis = Redis(connection_pool=self._pool)

        try:
            await self._redis.ping()
            self._initialized = True
            logger.info(f"RecommendationCache initialized: {self.url} (TTL={self.ttl_seconds}s)")
        except Exception as e:
            logger.error(f"RecommendationCache initialization failed: {e}")
            if self._redis:
                await self._redis.aclose()
            if self._pool:
                await self._pool.aclose()
            self._redis = None
            self._pool = None
            raise

    async def close(self) -> None:
        """Close Redis connection pool."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

        if self._pool:
            await self._pool.aclose()
            self._pool = None

        self._initialized = False

    def _make_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, user_id: str, limit: int) -> list[dict[str, Any]] | None:
        """
        Get a cached recommendation list.

        Returns:
            List of {"product_id", "score"} dicts, or None on miss or error
        """
        if not self._initialized or not self._redis:
            return None

        key = generate_cache_key(user_id, limit)
        try:
            value = await self._redis.get(self._make_key(key))
            if value is None:
                return None
            return json.loads(value)
        except Exception as e:
            logger.warning(f"Cache get failed for key {key}: {e}")
            return None

    async def set(self, user_id: str, limit: int, recommendations: list[dict[str, Any]]) -> bool:
        """
        Cache a recommendation list with TTL.

        Returns:
            True if successful, False otherwise
        """
        if not self._initialized or not self._redis:
            return False

        key = generate_cache_key(user_id, limit)
        try:
            await self._redis.setex(self._make_key(key), self.ttl_seconds, json.dumps(recommendations))
            return True
        except Exception as e:
            logger.warning(f"Cache set failed for key {key}: {e}")
            return False

    async def invalidate_user(self, user_id: str) -> int:
        """
        Drop every cached list for one user (all limits).

        Returns:
            Number of keys deleted
        """
        if not self._initialized or not self._redis:
            return 0

        pattern = self._make_key(f"user:{_escape_glob(user_id)}:limit:*")
        try:
            keys = [key async for key in self._redis.scan_iter(match=pattern)]
            if not keys:
                return 0

            deleted = await self._redis.delete(*keys)
            logger.debug(f"Cache invalidated {deleted} keys for user {user_id}")
            return deleted
        except Exception as e:
            logger.warning(f"Cache invalidation failed for user {user_id}: {e}")
            return 0
