"""
Redis caching service for parsed exam schedules.

Thin async wrapper exposing the get/set/flush capability the lookup service
needs, with listing (de)serialization done through orjson.
"""

import logging
from typing import Any

import orjson
from redis import asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

# 7200 seconds, two hours
DEFAULT_CACHE_TTL = 7200


class RedisCacheService:
    """
    Key/value store with TTL-on-write and full flush.

    The Redis client is injected so the owner controls its lifecycle; call
    ``close()`` on shutdown.
    """

    def __init__(self, redis_client: aioredis.Redis, default_ttl: int = DEFAULT_CACHE_TTL):
        """
        Args:
            redis_client: asyncio Redis client instance
            default_ttl: TTL in seconds used when ``set`` is not given one
        """
        self.redis = redis_client
        self.default_ttl = default_ttl

    @classmethod
    def from_url(cls, redis_url: str, default_ttl: int = DEFAULT_CACHE_TTL) -> "RedisCacheService":
        client = aioredis.from_url(redis_url, encoding="utf-8", decode_responses=True)
        logger.info("Redis cache client created for %s", redis_url)
        return cls(client, default_ttl=default_ttl)

    async def get(self, key: str) -> str | None:
        value = await self.redis.get(key)
        if value is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        ttl = ttl or self.default_ttl
        result = await self.redis.set(key, value, ex=ttl)
        logger.debug("Cached: %s (TTL=%ds)", key, ttl)
        return bool(result)

    async def flush_all(self) -> bool:
        """Remove every key from the store, waiting for the server's acknowledgment."""
        result = await self.redis.flushall()
        logger.info("Redis cache flushed")
        return bool(result)

    async def ping(self) -> bool:
        return bool(await self.redis.ping())

    async def close(self) -> None:
        try:
            await self.redis.aclose()
        except RedisError as exc:
            logger.warning("Error closing Redis connection: %s", exc)
        else:
            logger.info("Redis connection closed")


def dump_value(data: Any) -> str:
    """Serialize a JSON-compatible value for storage."""
    return orjson.dumps(data).decode("utf-8")


def load_value(payload: str | bytes) -> Any:
    return orjson.loads(payload)
