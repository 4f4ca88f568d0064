# app/services/redis_cache.py
import json
import logging
from typing import Any, Optional

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from .cache import Cache, CacheResult

logger = logging.getLogger(__name__)


class RedisCache(Cache):
    """Shared cache on Redis; entries outlive any single process and use Redis' native TTL."""
    name = "redis"
    is_remote = True

    def __init__(self, url: Optional[str] = None, client: Optional[aioredis.Redis] = None):
        if client is None:
            if not url:
                raise ValueError("RedisCache requires a url or a client")
            # from_url validates the scheme eagerly; connections are opened lazily.
            client = aioredis.Redis.from_url(url, decode_responses=True)
        self._client = client

    async def get(self, key: str) -> CacheResult:
        try:
            raw = await self._client.get(key)
        except RedisError as ex:
            logger.warning("redis_cache: GET %s failed: %s", key, ex)
            return CacheResult.error(str(ex))
        if raw is None:
            return CacheResult.miss()
        try:
            return CacheResult.hit(json.loads(raw))
        except ValueError as ex:
            logger.warning("redis_cache: failed to decode value for %s: %s", key, ex)
            return CacheResult.error(str(ex))

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> CacheResult:
        try:
            payload = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as ex:
            logger.warning("redis_cache: value for %s is not serializable: %s", key, ex)
            return CacheResult.error(str(ex))
        try:
            if ttl_seconds:
                await self._client.set(key, payload, ex=ttl_seconds)
            else:
                await self._client.set(key, payload)
        except RedisError as ex:
            logger.warning("redis_cache: SET %s failed: %s", key, ex)
            return CacheResult.error(str(ex))
        return CacheResult.ok()

    async def delete(self, key: str) -> CacheResult:
        try:
            await self._client.delete(key)
        except RedisError as ex:
            logger.warning("redis_cache: DEL %s failed: %s", key, ex)
            return CacheResult.error(str(ex))
        return CacheResult.ok()

    async def close(self) -> None:
        try:
            await self._client.aclose()
        except RedisError as ex:
            logger.warning("redis_cache: close failed: %s", ex)
