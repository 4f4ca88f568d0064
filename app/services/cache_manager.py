# app/services/cache_manager.py

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from app.config import ProcessConfig, settings
from .cache import Cache, is_empty
from .cache_factory import get_cache
from .write_policy import may_write_local

logger = logging.getLogger(__name__)

Producer = Callable[..., Union[Any, Awaitable[Any]]]


class CacheManager:
    """
    Read-through / write-through facade over the active cache backend.

    Cache failures are never fatal: a backend error reads as a miss and a failed
    write is dropped. Producer failures are not caught, since there is no
    fallback data to return.

    No lock is held between the read and the write, so concurrent misses on the
    same key may each call the producer and write the same value.
    """

    def __init__(self, config: ProcessConfig, backend: Cache):
        self.config = config
        self.backend = backend

    @property
    def writable(self) -> bool:
        return may_write_local(
            self.config.lifecycle_phase,
            self.backend.is_remote,
            self.config.is_production,
        )

    async def get_or_set(
        self,
        key: str,
        producer: Producer,
        *args: Any,
        ttl_seconds: Optional[int] = None,
        **kwargs: Any,
    ) -> Any:
        """
        Return the cached value for `key`, or call `producer(*args, **kwargs)`,
        store its result and return it. Empty results return None and are not stored.
        `producer` may be a plain function or a coroutine function.
        """
        cached = await self.get(key)
        if cached is not None:
            return cached

        data = producer(*args, **kwargs)
        if inspect.isawaitable(data):
            data = await data

        if is_empty(data):
            return None
        await self.set(key, data, ttl_seconds)
        return data

    async def get(self, key: str, force: bool = False) -> Any:
        if not (self.config.enable_cache or force):
            return None

        result = await self.backend.get(key)
        if result.is_error:
            logger.debug("cache: treating backend error as miss for %s: %s", key, result.reason)
            return None
        if not result.is_hit or is_empty(result.value):
            return None
        return result.value

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        if is_empty(value) or not self.config.enable_cache:
            return
        if not self.writable:
            logger.debug("cache: local write suppressed for %s", key)
            return

        ttl = ttl_seconds if ttl_seconds is not None else (self.config.cache_ttl_seconds or None)
        result = await self.backend.set(key, value, ttl)
        if result.is_error:
            logger.debug("cache: dropping failed write for %s: %s", key, result.reason)

    async def delete(self, key: str) -> None:
        if not self.config.enable_cache:
            return
        result = await self.backend.delete(key)
        if result.is_error:
            logger.debug("cache: dropping failed delete for %s: %s", key, result.reason)


_manager: Optional[CacheManager] = None


def get_cache_manager() -> CacheManager:
    global _manager
    if _manager is None or _manager.backend is not get_cache():
        _manager = CacheManager(settings, get_cache())
    return _manager


async def get_or_set_data_with_cache(key: str, producer: Producer, *args: Any, **kwargs: Any) -> Any:
    return await get_cache_manager().get_or_set(key, producer, *args, **kwargs)


async def get_or_set_data_with_custom_cache(
    key: str, ttl_seconds: Optional[int], producer: Producer, *args: Any, **kwargs: Any
) -> Any:
    return await get_cache_manager().get_or_set(key, producer, *args, ttl_seconds=ttl_seconds, **kwargs)


async def get_data_from_cache(key: str, force: bool = False) -> Any:
    return await get_cache_manager().get(key, force=force)


async def set_data_to_cache(key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
    await get_cache_manager().set(key, value, ttl_seconds)


async def del_cache_data(key: str) -> None:
    await get_cache_manager().delete(key)
