import logging
from typing import Optional

from app.config import ProcessConfig, settings
from .cache import Cache
from .cache_backends import FileCache, MemoryCache
from .redis_cache import RedisCache

logger = logging.getLogger(__name__)

_cache_singleton: Optional[Cache] = None
_file_cache_singleton: Optional[FileCache] = None


def select_backend(config: ProcessConfig) -> Cache:
    """
    Pick the cache backend for a configuration:
      - REDIS_URL set        -> Redis (shared across processes)
      - ENABLE_FILE_CACHE on -> local files under CACHE_DIR
      - otherwise            -> in-process memory

    Never fails: an unusable Redis URL falls through to the next option.
    """
    if config.redis_url:
        try:
            return RedisCache(config.redis_url)
        except ValueError as ex:
            logger.warning("cache: invalid REDIS_URL, falling back to local cache: %s", ex)

    if config.enable_file_cache:
        return FileCache(config.cache_dir)

    return MemoryCache()


def get_cache() -> Cache:
    """Returns the process-wide cache backend, selected once from configuration."""
    global _cache_singleton
    if _cache_singleton is None:
        _cache_singleton = select_backend(settings)
        logger.info("cache: using %s backend", _cache_singleton.name)
    return _cache_singleton


def get_file_cache() -> FileCache:
    """
    File backend used for administrative cleanup.
    Reuses the active backend when it is the file cache so both see the same directory.
    """
    global _file_cache_singleton
    if _file_cache_singleton is None:
        active = get_cache()
        _file_cache_singleton = active if isinstance(active, FileCache) else FileCache(settings.cache_dir)
    return _file_cache_singleton


async def close_cache() -> None:
    global _cache_singleton, _file_cache_singleton
    if isinstance(_cache_singleton, RedisCache):
        await _cache_singleton.close()
    _cache_singleton = None
    _file_cache_singleton = None
