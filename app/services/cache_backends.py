import asyncio
import hashlib
import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Optional

from .cache import Cache, CacheResult
from .memory_store import MISSING, MemoryStore

logger = logging.getLogger(__name__)


class MemoryCache(Cache):
    """In-process cache backend. Lives and dies with the process. Entries are kept as JSON text."""
    name = "memory"

    def __init__(self, store: Optional[MemoryStore] = None):
        self._store = store if store is not None else MemoryStore()

    async def get(self, key: str) -> CacheResult:
        raw = self._store.get(key)
        if raw is MISSING:
            return CacheResult.miss()
        try:
            return CacheResult.hit(json.loads(raw))
        except ValueError as ex:
            logger.warning("memory_cache: failed to decode value for %s: %s", key, ex)
            return CacheResult.error(str(ex))

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> CacheResult:
        # Stored as JSON so memory accepts exactly what the file and Redis backends accept.
        try:
            payload = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as ex:
            logger.warning("memory_cache: value for %s is not serializable: %s", key, ex)
            return CacheResult.error(str(ex))
        self._store.set(key, payload, ttl_seconds)
        return CacheResult.ok()

    async def delete(self, key: str) -> CacheResult:
        self._store.delete(key)
        return CacheResult.ok()


class FileCache(Cache):
    """
    Local filesystem cache backend: one JSON file per key under `directory`.

    File name is the SHA-256 of the key, so any key maps to a safe, fixed-length name.
    File body: {"key": ..., "expires_at": <epoch seconds or null>, "value": ...}

    Writes go to a temp file in the same directory and are os.replace()d into place,
    so readers and concurrent writers never observe a partial file.
    """
    name = "file"
    SUFFIX = ".json"
    TEMP_PREFIX = ".tmp-"
    # mkstemp creates 0600 files; cache entries stay readable to other users of CACHE_DIR.
    FILE_MODE = 0o644

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}{self.SUFFIX}"

    async def get(self, key: str) -> CacheResult:
        try:
            return await asyncio.to_thread(self._read, key)
        except (OSError, ValueError) as ex:
            logger.warning("file_cache: read failed for %s: %s", key, ex)
            return CacheResult.error(str(ex))

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> CacheResult:
        try:
            await asyncio.to_thread(self._write, key, value, ttl_seconds)
            return CacheResult.ok()
        except (OSError, TypeError, ValueError) as ex:
            logger.warning("file_cache: write failed for %s: %s", key, ex)
            return CacheResult.error(str(ex))

    async def delete(self, key: str) -> CacheResult:
        try:
            await asyncio.to_thread(self.path_for(key).unlink, missing_ok=True)
            return CacheResult.ok()
        except OSError as ex:
            logger.warning("file_cache: delete failed for %s: %s", key, ex)
            return CacheResult.error(str(ex))

    def clear(self) -> CacheResult:
        """Remove every cache file (and leftover temp file) under the directory. Value is the removed count."""
        removed = 0
        try:
            if not self.directory.exists():
                return CacheResult.ok(0)
            for path in self.directory.iterdir():
                if not path.is_file():
                    continue
                if path.suffix == self.SUFFIX or path.name.startswith(self.TEMP_PREFIX):
                    path.unlink(missing_ok=True)
                    removed += 1
        except OSError as ex:
            logger.exception("file_cache: clear failed in %s", self.directory)
            return CacheResult.error(str(ex))
        logger.info("file_cache: cleared %d entries from %s", removed, self.directory)
        return CacheResult.ok(removed)

    def _read(self, key: str) -> CacheResult:
        path = self.path_for(key)
        try:
            with path.open("r", encoding="utf-8") as f:
                entry = json.load(f)
        except FileNotFoundError:
            return CacheResult.miss()

        if not isinstance(entry, dict):
            raise ValueError(f"malformed cache entry in {path.name}")
        expires_at = entry.get("expires_at")
        if expires_at is not None and (isinstance(expires_at, bool) or not isinstance(expires_at, (int, float))):
            raise ValueError(f"malformed expires_at in {path.name}")
        if expires_at and expires_at < time.time():
            path.unlink(missing_ok=True)
            return CacheResult.miss()
        return CacheResult.hit(entry.get("value"))

    def _write(self, key: str, value: Any, ttl_seconds: Optional[int]) -> None:
        entry = {
            "key": key,
            "expires_at": time.time() + ttl_seconds if ttl_seconds else None,
            "value": value,
        }
        payload = json.dumps(entry, separators=(",", ":"), ensure_ascii=False)

        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=self.TEMP_PREFIX)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.chmod(tmp_name, self.FILE_MODE)
            os.replace(tmp_name, self.path_for(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
