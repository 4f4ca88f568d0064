import time
from threading import RLock
from typing import Any, Dict, Optional, Tuple

MISSING = object()


class MemoryStore:
    """
    Thread-safe key/value store with optional per-entry TTL.
    Expiry is checked lazily on read. Values are stored as given; callers store immutable payloads.
    """
    def __init__(self):
        self._data: Dict[str, Tuple[float, Any]] = {}
        self._lock = RLock()

    def get(self, key: str, default: Any = MISSING) -> Any:
        now = time.time()
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return default
            expires_at, value = item
            if expires_at and expires_at < now:
                # Expired: drop and miss
                self._data.pop(key, None)
                return default
            return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        expires_at = time.time() + ttl_seconds if ttl_seconds else 0.0
        with self._lock:
            self._data[key] = (expires_at, value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)
