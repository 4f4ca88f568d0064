from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class Outcome(str, Enum):
    HIT = "hit"
    MISS = "miss"
    OK = "ok"
    ERROR = "error"


@dataclass(frozen=True)
class CacheResult:
    """
    Outcome of a single backend call.
    Backends never raise on I/O failures; they return ERROR with a reason and
    the facade decides what that means (miss on read, no-op on write).
    """
    outcome: Outcome
    value: Any = None
    reason: Optional[str] = None

    @classmethod
    def hit(cls, value: Any) -> "CacheResult":
        return cls(Outcome.HIT, value)

    @classmethod
    def miss(cls) -> "CacheResult":
        return cls(Outcome.MISS)

    @classmethod
    def ok(cls, value: Any = None) -> "CacheResult":
        return cls(Outcome.OK, value)

    @classmethod
    def error(cls, reason: str) -> "CacheResult":
        return cls(Outcome.ERROR, reason=reason)

    @property
    def is_hit(self) -> bool:
        return self.outcome is Outcome.HIT

    @property
    def is_error(self) -> bool:
        return self.outcome is Outcome.ERROR


class Cache(ABC):
    """Minimal cache interface to enable swapping backends (memory, file, Redis) without changing callers."""

    name: str = "cache"
    # Remote stores are shared across processes, so the local write policy does not apply to them.
    is_remote: bool = False

    @abstractmethod
    async def get(self, key: str) -> CacheResult:
        ...

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> CacheResult:
        ...

    @abstractmethod
    async def delete(self, key: str) -> CacheResult:
        ...


def is_empty(value: Any) -> bool:
    """
    True for None and for values that serialize to an empty JSON array.
    The document service answers a miss with an empty collection, so an empty
    list is treated as "no data" even when it was a legitimate result.
    """
    if value is None:
        return True
    return isinstance(value, (list, tuple)) and len(value) == 0


def build_key(resource: str, *parts: Any, **params: Any) -> str:
    """
    Compose a cache key from a logical resource name and disambiguating parameters.
    Keyword parameters are sorted so the same request always yields the same key.

        >>> build_key("post", "123", locale="en")
        'post:123:locale=en'
    """
    segments = [resource, *(str(p) for p in parts)]
    segments.extend(f"{k}={params[k]}" for k in sorted(params))
    return ":".join(segments)
