"""In-process TTL cache for idempotent reads.

The cache is an optimization, never a source of truth: concurrent ``set``
calls for one key are last-write-wins, and nothing survives the process.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import structlog


DEFAULT_CACHE_TTL_SECONDS = 300.0


@runtime_checkable
class CacheManager(Protocol):
    """Protocol for key/value caches with per-entry TTL.

    ``None`` is the not-found sentinel, so ``None`` values cannot be cached.
    """

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if absent or expired."""
        ...

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        """Store a value, using the default TTL when none is given."""
        ...

    def delete(self, key: str) -> None:
        """Remove one entry if present."""
        ...

    def clear(self) -> None:
        """Remove every entry."""
        ...

    def prune(self) -> None:
        """Remove every expired entry."""
        ...


@dataclass(frozen=True)
class _CacheEntry:
    value: Any
    expires_at: float


class InMemoryCacheManager:
    """Dict-backed cache with lazy and eager expiry.

    Expired entries are evicted when read and by ``prune``. Every operation
    is synchronous, so entries stay consistent across tasks sharing one
    event loop.
    """

    def __init__(
        self,
        default_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            default_ttl_seconds: TTL applied when ``set`` gets none.
            clock: Monotonic time source in seconds.
            logger: Logger for expiry events.
        """
        if default_ttl_seconds <= 0:
            msg = f"default_ttl_seconds must be positive, got {default_ttl_seconds}"
            raise ValueError(msg)
        self._entries: dict[str, _CacheEntry] = {}
        self._default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._log = (logger or structlog.get_logger()).bind(component="cache")

    @property
    def default_ttl_seconds(self) -> float:
        """TTL applied when ``set`` gets none."""
        return self._default_ttl_seconds

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() >= entry.expires_at:
            del self._entries[key]
            self._log.debug("cache_expired", key=key)
            return None

        return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = self._default_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._entries[key] = _CacheEntry(value=value, expires_at=self._clock() + ttl)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def prune(self) -> None:
        now = self._clock()
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            self._log.debug("cache_pruned", removed=len(expired), remaining=len(self))


class NoOpCache:
    """Cache that stores nothing.

    Lets callers disable caching without branching: every ``get`` misses and
    every mutation is ignored.
    """

    def __len__(self) -> int:
        return 0

    def get(self, key: str) -> Any | None:
        return None

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        pass

    def delete(self, key: str) -> None:
        pass

    def clear(self) -> None:
        pass

    def prune(self) -> None:
        pass
