"""Time-bounded memoization for query results and facet lookups."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol, TypeVar

T = TypeVar("T")


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""


@dataclass(frozen=True)
class _CacheEntry:
    value: object
    expires_at: datetime


class InMemoryCache(Cache):
    """Process-local cache; entries are replaced whole and swept once expired."""

    def __init__(self) -> None:
        self._entries: dict[str, _CacheEntry] = {}

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        self._evict_expired(datetime.now(tz=UTC))
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL."""
        now = datetime.now(tz=UTC)
        self._evict_expired(now)
        expires_at = now + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)

    def _evict_expired(self, now: datetime) -> None:
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)


def get_or_compute(
    cache: Cache, key: str, ttl_seconds: int, compute: Callable[[], T]
) -> T:
    """Return the cached value for ``key``, computing and storing it on a miss."""
    cached = cache.get(key)
    if cached is not None:
        return cached  # type: ignore[return-value]
    value = compute()
    cache.set(key, value, ttl_seconds=ttl_seconds)
    return value
