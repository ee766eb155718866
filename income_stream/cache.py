"""
Cache - In-memory TTL cache for market data.

Usage:
    from income_stream.cache import Cache

    cache = Cache('quotes', ttl_seconds=7 * 86400)
    cache.set('quote_CLM', quote)
    cached = cache.get('quote_CLM')     # None if missing or expired
    cache.invalidate('quote_CLM')
    cache.clear()

Entries are lost on restart. Concurrent writers to the same key simply
overwrite each other.
"""

import time
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A cached value with its expiry time."""

    value: T
    expires_at: float
    created_at: float

    @property
    def expired(self) -> bool:
        return time.time() > self.expires_at


class Cache(Generic[T]):
    """
    Named TTL cache. Cache('quotes') returns the same object everywhere
    in the process.
    """

    _instances: dict[str, "Cache"] = {}

    def __new__(cls, name: str, ttl_seconds: int = 86400):
        if name not in cls._instances:
            instance = super().__new__(cls)
            instance._initialized = False
            cls._instances[name] = instance
        return cls._instances[name]

    def __init__(self, name: str, ttl_seconds: int = 86400):
        if self._initialized:
            return
        self._initialized = True
        self._name = name
        self._ttl = ttl_seconds
        self._data: dict[str, CacheEntry[T]] = {}
        self._hits = 0
        self._misses = 0

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def set_ttl(self, ttl_seconds: int) -> None:
        """Change the default TTL for entries stored from now on."""
        self._ttl = ttl_seconds

    def get(self, key: str) -> Optional[T]:
        """Return the cached value, or None when absent or expired."""
        entry = self._data.get(key)
        if entry is None:
            self._misses += 1
            return None
        if entry.expired:
            del self._data[key]
            self._misses += 1
            return None
        self._hits += 1
        return entry.value

    def set(self, key: str, value: T, ttl_seconds: Optional[int] = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self._ttl
        now = time.time()
        self._data[key] = CacheEntry(value=value, expires_at=now + ttl, created_at=now)

    def invalidate(self, key: str) -> bool:
        """Remove one entry. Returns True if it existed."""
        return self._data.pop(key, None) is not None

    def clear(self) -> int:
        """Remove all entries. Returns how many were removed."""
        count = len(self._data)
        self._data.clear()
        return count

    def stats(self) -> dict:
        valid = sum(1 for entry in self._data.values() if not entry.expired)
        total = self._hits + self._misses
        return {
            "name": self._name,
            "entries": valid,
            "ttl_seconds": self._ttl,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / total if total > 0 else 0.0,
        }
