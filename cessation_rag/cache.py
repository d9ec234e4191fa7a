"""
Time-based cache for store query results.

Entries expire after ``ttl_seconds`` or when the cache version changes.
Keys are plain strings; callers namespace them with a prefix so a whole
family (e.g. everything about one document) can be invalidated at once.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

# 30 days
DEFAULT_TTL_SECONDS = 30 * 24 * 60 * 60
CACHE_VERSION = "v1.0"
DEFAULT_MAX_ENTRIES = 1000


@dataclass
class _Entry:
    value: Any
    stored_at: float
    version: str


class TTLCache:
    """In-process cache with per-entry expiry."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        version: str = CACHE_VERSION,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max(1, max_entries)
        self.version = version
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None

        if entry.version != self.version:
            logger.debug(f"[CACHE] Version mismatch, dropping: {key}")
            del self._entries[key]
            self.misses += 1
            return None

        if self._clock() - entry.stored_at > self.ttl_seconds:
            logger.debug(f"[CACHE] Expired, dropping: {key}")
            del self._entries[key]
            self.misses += 1
            return None

        self.hits += 1
        return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store ``value``; expired entries are purged and the oldest evicted when full."""
        now = self._clock()
        self._purge(now)
        self._entries.pop(key, None)
        while len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            logger.debug(f"[CACHE] Full, evicting: {oldest}")
            del self._entries[oldest]
        self._entries[key] = _Entry(value=value, stored_at=now, version=self.version)

    def _is_live(self, entry: _Entry, now: float) -> bool:
        return entry.version == self.version and now - entry.stored_at <= self.ttl_seconds

    def _purge(self, now: float) -> int:
        stale = [k for k, e in self._entries.items() if not self._is_live(e, now)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def invalidate(self, prefix: str) -> int:
        """Remove every entry whose key starts with ``prefix``."""
        keys = [k for k in self._entries if k.startswith(prefix)]
        for key in keys:
            del self._entries[key]
        if keys:
            logger.info(f"[CACHE] Invalidated {len(keys)} entries with prefix '{prefix}'")
        return len(keys)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> dict:
        now = self._clock()
        valid = sum(1 for e in self._entries.values() if self._is_live(e, now))
        lookups = self.hits + self.misses
        return {
            "total_entries": len(self._entries),
            "valid_entries": valid,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": (self.hits / lookups) if lookups else 0.0,
        }
