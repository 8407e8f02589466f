"""
In-process TTL cache for computed market results.

Implements ResultCachePort:
- Per-key expiry (default 120 s), lazy eviction on read
- Bulk invalidation, called once per refresh cycle
- Injectable monotonic clock for tests

Entries are immutable and only ever replaced under the lock, so a reader
sees either the previous entry, the new one, or a miss.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional

from app.domain.market.ports import ResultCachePort

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 120.0


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    expires_at: float


class TTLCache(ResultCachePort):
    """Thread-safe key/value store with expiry.

    Usage:
        cache = TTLCache(default_ttl=120)
        cache.set(("risk", "turkey", "energy"), assessment)
        cache.get(("risk", "turkey", "energy"))   # hit until expiry
        cache.invalidate_all()                   # every key now misses
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        self._default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[Hashable, CacheEntry] = {}
        self._lock = threading.RLock()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "evictions": 0,
            "invalidations": 0,
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def stats(self) -> dict:
        with self._lock:
            return {**self._stats, "entries": len(self._entries)}

    # ------------------------------------------------------------------
    # ResultCachePort
    # ------------------------------------------------------------------

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the value for key, or None if absent or expired.

        An entry set at ``t`` with TTL ``d`` is a hit while
        ``now <= t + d`` and a miss once ``now > t + d``.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats["misses"] += 1
                return None
            if self._clock() > entry.expires_at:
                del self._entries[key]
                self._stats["evictions"] += 1
                self._stats["misses"] += 1
                return None
            self._stats["hits"] += 1
            return entry.value

    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        """Store value under key; last writer wins."""
        lifetime = self._default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + lifetime)

    def invalidate(self, key: Hashable) -> bool:
        """Drop a single key. Returns True if it was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def invalidate_all(self) -> None:
        with self._lock:
            dropped = len(self._entries)
            self._entries = {}
            self._stats["invalidations"] += 1
        logger.debug("Result cache invalidated (%d entries dropped).", dropped)
