"""
Calculation Cache

Short-lived memoization for the pricing entry points. Interactive callers
recompute totals on every refresh with the same inputs; the cache lets those
repeated calls skip the work for a few seconds.
"""

import dataclasses
import itertools
import json
import logging
import threading
import time
from decimal import Decimal
from enum import Enum
from typing import Any, Callable

from . import config

logger = logging.getLogger(__name__)

_uncacheable_keys = itertools.count()

# Tells "not cached" apart from a cached None
_MISSING = object()


def _json_default(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        # Shallow on purpose: the encoder recurses and detects cycles itself
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    raise TypeError(f"Object of type {type(value).__name__} is not serializable")


def make_cache_key(prefix: str, data: Any) -> str:
    """
    Build a cache key from a prefix and a structural serialization of data.

    Structurally equal inputs produce the same key even when they are
    different objects. If data cannot be serialized (e.g. it contains a
    cycle) a key that can never repeat is returned instead, so the lookup
    misses rather than fails.
    """
    try:
        return prefix + json.dumps(data, sort_keys=True, default=_json_default)
    except (TypeError, ValueError, RecursionError) as e:
        logger.debug(f"Uncacheable input for {prefix!r}: {e}")
        return f"{prefix}<uncacheable:{next(_uncacheable_keys)}>"


@dataclasses.dataclass
class CacheEntry:
    result: Any
    computed_at: float


class CalculationCache:
    """
    Thread-safe, time-bound, size-bound result cache.

    Entries expire ttl_seconds after they were computed. When a new key
    would push the cache past max_entries, the oldest inserted entry is
    dropped (insertion order, not LRU).
    """

    def __init__(
        self,
        ttl_seconds: float = config.CACHE_TTL_SECONDS,
        max_entries: int = config.CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached result, or default if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            if self._clock() - entry.computed_at < self.ttl_seconds:
                return entry.result
            del self._entries[key]
            return default

    def set(self, key: str, result: Any) -> None:
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_entries:
                oldest_key = next(iter(self._entries))
                del self._entries[oldest_key]
                logger.debug(f"Evicted oldest cache entry: {oldest_key[:80]}")
            self._entries[key] = CacheEntry(result=result, computed_at=self._clock())

    def get_or_compute(self, prefix: str, data: Any, compute: Callable[[], Any]) -> Any:
        """Return the cached result for (prefix, data), computing it on a miss."""
        key = make_cache_key(prefix, data)
        cached = self.get(key, _MISSING)
        if cached is not _MISSING:
            return cached

        result = compute()
        self.set(key, result)
        return result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries
