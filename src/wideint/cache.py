"""Memo tables for canonical instances of frequently constructed small values."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import Final, Generic, TypeVar

_LOG = logging.getLogger(__name__)

T = TypeVar("T")

SMALL_CACHE_MIN: Final[int] = min(0, int(os.environ.get("WIDEINT_SMALL_CACHE_MIN", "-128")))
SMALL_CACHE_MAX: Final[int] = max(2, int(os.environ.get("WIDEINT_SMALL_CACHE_MAX", "128")))
_USE_SMALL_CACHE: Final[bool] = os.environ.get("WIDEINT_DISABLE_SMALL_CACHE", "0") != "1"


class SmallValueCache(Generic[T]):
    """Lazily populated table mapping ints in ``[low, high)`` to one instance each.

    Entries are never invalidated. Concurrent misses on the same key may build
    the value twice; both builds are equal, so whichever lands last wins.
    """

    def __init__(self, low: int = SMALL_CACHE_MIN, high: int = SMALL_CACHE_MAX, *, enabled: bool = True) -> None:
        if low >= high:
            raise ValueError(f"empty cache range [{low}, {high})")
        self.low = low
        self.high = high
        self.enabled = enabled
        self._entries: dict[int, T] = {}
        self._hits = 0
        self._misses = 0

    def covers(self, value: int) -> bool:
        return self.enabled and self.low <= value < self.high

    def get(self, value: int, factory: Callable[[int], T]) -> T:
        if not self.covers(value):
            return factory(value)
        cached = self._entries.get(value)
        if cached is not None:
            self._hits += 1
            return cached
        self._misses += 1
        _LOG.debug("small-value cache miss for %d", value)
        obj = factory(value)
        self._entries[value] = obj
        return obj

    def clear(self) -> None:
        self._entries.clear()

    def stats(self, *, reset: bool = False) -> dict[str, float | int]:
        total = self._hits + self._misses
        stats: dict[str, float | int] = {
            "hits": self._hits,
            "misses": self._misses,
            "size": len(self._entries),
            "hit_rate": float(self._hits / total) if total else 0.0,
        }
        if reset:
            self._hits = 0
            self._misses = 0
        return stats

    def __contains__(self, value: object) -> bool:
        return value in self._entries

    def __len__(self) -> int:
        return len(self._entries)


BIGINT_CACHE: Final[SmallValueCache] = SmallValueCache(enabled=_USE_SMALL_CACHE)
FIXED64_CACHE: Final[SmallValueCache] = SmallValueCache(enabled=_USE_SMALL_CACHE)


def small_value_cache_stats(*, reset: bool = False) -> dict[str, object]:
    bigint = BIGINT_CACHE.stats(reset=reset)
    fixed64 = FIXED64_CACHE.stats(reset=reset)
    hits = int(bigint["hits"]) + int(fixed64["hits"])
    misses = int(bigint["misses"]) + int(fixed64["misses"])
    total = hits + misses
    return {
        "bigint": bigint,
        "fixed64": fixed64,
        "hits": hits,
        "misses": misses,
        "size": int(bigint["size"]) + int(fixed64["size"]),
        "hit_rate": float(hits / total) if total else 0.0,
    }
