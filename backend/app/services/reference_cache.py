"""Bounded TTL cache for property reference values."""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable
from functools import lru_cache
from threading import Lock

from app.config import get_settings
from app.fmv.aggregator import PropertyReference


class ReferenceCache:
    """Thread-safe LRU cache whose entries go stale after ``ttl_seconds``.

    A TTL of zero disables caching entirely.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float,
        max_entries: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[int, tuple[PropertyReference, float]] = OrderedDict()
        self._lock = Lock()

    def get(self, property_id: int) -> PropertyReference | None:
        with self._lock:
            entry = self._entries.get(property_id)
            if entry is None:
                return None
            reference, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[property_id]
                return None
            self._entries.move_to_end(property_id)
            return reference

    def set(self, property_id: int, reference: PropertyReference) -> None:
        if self.ttl_seconds <= 0:
            return
        with self._lock:
            self._entries[property_id] = (reference, self._clock() + self.ttl_seconds)
            self._entries.move_to_end(property_id)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def get_or_load(
        self,
        property_id: int,
        loader: Callable[[int], PropertyReference],
    ) -> PropertyReference:
        cached = self.get(property_id)
        if cached is not None:
            return cached
        reference = loader(property_id)
        self.set(property_id, reference)
        return reference

    def invalidate(self, property_id: int) -> None:
        with self._lock:
            self._entries.pop(property_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


@lru_cache
def get_reference_cache() -> ReferenceCache:
    """Process-wide cache instance, injected into routes as a dependency."""

    settings = get_settings()
    return ReferenceCache(
        ttl_seconds=settings.reference_cache_ttl_seconds,
        max_entries=settings.reference_cache_max_entries,
    )
