"""
Adapter: in-memory LRU record cache.

Bounded fingerprint -> IdentityRecord map. Every hit bumps a
monotonic access counter; when full, the entry with the oldest
access is evicted before inserting.
"""

import itertools
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass

from idscan.core.entities.identity_record import IdentityRecord
from idscan.core.interfaces.record_cache import IRecordCache

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    fingerprint: str
    record: IdentityRecord
    last_access: int


class LRURecordCache(IRecordCache):
    """
    LRU cache guarded by a single lock.

    OrderedDict order always matches last_access order (oldest first),
    so eviction is popitem(last=False).
    """

    DEFAULT_CAPACITY = 50

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Cache capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._clock = itertools.count(1)
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, fingerprint: str) -> IdentityRecord | None:
        with self._lock:
            entry = self._entries.get(fingerprint)
            if entry is None:
                self._misses += 1
                return None
            entry.last_access = next(self._clock)
            self._entries.move_to_end(fingerprint)
            self._hits += 1
            return entry.record

    def set(self, fingerprint: str, record: IdentityRecord) -> None:
        with self._lock:
            entry = self._entries.get(fingerprint)
            if entry is not None:
                entry.record = record
                entry.last_access = next(self._clock)
                self._entries.move_to_end(fingerprint)
                return

            if len(self._entries) >= self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Evicted cache entry {evicted[:16]}")

            self._entries[fingerprint] = CacheEntry(
                fingerprint=fingerprint,
                record=record,
                last_access=next(self._clock),
            )

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Record cache cleared")

    def stats(self) -> dict:
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self._capacity,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, fingerprint: object) -> bool:
        # Membership check only, recency untouched
        with self._lock:
            return fingerprint in self._entries
