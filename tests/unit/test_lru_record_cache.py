from concurrent.futures import ThreadPoolExecutor

import pytest

from idscan.core.entities.identity_record import IdentityRecord
from idscan.infrastructure.cache.lru_record_cache import LRURecordCache


def _record(name: str) -> IdentityRecord:
    return IdentityRecord(name=name)


class TestLRURecordCache:

    def test_get_missing(self):
        assert LRURecordCache(2).get("nope") is None

    def test_set_then_get(self):
        cache = LRURecordCache(2)
        record = _record("张三")
        cache.set("a", record)
        assert cache.get("a") is record

    def test_evicts_least_recently_used(self):
        cache = LRURecordCache(3)
        for key in ("a", "b", "c"):
            cache.set(key, _record(key))
        cache.set("d", _record("d"))
        assert len(cache) == 3
        assert "a" not in cache
        assert all(key in cache for key in ("b", "c", "d"))

    def test_get_refreshes_recency(self):
        cache = LRURecordCache(2)
        cache.set("a", _record("a"))
        cache.set("b", _record("b"))
        cache.get("a")
        cache.set("c", _record("c"))
        assert "a" in cache
        assert "b" not in cache

    def test_contains_does_not_refresh(self):
        cache = LRURecordCache(2)
        cache.set("a", _record("a"))
        cache.set("b", _record("b"))
        assert "a" in cache
        cache.set("c", _record("c"))
        assert "a" not in cache

    def test_overwrite_existing_key_does_not_evict(self):
        cache = LRURecordCache(2)
        cache.set("a", _record("a"))
        cache.set("b", _record("b"))
        cache.set("a", _record("a2"))
        assert len(cache) == 2
        assert cache.get("a").name == "a2"
        assert cache.stats()["evictions"] == 0
        # "a" was refreshed by the overwrite, "b" goes next
        cache.set("c", _record("c"))
        assert "b" not in cache

    def test_capacity_one(self):
        cache = LRURecordCache(1)
        cache.set("a", _record("a"))
        cache.set("b", _record("b"))
        assert "a" not in cache
        assert cache.get("b").name == "b"

    @pytest.mark.parametrize("capacity", [0, -1])
    def test_rejects_non_positive_capacity(self, capacity):
        with pytest.raises(ValueError):
            LRURecordCache(capacity)

    def test_clear(self):
        cache = LRURecordCache(2)
        cache.set("a", _record("a"))
        cache.clear()
        assert len(cache) == 0
        assert cache.get("a") is None

    def test_stats(self):
        cache = LRURecordCache(1)
        cache.set("a", _record("a"))
        cache.get("a")
        cache.get("missing")
        cache.set("b", _record("b"))
        assert cache.stats() == {
            "size": 1,
            "capacity": 1,
            "hits": 1,
            "misses": 1,
            "evictions": 1,
        }

    def test_concurrent_access_stays_bounded(self):
        cache = LRURecordCache(10)

        def worker(n: int) -> None:
            for i in range(200):
                key = f"{n}-{i % 25}"
                cache.set(key, _record(key))
                cache.get(key)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(worker, range(8)))

        assert len(cache) == 10
        stats = cache.stats()
        assert stats["hits"] + stats["misses"] == 8 * 200
