"""
Tests for cache regions and the cache service.
"""

import json
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import pytest
import redis

from rag_pipeline.repositories import InMemoryCacheRepository, RedisCacheRepository
from rag_pipeline.services import CacheService


@pytest.fixture
def region(clock):
    """Small region on the fake clock."""
    return InMemoryCacheRepository("test", max_size=2, ttl=300, clock=clock)


def test_get_returns_value_until_ttl_elapses(region, clock):
    region.set("k", "v")

    clock.advance(299)
    assert region.get("k") == "v"

    clock.advance(1)
    assert region.get("k") is None


def test_per_entry_ttl_overrides_default(region, clock):
    region.set("short", 1, ttl=10)
    region.set("long", 2)

    clock.advance(10)

    assert region.get("short") is None
    assert region.get("long") == 2


def test_least_recently_used_entry_is_evicted(region):
    region.set("a", 1)
    region.set("b", 2)
    region.get("a")

    region.set("c", 3)

    assert region.get("a") == 1
    assert region.get("b") is None
    assert region.get("c") == 3
    assert region.get_stats()["evictions"] == 1


def test_expired_entries_are_purged_before_evicting(region, clock):
    region.set("old", 1, ttl=5)
    region.set("fresh", 2)
    clock.advance(5)

    region.set("new", 3)

    assert region.get("fresh") == 2
    assert region.get("new") == 3
    assert region.get_stats()["evictions"] == 0


def test_get_list_only_returns_sequences(region):
    region.set("list", ("a", "b"))
    region.set("scalar", "a")

    assert region.get_list("list") == ["a", "b"]
    assert region.get_list("scalar") is None
    assert region.get_list("missing") is None


def test_delete_and_clear(region):
    region.set("a", 1)
    region.set("b", 2)

    assert region.delete("a") is True
    assert region.delete("a") is False
    assert region.clear() == 1
    assert region.size() == 0


def test_hit_and_miss_counters(region):
    region.set("a", 1)
    region.get("a")
    region.get("missing")

    stats = region.get_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["name"] == "test"


@pytest.mark.parametrize("max_size, ttl", [(0, 300), (10, 0)])
def test_invalid_limits_are_rejected(max_size, ttl):
    with pytest.raises(ValueError):
        InMemoryCacheRepository("bad", max_size=max_size, ttl=ttl)


def test_concurrent_readers_and_writers():
    region = InMemoryCacheRepository("shared", max_size=32, ttl=300)
    sizes = []

    def worker(worker_id: int) -> None:
        for i in range(200):
            region.set(f"k{worker_id}-{i}", i)
            region.set("shared", worker_id)
            region.get(f"k{worker_id}-{i // 2}")
            region.get("shared")
            sizes.append(region.size())

    with ThreadPoolExecutor(max_workers=8) as pool:
        futures = [pool.submit(worker, worker_id) for worker_id in range(8)]
        for future in futures:
            future.result()

    assert max(sizes) <= 32
    assert region.size() <= 32
    assert region.get("shared") in range(8)


class TestRedisCacheRepository:
    @pytest.fixture
    def client(self):
        return MagicMock()

    def test_set_stores_json_under_region_prefix(self, client):
        repo = RedisCacheRepository("results", ttl=3600, redis_client=client)

        repo.set("ai:title:abc", {"score": 80})

        client.set.assert_called_once_with("results:ai:title:abc", json.dumps({"score": 80}), ex=3600)

    def test_fractional_ttl_is_rounded_up(self, client):
        repo = RedisCacheRepository("results", ttl=3600, redis_client=client)

        repo.set("k", "v", ttl=0.2)

        assert client.set.call_args.kwargs["ex"] == 1

    def test_get_decodes_json(self, client):
        client.get.return_value = b'["a", "b"]'
        repo = RedisCacheRepository("results", ttl=3600, redis_client=client)

        assert repo.get("k") == ["a", "b"]
        assert repo.get_list("k") == ["a", "b"]
        client.get.assert_called_with("results:k")

    def test_undecodable_value_is_dropped(self, client):
        client.get.return_value = b"not json"
        client.delete.return_value = 1
        repo = RedisCacheRepository("results", ttl=3600, redis_client=client)

        assert repo.get("k") is None
        client.delete.assert_called_once_with("results:k")

    def test_unreachable_redis_is_a_miss(self, client):
        client.get.side_effect = redis.ConnectionError("connection refused")
        client.set.side_effect = redis.ConnectionError("connection refused")
        repo = RedisCacheRepository("results", ttl=3600, redis_client=client)

        repo.set("k", "v")

        assert repo.get("k") is None
        assert repo.get_list("k") is None

    def test_size_counts_region_keys(self, client):
        client.scan_iter.return_value = iter([b"results:a", b"results:b"])
        repo = RedisCacheRepository("results", ttl=3600, redis_client=client)

        assert repo.size() == 2
        client.scan_iter.assert_called_once_with(match="results:*")


class TestCacheService:
    def test_create_builds_standard_regions(self):
        caches = CacheService.create(result_backend="memory")

        assert sorted(caches.names) == ["embeddings", "job_match", "results", "search"]
        assert isinstance(caches.region("results"), InMemoryCacheRepository)

    def test_create_with_redis_results(self):
        with patch("rag_pipeline.repositories.redis_cache_repository.get_redis_client") as mock_client:
            mock_client.return_value = MagicMock()
            caches = CacheService.create(result_backend="redis")

        assert isinstance(caches.region("results"), RedisCacheRepository)
        assert isinstance(caches.region("embeddings"), InMemoryCacheRepository)

    def test_unknown_region_raises(self, caches):
        with pytest.raises(KeyError, match="Unknown cache region"):
            caches.region("nope")

    def test_clear_empties_every_region(self, caches):
        caches.region("embeddings").set("a", 1)
        caches.region("search").set("b", [])

        assert caches.clear() == 2
        assert caches.get_stats()["embeddings"]["size"] == 0
