"""Unit tests for the geocode caches."""

import json

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from taskforce.domain.directory.models import Coordinates
from taskforce.infra.cache.geocode_cache import MemoryGeocodeCache, RedisGeocodeCache

KENYA = Coordinates(lat=0.02, lng=37.9)


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestMemoryGeocodeCache:
    def test_hit_and_miss(self):
        cache = MemoryGeocodeCache()
        assert cache.get("Kenya") == (False, None)
        cache.set("Kenya", KENYA)
        assert cache.get("Kenya") == (True, KENYA)

    def test_negative_results_are_cached(self):
        cache = MemoryGeocodeCache()
        cache.set("Atlantis", None)
        assert cache.get("Atlantis") == (True, None)

    def test_entries_expire(self):
        clock = _Clock()
        cache = MemoryGeocodeCache(ttl_seconds=10, clock=clock)
        cache.set("Kenya", KENYA)
        clock.now = 9.9
        assert cache.get("Kenya")[0] is True
        clock.now = 10.0
        assert cache.get("Kenya") == (False, None)
        assert len(cache) == 0

    def test_least_recently_used_is_evicted(self):
        cache = MemoryGeocodeCache(capacity=2)
        cache.set("a", KENYA)
        cache.set("b", KENYA)
        cache.get("a")
        cache.set("c", KENYA)
        assert cache.get("b") == (False, None)
        assert cache.get("a")[0] is True
        assert cache.get("c")[0] is True

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            MemoryGeocodeCache(capacity=0)


class _FakeRedis:
    def __init__(self, fail: bool = False) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.fail = fail

    def get(self, key):
        if self.fail:
            raise RedisConnectionError("down")
        return self.store.get(key)

    def setex(self, key, ttl, value):
        if self.fail:
            raise RedisConnectionError("down")
        self.store[key] = value
        self.ttls[key] = ttl


class TestRedisGeocodeCache:
    def test_round_trip_with_ttl(self):
        client = _FakeRedis()
        cache = RedisGeocodeCache(client, ttl_seconds=60)
        cache.set("Kenya", KENYA)
        assert client.ttls == {"geocode:kenya": 60}
        assert json.loads(client.store["geocode:kenya"]) == {"lat": 0.02, "lng": 37.9}
        assert cache.get("KENYA") == (True, KENYA)

    def test_negative_results_are_cached(self):
        cache = RedisGeocodeCache(_FakeRedis())
        cache.set("Atlantis", None)
        assert cache.get("Atlantis") == (True, None)

    def test_redis_errors_are_misses(self):
        cache = RedisGeocodeCache(_FakeRedis(fail=True))
        cache.set("Kenya", KENYA)
        assert cache.get("Kenya") == (False, None)

    def test_malformed_entry_is_a_miss(self):
        client = _FakeRedis()
        client.store["geocode:kenya"] = "{not json"
        assert RedisGeocodeCache(client).get("Kenya") == (False, None)
