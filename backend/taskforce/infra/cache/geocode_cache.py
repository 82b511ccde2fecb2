"""Geocode result caches.

Both caches remember misses (``None``) as well as hits so an unresolvable
place is not looked up again on every request.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from collections import OrderedDict
from typing import Callable

from redis import Redis
from redis.exceptions import RedisError

from taskforce.domain.directory.models import Coordinates
from taskforce.domain.directory.ports import GeocodeCache

logger = logging.getLogger(__name__)

_MISS: tuple[bool, Coordinates | None] = (False, None)


class MemoryGeocodeCache(GeocodeCache):
    """In-process LRU cache with a per-entry time-to-live."""

    def __init__(
        self,
        capacity: int = 1024,
        ttl_seconds: float = 7 * 24 * 3600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, Coordinates | None]] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> tuple[bool, Coordinates | None]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return _MISS
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return _MISS
            self._entries.move_to_end(key)
            return True, value

    def set(self, key: str, value: Coordinates | None) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + self._ttl, value)
            self._entries.move_to_end(key)
            while len(self._entries) > self._capacity:
                self._entries.popitem(last=False)


class RedisGeocodeCache(GeocodeCache):
    """Geocode cache shared across workers through Redis.

    Redis errors are logged and treated as cache misses.
    """

    KEY_PREFIX = "geocode:"

    def __init__(self, client: Redis, ttl_seconds: int = 7 * 24 * 3600) -> None:
        self._client = client
        self._ttl = ttl_seconds

    def _key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{key.casefold()}"

    def get(self, key: str) -> tuple[bool, Coordinates | None]:
        try:
            raw = self._client.get(self._key(key))
        except RedisError as e:
            logger.warning("Geocode cache read failed for %r: %s", key, e)
            return _MISS
        if raw is None:
            return _MISS
        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning("Discarding malformed geocode cache entry for %r", key)
            return _MISS
        if payload is None:
            return True, None
        return True, Coordinates(lat=float(payload["lat"]), lng=float(payload["lng"]))

    def set(self, key: str, value: Coordinates | None) -> None:
        payload = None if value is None else {"lat": value.lat, "lng": value.lng}
        try:
            self._client.setex(self._key(key), self._ttl, json.dumps(payload))
        except RedisError as e:
            logger.warning("Geocode cache write failed for %r: %s", key, e)
