"""Dependency injection bootstrap: the single place that binds ports to adapters.

Every factory function here can be used as a FastAPI ``Depends()`` target.
Routers never import concrete implementations directly; they depend on
the abstractions returned by these factories.
"""

from __future__ import annotations

import logging
from typing import Iterator

from taskforce.config import settings
from taskforce.database import SessionLocal
from taskforce.domain.directory.models import EntityKind
from taskforce.domain.directory.ports import GeocodeCache, GeocodingProvider
from taskforce.infra.cache.geocode_cache import MemoryGeocodeCache, RedisGeocodeCache
from taskforce.infra.db.uow import SqlUnitOfWork
from taskforce.infra.providers.mapbox_geocoder import MapboxGeocoder
from taskforce.services.redis_pool import get_redis_client
from taskforce.use_cases.directory import (
    GetFilterOptionsUseCase,
    GetHomeMarkersUseCase,
    GetHomeStatsUseCase,
    GetMapMarkersUseCase,
    SearchDirectoryUseCase,
    SearchOrganisationsUseCase,
)

logger = logging.getLogger(__name__)


# ── Unit of Work ─────────────────────────────────────────────────────────


def get_uow() -> Iterator[SqlUnitOfWork]:
    """Yield a SqlUnitOfWork bound to SessionLocal.

    Designed for FastAPI Depends()::

        uow: SqlUnitOfWork = Depends(get_uow)
    """
    uow = SqlUnitOfWork(SessionLocal)
    yield uow


# ── Geocoding ───────────────────────────────────────────────────────────

_geocoder: MapboxGeocoder | None = None
_geocode_cache: GeocodeCache | None = None


def get_geocoder() -> GeocodingProvider:
    """Return a singleton MapboxGeocoder (a missing token is handled inside)."""
    global _geocoder
    if _geocoder is None:
        _geocoder = MapboxGeocoder(
            token=settings.mapbox_token,
            base_url=settings.mapbox_base_url,
            timeout=settings.geocode_timeout_seconds,
        )
    return _geocoder


def get_geocode_cache() -> GeocodeCache:
    """Return the configured geocode cache, falling back to memory without Redis."""
    global _geocode_cache
    if _geocode_cache is None:
        client = None
        if settings.geocode_cache_backend == "redis":
            client = get_redis_client()
            if client is None:
                logger.warning("Redis unavailable; using in-memory geocode cache")
        if client is not None:
            _geocode_cache = RedisGeocodeCache(client, ttl_seconds=settings.geocode_cache_ttl_seconds)
        else:
            _geocode_cache = MemoryGeocodeCache(
                capacity=settings.geocode_cache_capacity,
                ttl_seconds=settings.geocode_cache_ttl_seconds,
            )
    return _geocode_cache


async def close_geocoder() -> None:
    global _geocoder
    if _geocoder is not None:
        await _geocoder.aclose()
        _geocoder = None


# ── Use Cases ────────────────────────────────────────────────────────────


def get_search_directory_use_case() -> SearchDirectoryUseCase:
    return SearchDirectoryUseCase()


def get_filter_options_use_case() -> GetFilterOptionsUseCase:
    return GetFilterOptionsUseCase(sample_size=settings.filter_options_sample_size)


def get_map_markers_use_case() -> GetMapMarkersUseCase:
    """Build a GetMapMarkersUseCase wired with the geocoder and its cache."""
    return GetMapMarkersUseCase(
        geocoder=get_geocoder(),
        cache=get_geocode_cache(),
        max_lookups=settings.geocode_max_lookups,
        limits={EntityKind.ORGANISATIONS: settings.organisation_marker_limit},
    )


def get_home_markers_use_case() -> GetHomeMarkersUseCase:
    return GetHomeMarkersUseCase()


def get_home_stats_use_case() -> GetHomeStatsUseCase:
    return GetHomeStatsUseCase()


def get_search_organisations_use_case() -> SearchOrganisationsUseCase:
    return SearchOrganisationsUseCase(limit=settings.organisation_search_limit)
