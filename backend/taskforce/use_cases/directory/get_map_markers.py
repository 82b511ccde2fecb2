"""GetMapMarkersUseCase: map/globe markers for a directory listing.

Uses the same filters as the list view without pagination.  Rows that
lack coordinates are geocoded from their place name when the listing
allows it; rows that still have no position are dropped.  Failures are
logged and produce an empty marker list.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Mapping

from taskforce.domain.common.query import FilterSpec, SortSpec
from taskforce.domain.common.uow import UnitOfWork
from taskforce.domain.directory.entities import EntityConfig, get_entity_config
from taskforce.domain.directory.filter_engine import compose
from taskforce.domain.directory.markers import places_to_geocode, to_marker
from taskforce.domain.directory.models import (
    ANONYMOUS,
    Coordinates,
    EntityKind,
    MapMarker,
    Viewer,
)
from taskforce.domain.directory.ports import GeocodeCache, GeocodingProvider
from taskforce.domain.directory.search_params import RawSearchParams, parse_search_params

logger = logging.getLogger(__name__)

MAX_GEOCODE_LOOKUPS = 50


def load_marker_rows(
    uow: UnitOfWork,
    config: EntityConfig,
    filters: FilterSpec,
    *,
    sort: SortSpec | None = None,
    limit: int | None = None,
) -> list[dict]:
    with uow:
        return uow.directory.query_markers(config, filters, sort=sort, limit=limit)


@dataclass(frozen=True)
class GetMapMarkersQuery:
    entity: EntityKind
    raw_params: RawSearchParams = field(default_factory=dict)
    viewer: Viewer = ANONYMOUS


class GetMapMarkersUseCase:
    def __init__(
        self,
        geocoder: GeocodingProvider | None = None,
        cache: GeocodeCache | None = None,
        *,
        max_lookups: int = MAX_GEOCODE_LOOKUPS,
        limits: Mapping[EntityKind, int] | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._geocoder = geocoder
        self._cache = cache
        self._max_lookups = max_lookups
        self._limits = dict(limits or {})
        self._today = today

    async def execute(self, uow: UnitOfWork, query: GetMapMarkersQuery) -> list[MapMarker]:
        config = get_entity_config(query.entity)
        recipe = config.marker
        try:
            parsed = parse_search_params(config, query.raw_params)
            filters = compose(
                config, parsed, viewer=query.viewer, today=self._today().isoformat()
            )
            limit = self._limits.get(config.kind, recipe.limit)
            rows = await asyncio.to_thread(
                load_marker_rows, uow, config, filters, limit=limit
            )
            resolved: dict[str, Coordinates | None] = {}
            if recipe.geocode_missing:
                resolved = await self.geocode_places(places_to_geocode(recipe, rows, self._max_lookups))
        except Exception:
            logger.exception("Failed to load %s markers", config.kind.value)
            return []

        markers = (to_marker(recipe, row, resolved) for row in rows)
        return [m for m in markers if m is not None]

    async def geocode_places(self, places: list[str]) -> dict[str, Coordinates | None]:
        """Resolve every place concurrently, going through the cache first."""
        if self._geocoder is None or not places:
            return {}
        results = await asyncio.gather(*(self._lookup(place) for place in places))
        return dict(zip(places, results))

    async def _lookup(self, place: str) -> Coordinates | None:
        if self._cache is not None:
            hit, value = self._cache.get(place)
            if hit:
                return value
        value = await self._geocoder.resolve_place(place)
        if self._cache is not None:
            self._cache.set(place, value)
        return value
