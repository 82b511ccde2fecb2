"""GetHomeMarkersUseCase: markers for the landing-page globe.

Newest projects plus open grants and approved watchdog issues, each
read with default search parameters.  Errors propagate.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable

from taskforce.domain.common.query import SortOrder, SortSpec
from taskforce.domain.common.uow import UnitOfWork
from taskforce.domain.directory.entities import GRANTS, PROJECTS, WATCHDOG_ISSUES, EntityConfig
from taskforce.domain.directory.filter_engine import compose
from taskforce.domain.directory.markers import to_marker
from taskforce.domain.directory.models import ANONYMOUS, MapMarker, Viewer
from taskforce.domain.directory.search_params import parse_search_params

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GetHomeMarkersQuery:
    viewer: Viewer = ANONYMOUS


@dataclass(frozen=True)
class HomeMarkers:
    projects: tuple[MapMarker, ...]
    grants: tuple[MapMarker, ...]
    issues: tuple[MapMarker, ...]


class GetHomeMarkersUseCase:
    def __init__(self, today: Callable[[], date] = date.today) -> None:
        self._today = today

    async def execute(self, uow: UnitOfWork, query: GetHomeMarkersQuery) -> HomeMarkers:
        return await asyncio.to_thread(self._load, uow, query.viewer)

    def _load(self, uow: UnitOfWork, viewer: Viewer) -> HomeMarkers:
        today = self._today().isoformat()
        # one session, so the three reads run one after another
        with uow:
            projects, grants, issues = (
                self._markers(uow, config, viewer, today)
                for config in (PROJECTS, GRANTS, WATCHDOG_ISSUES)
            )
        logger.debug(
            "Home markers: %d projects, %d grants, %d issues",
            len(projects), len(grants), len(issues),
        )
        return HomeMarkers(projects=projects, grants=grants, issues=issues)

    @staticmethod
    def _markers(
        uow: UnitOfWork, config: EntityConfig, viewer: Viewer, today: str
    ) -> tuple[MapMarker, ...]:
        filters = compose(config, parse_search_params(config, {}), viewer=viewer, today=today)
        sort = None
        if config.home_marker_sort:
            sort = SortSpec(field=config.home_marker_sort, order=SortOrder.DESC)
        rows = uow.directory.query_markers(
            config, filters, sort=sort, limit=config.home_marker_limit
        )
        markers = (to_marker(config.marker, row) for row in rows)
        return tuple(m for m in markers if m is not None)
