"""SearchDirectoryUseCase: one filtered, sorted page of a directory listing.

Backend failures propagate as BackendQueryError for every listing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable

from taskforce.domain.common.uow import UnitOfWork
from taskforce.domain.directory.entities import get_entity_config
from taskforce.domain.directory.filter_engine import build_query
from taskforce.domain.directory.models import ANONYMOUS, EntityKind, ResultPage, Viewer
from taskforce.domain.directory.search_params import (
    ParsedSearch,
    RawSearchParams,
    parse_search_params,
)

logger = logging.getLogger(__name__)


# ── Query (input) ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class SearchDirectoryQuery:
    entity: EntityKind
    raw_params: RawSearchParams = field(default_factory=dict)
    viewer: Viewer = ANONYMOUS


# ── Result (output) ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class SearchDirectoryResult:
    page: ResultPage
    parsed: ParsedSearch


# ── Use Case ────────────────────────────────────────────────────────────


class SearchDirectoryUseCase:
    """Parse raw params, compose filters and read one page."""

    def __init__(self, today: Callable[[], date] = date.today) -> None:
        self._today = today

    def execute(
        self, uow: UnitOfWork, query: SearchDirectoryQuery
    ) -> SearchDirectoryResult:
        config = get_entity_config(query.entity)
        parsed = parse_search_params(config, query.raw_params)
        for warning in parsed.warnings:
            logger.debug(
                "%s: ignored %s=%r (%s)",
                config.kind.value,
                warning.param,
                warning.value,
                warning.reason,
            )

        spec = build_query(
            config, parsed, viewer=query.viewer, today=self._today().isoformat()
        )
        with uow:
            page = uow.directory.query(config, spec)

        return SearchDirectoryResult(page=page, parsed=parsed)
