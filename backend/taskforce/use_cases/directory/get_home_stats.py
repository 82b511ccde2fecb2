"""GetHomeStatsUseCase: headline counters from the get_home_stats() procedure."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from taskforce.domain.common.uow import UnitOfWork
from taskforce.domain.directory.models import HomeStats
from taskforce.domain.directory.search_params import parse_number

logger = logging.getLogger(__name__)

# public name -> column of the procedure's result row
PROJECT_STATS = {
    "projects_approved": "projects_projects_approved",
    "projects_ongoing": "projects_projects_ongoing",
    "organisations_registered": "projects_organisations_registered",
    "donations_received_eur": "projects_donations_received_eur",
}
FUNDING_STATS = {
    "opportunities_total": "funding_opportunities_total",
    "funders_registered": "funding_funders_registered",
    "open_calls": "funding_open_calls",
}
ISSUE_STATS = {
    "issues_total": "issues_issues_total",
    "issues_open": "issues_issues_open",
}


def number_from(value: Any) -> int | float | None:
    """Numbers pass through, numeric strings are converted, anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and value:
        return parse_number(value)
    return None


def _group(row: dict[str, Any], mapping: dict[str, str]) -> dict[str, int | float | None]:
    return {name: number_from(row.get(column)) for name, column in mapping.items()}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class GetHomeStatsUseCase:
    def __init__(self, now: Callable[[], str] = _utc_now) -> None:
        self._now = now

    def execute(self, uow: UnitOfWork) -> HomeStats:
        with uow:
            row = uow.directory.fetch_home_stats() or {}

        if not row:
            logger.warning("get_home_stats() returned no row")

        return HomeStats(
            updated_at=str(row.get("updated_at") or self._now()),
            projects=_group(row, PROJECT_STATS),
            funding=_group(row, FUNDING_STATS),
            issues=_group(row, ISSUE_STATS),
        )
