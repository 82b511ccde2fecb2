"""GetFilterOptionsUseCase: dropdown values for a directory listing.

Options are a convenience: any backend failure is logged and degrades
to empty lists.  Lookup-table dimensions (SDGs, global challenges)
degrade independently of the sampled ones.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from taskforce.domain.common.errors import BackendQueryError
from taskforce.domain.common.query import FilterSpec
from taskforce.domain.common.uow import UnitOfWork
from taskforce.domain.directory.entities import FILTER_OPTIONS_LIMIT, get_entity_config
from taskforce.domain.directory.filter_engine import apply_constraints
from taskforce.domain.directory.models import EntityKind, FilterOption, FilterOptions
from taskforce.domain.directory.option_aggregator import aggregate_options

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GetFilterOptionsQuery:
    entity: EntityKind


def sdg_options(rows: list[dict]) -> tuple[FilterOption, ...]:
    ordered = sorted((r for r in rows if r.get("id") is not None), key=lambda r: int(r["id"]))
    return tuple(
        FilterOption(
            value=str(r["id"]),
            label=f"{r['id']}. {r['name']}" if r.get("name") else f"SDG {r['id']}",
        )
        for r in ordered
    )


def challenge_options(rows: list[dict]) -> tuple[FilterOption, ...]:
    """Rows arrive ordered by name; unnamed challenges are labelled by id."""
    return tuple(
        FilterOption(value=str(r["id"]), label=r.get("name") or str(r["id"]))
        for r in rows
        if r.get("id") is not None
    )


_LOOKUPS = {
    "sdgs": (lambda repo: repo.list_sdgs(), sdg_options),
    "global_challenges": (lambda repo: repo.list_global_challenges(), challenge_options),
}


class GetFilterOptionsUseCase:
    def __init__(self, sample_size: int = FILTER_OPTIONS_LIMIT) -> None:
        self._sample_size = sample_size

    def execute(self, uow: UnitOfWork, query: GetFilterOptionsQuery) -> FilterOptions:
        config = get_entity_config(query.entity)
        dimensions = dict(FilterOptions.empty(config.option_names).dimensions)

        with uow:
            if config.option_dimensions:
                columns = tuple(dict.fromkeys(d.column for d in config.option_dimensions))
                scope = apply_constraints(FilterSpec(), config.option_scope)
                try:
                    rows = uow.directory.sample_rows(config, columns, scope, self._sample_size)
                except BackendQueryError as exc:
                    logger.error("Failed to load %s filter options: %s", config.kind.value, exc)
                else:
                    dimensions.update(aggregate_options(rows, config.option_dimensions).dimensions)

            for name in config.lookup_options:
                load, to_options = _LOOKUPS[name]
                try:
                    rows = load(uow.directory)
                except BackendQueryError as exc:
                    logger.error("Failed to load %s options: %s", name, exc)
                    continue
                dimensions[name] = to_options(rows)

        return FilterOptions(dimensions=dimensions)
