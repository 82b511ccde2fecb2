"""SQLAlchemy implementation of DirectoryRepository."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskforce.domain.common.errors import BackendQueryError
from taskforce.domain.common.query import FilterSpec, QuerySpec, SortSpec
from taskforce.domain.directory.entities import EntityConfig
from taskforce.domain.directory.models import ResultPage
from taskforce.domain.directory.ports import DirectoryRepository
from taskforce.infra.query.directory_query import (
    LIKE_ESCAPE,
    apply_filters,
    apply_sort,
    apply_sort_and_paginate,
    column,
    escape_like,
    model_for,
)
from taskforce.models.directory import IfrcChallenge, Organisation, Sdg

logger = logging.getLogger(__name__)

_HOME_STATS_SQL = text("SELECT * FROM get_home_stats()")


def _plain(value: Any) -> Any:
    """Normalise driver types to JSON-friendly Python values."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def _row_to_dict(row: Any) -> dict[str, Any]:
    return {key: _plain(value) for key, value in row._mapping.items()}


@contextmanager
def _backend(resource: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Query against %s failed: %s", resource, exc)
        raise BackendQueryError(resource, str(exc.__class__.__name__)) from exc


class SqlDirectoryRepository(DirectoryRepository):
    """Reads directory listings through one SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _select(self, config: EntityConfig, columns: tuple[str, ...]):
        model = model_for(config.resource)
        return model, self._session.query(*(column(model, c) for c in columns))

    def query(self, config: EntityConfig, spec: QuerySpec) -> ResultPage:
        with _backend(config.resource):
            model, q = self._select(config, config.list_columns)
            q = apply_filters(q, model, spec.filters)
            rows, total = apply_sort_and_paginate(q, model, spec.sort, spec.page)

        return ResultPage(
            rows=tuple(_row_to_dict(r) for r in rows),
            count=total,
            page=spec.page.page,
            per_page=spec.page.per_page,
        )

    def query_markers(
        self,
        config: EntityConfig,
        filters: FilterSpec,
        *,
        sort: SortSpec | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        with _backend(config.resource):
            model, q = self._select(config, config.marker.columns)
            q = apply_filters(q, model, filters)
            if sort is not None:
                q = apply_sort(q, model, sort)
            if limit is not None:
                q = q.limit(limit)
            return [_row_to_dict(r) for r in q.all()]

    def sample_rows(
        self,
        config: EntityConfig,
        columns: tuple[str, ...],
        filters: FilterSpec,
        limit: int,
    ) -> list[dict[str, Any]]:
        with _backend(config.resource):
            model, q = self._select(config, columns)
            q = apply_filters(q, model, filters).limit(limit)
            return [_row_to_dict(r) for r in q.all()]

    def list_sdgs(self) -> list[dict[str, Any]]:
        with _backend("sdgs"):
            rows = self._session.query(Sdg.id, Sdg.name).order_by(Sdg.id).all()
        return [_row_to_dict(r) for r in rows]

    def list_global_challenges(self) -> list[dict[str, Any]]:
        with _backend("ifrc_challenges"):
            rows = (
                self._session.query(IfrcChallenge.id, IfrcChallenge.name)
                .order_by(IfrcChallenge.name)
                .all()
            )
        return [_row_to_dict(r) for r in rows]

    def fetch_home_stats(self) -> dict[str, Any] | None:
        with _backend("get_home_stats"):
            row = self._session.execute(_HOME_STATS_SQL).mappings().first()
        if row is None:
            return None
        return {key: _plain(value) for key, value in row.items()}

    def search_verified_organisations(self, term: str, limit: int) -> list[dict[str, Any]]:
        pattern = f"%{escape_like(term)}%"
        with _backend("organisations"):
            rows = (
                self._session.query(
                    Organisation.id,
                    Organisation.name,
                    Organisation.logo_url,
                    Organisation.country_based,
                )
                .filter(Organisation.verification_status == "verified")
                .filter(Organisation.name.ilike(pattern, escape=LIKE_ESCAPE))
                .order_by(Organisation.name)
                .limit(limit)
                .all()
            )
        return [_row_to_dict(r) for r in rows]
