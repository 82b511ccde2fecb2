"""Ports (abstract interfaces) for the directory domain.

Concrete implementations live in infra/.  Repositories receive their
session through the UnitOfWork, not through method parameters.
"""

from __future__ import annotations

import abc
from typing import Any

from taskforce.domain.common.query import FilterSpec, QuerySpec, SortSpec
from taskforce.domain.directory.entities import EntityConfig
from taskforce.domain.directory.models import Coordinates, ResultPage


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class DirectoryRepository(abc.ABC):
    """Read-only access to the directory tables and views."""

    @abc.abstractmethod
    def query(self, config: EntityConfig, spec: QuerySpec) -> ResultPage:
        """Return one page of ``config.list_columns`` rows plus the exact total.

        Raises:
            BackendQueryError: when the backend rejects the query.
        """
        ...

    @abc.abstractmethod
    def query_markers(
        self,
        config: EntityConfig,
        filters: FilterSpec,
        *,
        sort: SortSpec | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return ``config.marker.columns`` for every matching row (unpaginated)."""
        ...

    @abc.abstractmethod
    def sample_rows(
        self,
        config: EntityConfig,
        columns: tuple[str, ...],
        filters: FilterSpec,
        limit: int,
    ) -> list[dict[str, Any]]:
        """Return up to *limit* rows projected onto *columns*, in backend order."""
        ...

    @abc.abstractmethod
    def list_sdgs(self) -> list[dict[str, Any]]:
        """``[{"id": int, "name": str | None}]`` ordered by id."""
        ...

    @abc.abstractmethod
    def list_global_challenges(self) -> list[dict[str, Any]]:
        """``[{"id": str, "name": str | None}]`` ordered by name."""
        ...

    @abc.abstractmethod
    def fetch_home_stats(self) -> dict[str, Any] | None:
        """Raw result row of the ``get_home_stats`` stored procedure."""
        ...

    @abc.abstractmethod
    def search_verified_organisations(self, term: str, limit: int) -> list[dict[str, Any]]:
        ...


# ---------------------------------------------------------------------------
# Geocoding
# ---------------------------------------------------------------------------


class GeocodingProvider(abc.ABC):
    """Resolve a free-text place name to coordinates."""

    @abc.abstractmethod
    async def resolve_place(self, name: str) -> Coordinates | None:
        """Return coordinates, or ``None`` when the place cannot be resolved.

        Implementations never raise for lookup failures.
        """
        ...


class GeocodeCache(abc.ABC):
    """Capacity-bounded, TTL-aware store of geocoding results.

    ``None`` is a valid cached value (a remembered miss), so ``get``
    reports hit/miss separately from the value.
    """

    @abc.abstractmethod
    def get(self, key: str) -> tuple[bool, Coordinates | None]:
        ...

    @abc.abstractmethod
    def set(self, key: str, value: Coordinates | None) -> None:
        ...
