"""Domain models for the directory bounded context.

Pure value objects that represent directory search concepts
independently of any infrastructure (ORM, HTTP, caching).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class EntityKind(str, Enum):
    """The four searchable directory listings."""

    PROJECTS = "projects"
    ORGANISATIONS = "organisations"
    GRANTS = "grants"
    WATCHDOG_ISSUES = "watchdog-issues"


class ViewMode(str, Enum):
    """How a directory page is presented."""

    GLOBE = "globe"
    TABLE = "table"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Viewer:
    """Who is asking.  Resolved once per request by the caller."""

    is_authenticated: bool = False


ANONYMOUS = Viewer(is_authenticated=False)


@dataclass(frozen=True)
class ParseWarning:
    """A query-string value that was present but dropped or defaulted."""

    param: str
    value: str
    reason: str


@dataclass(frozen=True)
class ResultPage:
    """Paginated result set with metadata.

    ``page`` is never validated against ``page_count``: asking for a page
    past the end yields empty ``rows`` with the real ``count``.
    """

    rows: tuple[dict[str, Any], ...]
    count: int
    page: int
    per_page: int

    @property
    def page_count(self) -> int:
        if self.count <= 0 or self.per_page <= 0:
            return 0
        return (self.count + self.per_page - 1) // self.per_page


@dataclass(frozen=True)
class FilterOption:
    value: str
    label: str


@dataclass(frozen=True)
class FilterOptions:
    """Selectable values per filter dimension, in display order."""

    dimensions: dict[str, tuple[FilterOption, ...]] = field(default_factory=dict)

    @classmethod
    def empty(cls, names: Iterable[str]) -> FilterOptions:
        return cls(dimensions={name: () for name in names})

    def get(self, name: str) -> tuple[FilterOption, ...]:
        return self.dimensions.get(name, ())


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True)
class MapMarker:
    """One pin on the map/globe view."""

    id: str
    slug: str
    title: str
    lat: float
    lng: float
    place_name: str | None = None
    description: str | None = None
    category: str | None = None


@dataclass(frozen=True)
class HomeStats:
    """Headline counters shown on the landing page."""

    updated_at: str
    projects: dict[str, float | int | None]
    funding: dict[str, float | int | None]
    issues: dict[str, float | int | None]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "EntityKind",
    "ViewMode",
    "Viewer",
    "ANONYMOUS",
    "ParseWarning",
    "ResultPage",
    "FilterOption",
    "FilterOptions",
    "Coordinates",
    "MapMarker",
    "HomeStats",
]
