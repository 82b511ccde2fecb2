"""Filter, sort, and pagination specifications for directory queries.

These types express query intent in domain terms, independent of
any persistence mechanism.  Adapters translate them into SQL WHERE
clauses, in-memory predicates, or whatever the infra layer requires.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ---------------------------------------------------------------------------
# Individual Filter Types
# ---------------------------------------------------------------------------

Bound = float | int | str


@dataclass(frozen=True)
class RangeFilter:
    """Inclusive range constraint on a single field.

    Bounds are numbers or ISO date strings; date strings are passed
    through verbatim and compared by the backend.
    """

    field: str
    min_value: Bound | None = None
    max_value: Bound | None = None


@dataclass(frozen=True)
class CategoricalFilter:
    """Row passes if its scalar column equals any one of ``values``."""

    field: str
    values: tuple[str, ...]  # tuple for hashability


@dataclass(frozen=True)
class ContainsAllFilter:
    """Row passes only if its array column contains *every* value.

    Adapters emit one "array contains [value]" predicate per value so the
    constraints are AND-ed, unlike :class:`CategoricalFilter`.
    """

    field: str
    values: tuple[str | int | float, ...]


@dataclass(frozen=True)
class RangeOverlapFilter:
    """Bound a row that carries its own ``[min_field, max_field]`` interval.

    ``floor`` matches when either column is >= floor, ``ceiling`` when
    either column is <= ceiling.  The two bounds are separate conjuncts.
    """

    min_field: str
    max_field: str
    floor: float | int | None = None
    ceiling: float | int | None = None


@dataclass(frozen=True)
class BooleanFilter:
    """Boolean flag constraint on a single field."""

    field: str
    value: bool


@dataclass(frozen=True)
class TextSearchFilter:
    """Case-insensitive substring search OR-ed across several text fields.

    ``pattern`` is the raw user term.  LIKE metacharacters are escaped by
    the adapter, not here.
    """

    fields: tuple[str, ...]
    pattern: str


@dataclass(frozen=True)
class LowerBoundOrNullFilter:
    """``field >= value OR field IS NULL``."""

    field: str
    value: Bound


# ---------------------------------------------------------------------------
# Composite Specifications
# ---------------------------------------------------------------------------


@dataclass
class FilterSpec:
    """Holds all active filters.  Mutable for builder-pattern construction.

    Builder methods return ``self`` for fluent chaining and silently
    skip empty / None values so callers don't need guard clauses.
    """

    range_filters: list[RangeFilter] = field(default_factory=list)
    categorical_filters: list[CategoricalFilter] = field(default_factory=list)
    contains_all_filters: list[ContainsAllFilter] = field(default_factory=list)
    overlap_filters: list[RangeOverlapFilter] = field(default_factory=list)
    boolean_filters: list[BooleanFilter] = field(default_factory=list)
    text_searches: list[TextSearchFilter] = field(default_factory=list)
    lower_bound_or_null_filters: list[LowerBoundOrNullFilter] = field(
        default_factory=list
    )

    # -- Builder helpers ---------------------------------------------------

    def add_range(
        self,
        field_name: str,
        min_value: Bound | None = None,
        max_value: Bound | None = None,
    ) -> FilterSpec:
        if min_value is not None or max_value is not None:
            self.range_filters.append(
                RangeFilter(field=field_name, min_value=min_value, max_value=max_value)
            )
        return self

    def add_categorical(
        self,
        field_name: str,
        values: tuple[str, ...] | list[str],
    ) -> FilterSpec:
        vals = tuple(values)
        if vals:
            self.categorical_filters.append(
                CategoricalFilter(field=field_name, values=vals)
            )
        return self

    def add_contains_all(
        self,
        field_name: str,
        values: tuple | list,
    ) -> FilterSpec:
        vals = tuple(values)
        if vals:
            self.contains_all_filters.append(
                ContainsAllFilter(field=field_name, values=vals)
            )
        return self

    def add_range_overlap(
        self,
        min_field: str,
        max_field: str,
        floor: float | int | None = None,
        ceiling: float | int | None = None,
    ) -> FilterSpec:
        if floor is not None or ceiling is not None:
            self.overlap_filters.append(
                RangeOverlapFilter(
                    min_field=min_field,
                    max_field=max_field,
                    floor=floor,
                    ceiling=ceiling,
                )
            )
        return self

    def add_boolean(self, field_name: str, value: bool) -> FilterSpec:
        self.boolean_filters.append(BooleanFilter(field=field_name, value=value))
        return self

    def add_text_search(
        self,
        field_names: tuple[str, ...] | list[str],
        pattern: str | None,
    ) -> FilterSpec:
        if pattern and field_names:
            self.text_searches.append(
                TextSearchFilter(fields=tuple(field_names), pattern=pattern)
            )
        return self

    def add_lower_bound_or_null(self, field_name: str, value: Bound) -> FilterSpec:
        self.lower_bound_or_null_filters.append(
            LowerBoundOrNullFilter(field=field_name, value=value)
        )
        return self

    def is_empty(self) -> bool:
        return not (
            self.range_filters
            or self.categorical_filters
            or self.contains_all_filters
            or self.overlap_filters
            or self.boolean_filters
            or self.text_searches
            or self.lower_bound_or_null_filters
        )


@dataclass(frozen=True)
class SortSpec:
    """Sort directive for query results.

    ``nulls_last`` must be set explicitly for nullable columns; the
    backend default puts NULLs first on descending sorts.
    """

    field: str = "created_at"
    order: SortOrder = SortOrder.DESC
    nulls_last: bool = False


@dataclass
class PageSpec:
    """Pagination parameters with validation."""

    page: int = 1
    per_page: int = 25

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if not (1 <= self.per_page <= 100):
            raise ValueError(f"per_page must be 1-100, got {self.per_page}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page


@dataclass
class QuerySpec:
    """Complete query = filters + sort + pagination."""

    filters: FilterSpec = field(default_factory=FilterSpec)
    sort: SortSpec = field(default_factory=SortSpec)
    page: PageSpec = field(default_factory=PageSpec)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "SortOrder",
    "RangeFilter",
    "CategoricalFilter",
    "ContainsAllFilter",
    "RangeOverlapFilter",
    "BooleanFilter",
    "TextSearchFilter",
    "LowerBoundOrNullFilter",
    "FilterSpec",
    "SortSpec",
    "PageSpec",
    "QuerySpec",
]
