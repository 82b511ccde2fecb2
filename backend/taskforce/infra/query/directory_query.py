"""SQLAlchemy query builder for directory listings.

Translates domain FilterSpec / SortSpec / PageSpec into SQLAlchemy
WHERE, ORDER BY, and LIMIT/OFFSET clauses against the ORM model that
backs each listing.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import asc, desc, or_
from sqlalchemy.orm import Query

from taskforce.domain.common.query import (
    BooleanFilter,
    CategoricalFilter,
    ContainsAllFilter,
    FilterSpec,
    LowerBoundOrNullFilter,
    PageSpec,
    RangeFilter,
    RangeOverlapFilter,
    SortOrder,
    SortSpec,
    TextSearchFilter,
)
from taskforce.models.directory import (
    Grant,
    OrganisationDirectoryEntry,
    Project,
    WatchdogIssue,
)

# ── Model resolution ────────────────────────────────────────────────────

# Maps an EntityConfig.resource to the ORM class that reads it.
MODEL_MAP: dict[str, Any] = {
    "projects": Project,
    "organisations_directory_v1": OrganisationDirectoryEntry,
    "grants": Grant,
    "watchdog_issues": WatchdogIssue,
}

LIKE_ESCAPE = "\\"


def model_for(resource: str) -> Any:
    return MODEL_MAP[resource]


def column(model: Any, name: str) -> Any:
    return getattr(model, name)


def escape_like(term: str) -> str:
    """Escape LIKE metacharacters so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


# ── Public API ──────────────────────────────────────────────────────────


def apply_filters(query: Query, model: Any, filters: FilterSpec) -> Query:
    """Apply all FilterSpec constraints as AND-ed SQLAlchemy WHERE clauses."""
    if filters.is_empty():
        return query
    for ts in filters.text_searches:
        query = _apply_text_search(query, model, ts)
    for cf in filters.categorical_filters:
        query = _apply_categorical_filter(query, model, cf)
    for ca in filters.contains_all_filters:
        query = _apply_contains_all(query, model, ca)
    for rf in filters.range_filters:
        query = _apply_range_filter(query, model, rf)
    for of in filters.overlap_filters:
        query = _apply_overlap_filter(query, model, of)
    for bf in filters.boolean_filters:
        query = _apply_boolean_filter(query, model, bf)
    for lb in filters.lower_bound_or_null_filters:
        query = _apply_lower_bound_or_null(query, model, lb)
    return query


def apply_sort(query: Query, model: Any, sort: SortSpec) -> Query:
    order_fn = asc if sort.order == SortOrder.ASC else desc
    clause = order_fn(column(model, sort.field))
    if sort.nulls_last:
        clause = clause.nulls_last()
    return query.order_by(clause)


def apply_sort_and_paginate(
    query: Query,
    model: Any,
    sort: SortSpec,
    page: PageSpec,
) -> tuple[list, int]:
    """Apply sort + pagination.  Returns (rows, total_count).

    The count is taken over the filtered query before LIMIT/OFFSET.
    """
    total = query.order_by(None).count()
    query = apply_sort(query, model, sort)
    rows = query.offset(page.offset).limit(page.limit).all()
    return rows, total


# ── Private helpers ─────────────────────────────────────────────────────


def _apply_text_search(query: Query, model: Any, ts: TextSearchFilter) -> Query:
    pattern = f"%{escape_like(ts.pattern)}%"
    return query.filter(
        or_(*(column(model, f).ilike(pattern, escape=LIKE_ESCAPE) for f in ts.fields))
    )


def _apply_categorical_filter(query: Query, model: Any, cf: CategoricalFilter) -> Query:
    col = column(model, cf.field)
    if len(cf.values) == 1:
        return query.filter(col == cf.values[0])
    return query.filter(col.in_(cf.values))


def _apply_contains_all(query: Query, model: Any, ca: ContainsAllFilter) -> Query:
    # one containment per value: every value must be present
    col = column(model, ca.field)
    for value in ca.values:
        query = query.filter(col.contains([value]))
    return query


def _apply_range_filter(query: Query, model: Any, rf: RangeFilter) -> Query:
    col = column(model, rf.field)
    if rf.min_value is not None:
        query = query.filter(col >= rf.min_value)
    if rf.max_value is not None:
        query = query.filter(col <= rf.max_value)
    return query


def _apply_overlap_filter(query: Query, model: Any, of: RangeOverlapFilter) -> Query:
    low = column(model, of.min_field)
    high = column(model, of.max_field)
    if of.floor is not None:
        query = query.filter(or_(low >= of.floor, high >= of.floor))
    if of.ceiling is not None:
        query = query.filter(or_(low <= of.ceiling, high <= of.ceiling))
    return query


def _apply_boolean_filter(query: Query, model: Any, bf: BooleanFilter) -> Query:
    return query.filter(column(model, bf.field).is_(bf.value))


def _apply_lower_bound_or_null(
    query: Query, model: Any, lb: LowerBoundOrNullFilter
) -> Query:
    col = column(model, lb.field)
    return query.filter(or_(col >= lb.value, col.is_(None)))
