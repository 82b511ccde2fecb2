"""Turn parsed search parameters into a persistence-agnostic QuerySpec."""

from __future__ import annotations

from taskforce.domain.common.query import FilterSpec, PageSpec, QuerySpec, SortSpec
from taskforce.domain.directory.entities import EntityConfig, FieldKind, FixedConstraint
from taskforce.domain.directory.models import Viewer
from taskforce.domain.directory.search_params import ParsedSearch

# offsets are bound as signed 64-bit integers
MAX_OFFSET = 2**63 - 1


def apply_constraints(spec: FilterSpec, constraints: tuple[FixedConstraint, ...]) -> FilterSpec:
    for constraint in constraints:
        values = constraint.values
        if len(values) == 1 and isinstance(values[0], bool):
            spec.add_boolean(constraint.column, values[0])
        else:
            spec.add_categorical(constraint.column, values)
    return spec


def compose(
    config: EntityConfig,
    parsed: ParsedSearch,
    *,
    viewer: Viewer,
    today: str,
) -> FilterSpec:
    """Build the filter conjunction for one listing.

    Rules are applied in table order, then the visibility defaults.
    ``today`` is an ISO date used by the upcoming-only rule.
    """
    spec = FilterSpec()

    for rule in config.fields:
        value = parsed.get(rule.name)
        kind = rule.kind

        if kind == FieldKind.TEXT:
            spec.add_text_search(rule.columns, value)
        elif kind == FieldKind.MULTI_SELECT:
            spec.add_categorical(rule.column, value or ())
        elif kind == FieldKind.TAGS_ALL:
            spec.add_contains_all(rule.column, value or ())
        elif kind in (FieldKind.MIN, FieldKind.DATE_FROM):
            spec.add_range(rule.column, min_value=value)
        elif kind in (FieldKind.MAX, FieldKind.DATE_TO):
            spec.add_range(rule.column, max_value=value)
        elif kind == FieldKind.OVERLAP_MIN:
            spec.add_range_overlap(rule.columns[0], rule.columns[1], floor=value)
        elif kind == FieldKind.OVERLAP_MAX:
            spec.add_range_overlap(rule.columns[0], rule.columns[1], ceiling=value)
        elif kind == FieldKind.FLAG:
            # false means "no constraint", never "must be false"
            if value is True:
                spec.add_boolean(rule.column, True)
        elif kind == FieldKind.UPCOMING:
            if value is True:
                spec.add_lower_bound_or_null(rule.column, today)
        elif kind == FieldKind.STATUS:
            if value and value != rule.bypass:
                spec.add_categorical(rule.column, (value,))

    apply_constraints(spec, config.always)
    if not viewer.is_authenticated:
        apply_constraints(spec, config.anonymous_only)
    return spec


def resolve(config: EntityConfig, parsed: ParsedSearch) -> tuple[SortSpec, PageSpec]:
    column = parsed.sort if parsed.sort in config.sort_columns else config.default_sort
    sort = SortSpec(
        field=column,
        order=parsed.order,
        nulls_last=column in config.nulls_last_columns,
    )
    last_page = MAX_OFFSET // config.page_size
    page = PageSpec(page=min(max(parsed.page, 1), last_page), per_page=config.page_size)
    return sort, page


def build_query(
    config: EntityConfig,
    parsed: ParsedSearch,
    *,
    viewer: Viewer,
    today: str,
) -> QuerySpec:
    filters = compose(config, parsed, viewer=viewer, today=today)
    sort, page = resolve(config, parsed)
    return QuerySpec(filters=filters, sort=sort, page=page)


__all__ = [
    "apply_constraints",
    "compose",
    "resolve",
    "build_query",
]
