"""Derive filter dropdown values from a sample of live rows."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from taskforce.domain.directory.entities import OptionDimension
from taskforce.domain.directory.models import FilterOption, FilterOptions


def _collect(rows: Iterable[Mapping[str, Any]], dimension: OptionDimension) -> set[str]:
    values: set[str] = set()
    for row in rows:
        raw = row.get(dimension.column)
        if raw is None:
            continue
        items = raw if dimension.is_array and isinstance(raw, (list, tuple)) else [raw]
        for item in items:
            if item is None:
                continue
            text = str(item)
            if text:
                values.add(text)
    return values


def aggregate_options(
    rows: Iterable[Mapping[str, Any]],
    dimensions: Iterable[OptionDimension],
) -> FilterOptions:
    """Distinct values per dimension, sorted, as ``value == label`` options.

    Values that only occur outside the sample are not discovered.
    """
    rows = list(rows)
    result: dict[str, tuple[FilterOption, ...]] = {}
    for dimension in dimensions:
        values = sorted(_collect(rows, dimension), key=lambda v: (v.casefold(), v))
        result[dimension.name] = tuple(FilterOption(value=v, label=v) for v in values)
    return FilterOptions(dimensions=result)
