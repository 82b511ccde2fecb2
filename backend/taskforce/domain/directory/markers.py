"""Map-marker projection of directory rows."""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

from taskforce.domain.directory.entities import MarkerRecipe
from taskforce.domain.directory.models import Coordinates, MapMarker


def _finite(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def has_coordinates(recipe: MarkerRecipe, row: Mapping[str, Any]) -> bool:
    return _finite(row.get(recipe.lat_column)) and _finite(row.get(recipe.lng_column))


def place_name(recipe: MarkerRecipe, row: Mapping[str, Any]) -> str | None:
    """Non-empty place columns joined with ", " (e.g. "Bavaria, Germany")."""
    parts = [str(row[c]).strip() for c in recipe.place_columns if row.get(c)]
    joined = ", ".join(p for p in parts if p)
    return joined or None


def places_to_geocode(
    recipe: MarkerRecipe,
    rows: Iterable[Mapping[str, Any]],
    max_lookups: int,
) -> list[str]:
    """Distinct place names of rows lacking coordinates, first-seen order, capped."""
    seen: set[str] = set()
    places: list[str] = []
    for row in rows:
        if has_coordinates(recipe, row):
            continue
        name = place_name(recipe, row)
        if name is None or name in seen:
            continue
        seen.add(name)
        places.append(name)
    return places[:max_lookups]


def to_marker(
    recipe: MarkerRecipe,
    row: Mapping[str, Any],
    resolved: Mapping[str, Coordinates | None] | None = None,
) -> MapMarker | None:
    """Build a marker, or ``None`` when the row has no id or no usable position."""
    row_id = row.get("id")
    if not row_id:
        return None

    name = place_name(recipe, row)
    lat, lng = row.get(recipe.lat_column), row.get(recipe.lng_column)
    if not (_finite(lat) and _finite(lng)) and name and resolved:
        coords = resolved.get(name)
        if coords is not None:
            lat, lng = coords.lat, coords.lng
    if not (_finite(lat) and _finite(lng)):
        return None

    return MapMarker(
        id=str(row_id),
        slug=str(row.get(recipe.slug_column) or row_id),
        title=row.get(recipe.title_column) or recipe.title_fallback,
        lat=float(lat),
        lng=float(lng),
        place_name=name,
        description=row.get(recipe.description_column) if recipe.description_column else None,
        category=row.get(recipe.category_column) if recipe.category_column else None,
    )
