"""Lenient parsing of raw query-string values into typed search parameters.

Nothing in here raises on user input.  A value that cannot be understood
is dropped (or replaced by the field default) and, when it was actually
present, recorded as a :class:`ParseWarning` on the result.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from taskforce.domain.common.query import SortOrder
from taskforce.domain.directory.entities import EntityConfig, FieldKind, FieldRule
from taskforce.domain.directory.models import ParseWarning, ViewMode

RawValue = str | Sequence[str] | None
RawSearchParams = Mapping[str, RawValue]

Number = int | float

_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_TRUE_VALUES = frozenset({"true", "1", "on"})
# "order" is accepted after "dir" for older links
SORT_DIRECTION_PARAMS = ("dir", "order")


def _as_list(value: RawValue) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [v for v in value if isinstance(v, str)]


# ---------------------------------------------------------------------------
# Primitive parsers
# ---------------------------------------------------------------------------


def parse_string(value: RawValue) -> str | None:
    """First non-blank value, trimmed.  ``None`` when there is none."""
    for item in _as_list(value):
        trimmed = item.strip()
        if trimmed:
            return trimmed
    return None


def parse_string_list(value: RawValue) -> list[str]:
    """Repeated keys and comma-separated values both become one flat list."""
    out: list[str] = []
    for item in _as_list(value):
        for part in item.split(","):
            trimmed = part.strip()
            if trimmed:
                out.append(trimmed)
    return out


def _to_number(text: str) -> Number | None:
    if not _NUMBER_RE.match(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    if number.is_integer() and abs(number) < 2**53:
        return int(number)
    return number


def parse_number(value: RawValue) -> Number | None:
    text = parse_string(value)
    if text is None:
        return None
    return _to_number(text)


def parse_number_list(value: RawValue) -> list[Number]:
    numbers = (_to_number(item) for item in parse_string_list(value))
    return [n for n in numbers if n is not None]


def parse_boolean(value: RawValue) -> bool | None:
    text = parse_string(value)
    if text is None:
        return None
    return text in _TRUE_VALUES


def parse_choice(value: RawValue, choices: Sequence[str], default: str) -> str:
    text = parse_string(value)
    if text is not None and text in choices:
        return text
    return default


def parse_page(value: RawValue) -> int:
    number = parse_number(value)
    if number is None or number < 1:
        return 1
    return math.floor(number)


def parse_date(value: RawValue) -> str | None:
    """Dates are opaque: whatever was sent is handed to the backend as-is."""
    return parse_string(value)


# ---------------------------------------------------------------------------
# Entity-level parsing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedSearch:
    """Typed search parameters for one entity.

    ``values`` maps each field rule name to its parsed value: ``None`` or
    an empty tuple when the filter is inactive.
    """

    values: Mapping[str, Any]
    sort: str
    order: SortOrder
    page: int
    view: ViewMode = ViewMode.GLOBE
    warnings: tuple[ParseWarning, ...] = field(default=(), compare=False)

    def get(self, name: str) -> Any:
        return self.values.get(name)


class _WarningCollector:
    def __init__(self) -> None:
        self.items: list[ParseWarning] = []

    def add(self, param: str, value: str, reason: str) -> None:
        self.items.append(ParseWarning(param=param, value=value, reason=reason))


def _parse_rule(rule: FieldRule, raw: RawSearchParams, warnings: _WarningCollector) -> Any:
    kind = rule.kind

    if kind == FieldKind.STATUS:
        for param in rule.params:
            text = parse_string(raw.get(param))
            if text is None:
                continue
            if text in rule.choices:
                return text
            warnings.add(param, text, f"unknown value, using {rule.default!r}")
        return rule.default

    if kind in (FieldKind.MULTI_SELECT, FieldKind.TAGS_ALL):
        for param in rule.params:
            items = parse_string_list(raw.get(param))
            if not items:
                continue
            if kind == FieldKind.TAGS_ALL and rule.numeric:
                numbers = []
                for item in items:
                    number = _to_number(item)
                    if number is None:
                        warnings.add(param, item, "not a number, dropped")
                    else:
                        numbers.append(number)
                if numbers:
                    return tuple(numbers)
                continue
            return tuple(items)
        return ()

    if kind in (FieldKind.FLAG, FieldKind.UPCOMING):
        # the first alias present wins, even when it is blank
        for param in rule.params:
            if param in raw:
                return parse_boolean(raw.get(param))
        return None

    for param in rule.params:
        text = parse_string(raw.get(param))
        if text is None:
            continue
        if kind == FieldKind.TEXT or kind in (FieldKind.DATE_FROM, FieldKind.DATE_TO):
            return text
        number = _to_number(text)
        if number is None:
            warnings.add(param, text, "not a number, ignored")
            continue
        return number
    return None


def parse_search_params(config: EntityConfig, raw: RawSearchParams) -> ParsedSearch:
    """Parse every filter, sort, page and view parameter an entity accepts."""
    warnings = _WarningCollector()
    values = {rule.name: _parse_rule(rule, raw, warnings) for rule in config.fields}

    sort = config.default_sort
    sort_text = parse_string(raw.get("sort"))
    if sort_text is not None:
        if sort_text in config.sort_columns:
            sort = sort_text
        else:
            warnings.add("sort", sort_text, f"unknown sort column, using {config.default_sort!r}")

    order = config.default_order
    for param in SORT_DIRECTION_PARAMS:
        order_text = parse_string(raw.get(param))
        if order_text is None:
            continue
        try:
            order = SortOrder(order_text)
        except ValueError:
            warnings.add(param, order_text, f"unknown direction, using {order.value!r}")
        break

    page = parse_page(raw.get("page"))
    page_text = parse_string(raw.get("page"))
    if page_text is not None and str(page) != page_text:
        warnings.add("page", page_text, f"using page {page}")

    view = ViewMode.GLOBE
    view_text = parse_string(raw.get("view"))
    if view_text is not None:
        try:
            view = ViewMode(view_text)
        except ValueError:
            warnings.add("view", view_text, f"unknown view, using {view.value!r}")

    return ParsedSearch(
        values=values,
        sort=sort,
        order=order,
        page=page,
        view=view,
        warnings=tuple(warnings.items),
    )


__all__ = [
    "RawSearchParams",
    "ParsedSearch",
    "parse_string",
    "parse_string_list",
    "parse_number",
    "parse_number_list",
    "parse_boolean",
    "parse_choice",
    "parse_page",
    "parse_date",
    "parse_search_params",
]
