"""Field-mapping tables for the four directory listings.

Each listing is described by one :class:`EntityConfig`: which query-string
parameters it understands, which columns they constrain and how, which
columns may be sorted on, and what is implicitly hidden from whom.  The
parser and the filter engine are generic over these tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from taskforce.domain.common.query import SortOrder
from taskforce.domain.directory.models import EntityKind

PAGE_SIZE = 25
FILTER_OPTIONS_LIMIT = 2000


class FieldKind(str, Enum):
    TEXT = "text"
    MULTI_SELECT = "multi_select"
    TAGS_ALL = "tags_all"
    MIN = "min"
    MAX = "max"
    OVERLAP_MIN = "overlap_min"
    OVERLAP_MAX = "overlap_max"
    DATE_FROM = "date_from"
    DATE_TO = "date_to"
    FLAG = "flag"
    UPCOMING = "upcoming"
    STATUS = "status"


@dataclass(frozen=True)
class FieldRule:
    """How one logical filter is read from the URL and applied.

    ``params`` lists the accepted query-string keys in priority order.
    The first one that yields a non-empty value wins.
    """

    name: str
    kind: FieldKind
    params: tuple[str, ...]
    columns: tuple[str, ...] = ()
    numeric: bool = False  # TAGS_ALL values are numbers (e.g. SDG ids)
    choices: tuple[str, ...] = ()
    default: str | None = None
    bypass: str | None = None  # STATUS value that removes the constraint

    @property
    def column(self) -> str:
        return self.columns[0]


@dataclass(frozen=True)
class FixedConstraint:
    """An equality (one value) or membership (several values) constraint."""

    column: str
    values: tuple[str | bool, ...]


@dataclass(frozen=True)
class OptionDimension:
    """A filter dropdown populated by sampling live rows."""

    name: str
    column: str
    is_array: bool = False


@dataclass(frozen=True)
class MarkerRecipe:
    """How a row becomes a map marker."""

    columns: tuple[str, ...]
    title_column: str
    title_fallback: str
    lat_column: str = "lat"
    lng_column: str = "lng"
    slug_column: str = "id"
    place_columns: tuple[str, ...] = ()
    description_column: str | None = "description"
    category_column: str | None = None
    geocode_missing: bool = False
    limit: int | None = None


@dataclass(frozen=True)
class EntityConfig:
    kind: EntityKind
    resource: str
    fields: tuple[FieldRule, ...]
    list_columns: tuple[str, ...]
    sort_columns: tuple[str, ...]
    default_sort: str
    default_order: SortOrder
    marker: MarkerRecipe
    nulls_last_columns: frozenset[str] = frozenset()
    page_size: int = PAGE_SIZE
    always: tuple[FixedConstraint, ...] = ()
    anonymous_only: tuple[FixedConstraint, ...] = ()
    option_scope: tuple[FixedConstraint, ...] = ()
    option_dimensions: tuple[OptionDimension, ...] = ()
    lookup_options: tuple[str, ...] = ()
    home_marker_limit: int | None = None
    home_marker_sort: str | None = None

    @property
    def option_names(self) -> tuple[str, ...]:
        return tuple(d.name for d in self.option_dimensions) + self.lookup_options

    def field_rule(self, name: str) -> FieldRule | None:
        return next((f for f in self.fields if f.name == name), None)


def _text(*columns: str) -> FieldRule:
    return FieldRule("q", FieldKind.TEXT, ("q",), columns)


def _select(name: str, column: str, *params: str) -> FieldRule:
    return FieldRule(name, FieldKind.MULTI_SELECT, params or (name,), (column,))


def _tags(name: str, column: str, *params: str, numeric: bool = False) -> FieldRule:
    return FieldRule(name, FieldKind.TAGS_ALL, params or (name,), (column,), numeric=numeric)


def _bounds(min_param: str, max_param: str, column: str) -> tuple[FieldRule, FieldRule]:
    return (
        FieldRule(min_param, FieldKind.MIN, (min_param,), (column,)),
        FieldRule(max_param, FieldKind.MAX, (max_param,), (column,)),
    )


# ── Projects ────────────────────────────────────────────────────────────

PROJECTS = EntityConfig(
    kind=EntityKind.PROJECTS,
    resource="projects",
    fields=(
        _text("name", "description", "place_name"),
        _select("category", "category", "category", "type"),
        _select("country", "country"),
        _select("region", "region"),
        _select("currency", "currency"),
        _select("target_demographic", "target_demographic"),
        _tags("thematic_area", "thematic_area"),
        _tags("type_of_intervention", "type_of_intervention"),
        _tags("partner_org_ids", "partner_org_ids"),
        *_bounds("min_needed", "max_needed", "amount_needed"),
        *_bounds("min_received", "max_received", "donations_received"),
        *_bounds("min_lives", "max_lives", "lives_improved"),
        FieldRule("start_from", FieldKind.DATE_FROM, ("start_from",), ("start_date",)),
        FieldRule("end_to", FieldKind.DATE_TO, ("end_to",), ("end_date",)),
    ),
    list_columns=(
        "id", "slug", "name", "category", "place_name", "region", "country",
        "start_date", "end_date", "donations_received", "amount_needed",
        "currency", "thematic_area", "type_of_intervention", "partner_org_ids",
        "target_demographic",
    ),
    sort_columns=("created_at", "name", "amount_needed", "donations_received", "start_date"),
    default_sort="created_at",
    default_order=SortOrder.DESC,
    nulls_last_columns=frozenset({"amount_needed", "donations_received", "start_date"}),
    anonymous_only=(FixedConstraint("status", ("approved",)),),
    option_scope=(FixedConstraint("status", ("approved",)),),
    option_dimensions=(
        OptionDimension("countries", "country"),
        OptionDimension("regions", "region"),
        OptionDimension("thematic", "thematic_area", is_array=True),
        OptionDimension("interventions", "type_of_intervention", is_array=True),
        OptionDimension("demographics", "target_demographic"),
    ),
    marker=MarkerRecipe(
        columns=("id", "slug", "name", "category", "lat", "lng", "place_name", "description"),
        title_column="name",
        title_fallback="Project",
        slug_column="slug",
        place_columns=("place_name",),
        category_column="category",
    ),
    home_marker_limit=120,
    home_marker_sort="created_at",
)


# ── Organisations ───────────────────────────────────────────────────────

ORGANISATIONS = EntityConfig(
    kind=EntityKind.ORGANISATIONS,
    resource="organisations_directory_v1",
    fields=(
        _text("name", "description"),
        _select("country", "based_in_country"),
        _select("region", "based_in_region"),
        _tags("thematic", "thematic_tags", "thematic", "thematic_area"),
        _tags("intervention", "intervention_tags", "intervention", "type_of_intervention"),
        _tags("demographic", "demographic_tags", "demographic", "target_demographic"),
        *_bounds("min_age", "max_age", "age_years"),
        *_bounds("min_projects", "max_projects", "projects_total_count"),
        *_bounds("min_funding", "max_funding", "funding_needed"),
    ),
    list_columns=(
        "id", "name", "description", "website", "based_in_country",
        "based_in_region", "thematic_tags", "intervention_tags",
        "demographic_tags", "funding_needed", "founded_at", "age_years",
        "followers_count", "projects_total_count", "projects_ongoing_count",
    ),
    sort_columns=(
        "followers_count", "projects_total_count", "projects_ongoing_count",
        "funding_needed", "age_years",
    ),
    default_sort="followers_count",
    default_order=SortOrder.DESC,
    nulls_last_columns=frozenset({
        "followers_count", "projects_total_count", "projects_ongoing_count",
        "funding_needed", "age_years",
    }),
    option_dimensions=(
        OptionDimension("countries", "based_in_country"),
        OptionDimension("regions", "based_in_region"),
        OptionDimension("thematic", "thematic_tags", is_array=True),
        OptionDimension("interventions", "intervention_tags", is_array=True),
        OptionDimension("demographics", "demographic_tags", is_array=True),
    ),
    marker=MarkerRecipe(
        columns=("id", "name", "description", "based_in_country", "based_in_region", "lat", "lng"),
        title_column="name",
        title_fallback="Organisation",
        place_columns=("based_in_region", "based_in_country"),
        geocode_missing=True,
        limit=250,
    ),
)


# ── Grants ──────────────────────────────────────────────────────────────

GRANT_STATUSES = ("open", "rolling", "closed", "all")

GRANTS = EntityConfig(
    kind=EntityKind.GRANTS,
    resource="grants",
    fields=(
        _text("title", "summary", "funder_name"),
        _select("project_type", "project_type"),
        _select("funding_type", "funding_type"),
        FieldRule(
            "status", FieldKind.STATUS, ("status",), ("status",),
            choices=GRANT_STATUSES, default="open", bypass="all",
        ),
        _tags("eligible_countries", "eligible_countries"),
        _tags("themes", "themes"),
        _tags("sdgs", "sdgs", numeric=True),
        FieldRule("remote_ok", FieldKind.FLAG, ("remote_ok", "remote_only"), ("remote_ok",)),
        FieldRule("amount_min", FieldKind.OVERLAP_MIN, ("amount_min",), ("amount_min", "amount_max")),
        FieldRule("amount_max", FieldKind.OVERLAP_MAX, ("amount_max",), ("amount_min", "amount_max")),
        FieldRule("deadline_from", FieldKind.DATE_FROM, ("deadline_from",), ("deadline",)),
        FieldRule("deadline_to", FieldKind.DATE_TO, ("deadline_to",), ("deadline",)),
        FieldRule("upcoming_only", FieldKind.UPCOMING, ("upcoming_only",), ("deadline",)),
    ),
    list_columns=(
        "id", "slug", "title", "summary", "funder_name", "funding_type",
        "project_type", "currency", "amount_min", "amount_max", "deadline",
        "open_date", "eligible_countries", "location_name", "latitude",
        "longitude", "status", "created_at",
    ),
    sort_columns=("deadline", "amount_max", "created_at"),
    default_sort="deadline",
    default_order=SortOrder.ASC,
    nulls_last_columns=frozenset({"deadline", "amount_max"}),
    always=(FixedConstraint("is_published", (True,)),),
    option_scope=(
        FixedConstraint("is_published", (True,)),
        FixedConstraint("status", ("open", "rolling")),
    ),
    option_dimensions=(
        OptionDimension("countries", "eligible_countries", is_array=True),
        OptionDimension("themes", "themes", is_array=True),
    ),
    marker=MarkerRecipe(
        columns=("id", "slug", "title", "summary", "project_type", "latitude", "longitude", "location_name"),
        title_column="title",
        title_fallback="Funding opportunity",
        lat_column="latitude",
        lng_column="longitude",
        slug_column="slug",
        place_columns=("location_name",),
        description_column="summary",
        category_column="project_type",
    ),
    home_marker_limit=160,
)


# ── Watchdog issues ─────────────────────────────────────────────────────

WATCHDOG_ISSUES = EntityConfig(
    kind=EntityKind.WATCHDOG_ISSUES,
    resource="watchdog_issues",
    fields=(
        _text("title", "description"),
        _select("country", "country"),
        _select("region", "region"),
        _tags("sdgs", "sdgs", numeric=True),
        _tags("global_challenges", "global_challenges"),
        _tags("demographics", "affected_demographics", "demographics", "demographic"),
        *_bounds("urgency_min", "urgency_max", "urgency"),
        FieldRule("date_from", FieldKind.DATE_FROM, ("date_from",), ("date_observed",)),
        FieldRule("date_to", FieldKind.DATE_TO, ("date_to",), ("date_observed",)),
    ),
    list_columns=(
        "id", "title", "description", "country", "region", "city", "latitude",
        "longitude", "sdgs", "global_challenges", "affected_demographics",
        "urgency", "date_observed", "created_at",
    ),
    sort_columns=("created_at", "urgency", "title"),
    default_sort="created_at",
    default_order=SortOrder.DESC,
    nulls_last_columns=frozenset({"urgency"}),
    always=(FixedConstraint("status", ("approved",)),),
    option_scope=(FixedConstraint("status", ("approved",)),),
    option_dimensions=(
        OptionDimension("countries", "country"),
        OptionDimension("regions", "region"),
        OptionDimension("demographics", "affected_demographics", is_array=True),
    ),
    lookup_options=("sdgs", "global_challenges"),
    marker=MarkerRecipe(
        columns=("id", "title", "description", "country", "region", "city", "latitude", "longitude", "urgency"),
        title_column="title",
        title_fallback="Watchdog issue",
        lat_column="latitude",
        lng_column="longitude",
        place_columns=("city", "region", "country"),
    ),
    home_marker_limit=160,
)


ENTITY_CONFIGS: dict[EntityKind, EntityConfig] = {
    config.kind: config
    for config in (PROJECTS, ORGANISATIONS, GRANTS, WATCHDOG_ISSUES)
}


def get_entity_config(kind: EntityKind | str) -> EntityConfig:
    """Return the table for *kind*.  Raises ``KeyError`` for unknown kinds."""
    return ENTITY_CONFIGS[EntityKind(kind)]
