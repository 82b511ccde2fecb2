"""Unit tests for predicate composition and sort/page resolution."""

from taskforce.domain.common.query import (
    BooleanFilter,
    CategoricalFilter,
    ContainsAllFilter,
    LowerBoundOrNullFilter,
    RangeFilter,
    RangeOverlapFilter,
    SortOrder,
    TextSearchFilter,
)
from taskforce.domain.directory.entities import GRANTS, ORGANISATIONS, PROJECTS, WATCHDOG_ISSUES
from taskforce.domain.directory.filter_engine import MAX_OFFSET, build_query, compose, resolve
from taskforce.domain.directory.models import ANONYMOUS, Viewer
from taskforce.domain.directory.search_params import parse_search_params

TODAY = "2025-06-01"
SIGNED_IN = Viewer(is_authenticated=True)


def _compose(config, raw, viewer=ANONYMOUS):
    return compose(config, parse_search_params(config, raw), viewer=viewer, today=TODAY)


class TestProjects:
    def test_anonymous_viewer_only_sees_approved(self):
        spec = _compose(PROJECTS, {})
        assert spec.categorical_filters == [CategoricalFilter("status", ("approved",))]

    def test_authenticated_viewer_has_no_status_constraint(self):
        spec = _compose(PROJECTS, {}, viewer=SIGNED_IN)
        assert spec.is_empty()

    def test_multi_select_is_one_membership_filter(self):
        spec = _compose(PROJECTS, {"country": ["Kenya", "Peru"]}, viewer=SIGNED_IN)
        assert spec.categorical_filters == [CategoricalFilter("country", ("Kenya", "Peru"))]

    def test_tags_are_one_contains_all_filter(self):
        spec = _compose(PROJECTS, {"thematic_area": "water,energy"}, viewer=SIGNED_IN)
        assert spec.contains_all_filters == [
            ContainsAllFilter("thematic_area", ("water", "energy"))
        ]

    def test_text_search_keeps_raw_term(self):
        spec = _compose(PROJECTS, {"q": "100%_clean"}, viewer=SIGNED_IN)
        assert spec.text_searches == [
            TextSearchFilter(("name", "description", "place_name"), "100%_clean")
        ]

    def test_ranges_and_dates(self):
        spec = _compose(
            PROJECTS,
            {"min_needed": "1000", "max_lives": "50", "start_from": "2024-01-01", "end_to": "2024-12-31"},
            viewer=SIGNED_IN,
        )
        assert spec.range_filters == [
            RangeFilter("amount_needed", min_value=1000),
            RangeFilter("lives_improved", max_value=50),
            RangeFilter("start_date", min_value="2024-01-01"),
            RangeFilter("end_date", max_value="2024-12-31"),
        ]


class TestGrants:
    def test_defaults(self):
        spec = _compose(GRANTS, {})
        assert spec.categorical_filters == [CategoricalFilter("status", ("open",))]
        assert spec.boolean_filters == [BooleanFilter("is_published", True)]

    def test_status_all_removes_constraint_but_keeps_published(self):
        spec = _compose(GRANTS, {"status": "all"})
        assert spec.categorical_filters == []
        assert spec.boolean_filters == [BooleanFilter("is_published", True)]

    def test_remote_flag_is_one_directional(self):
        assert BooleanFilter("remote_ok", True) in _compose(GRANTS, {"remote_ok": "true"}).boolean_filters
        assert all(b.field != "remote_ok" for b in _compose(GRANTS, {"remote_ok": "false"}).boolean_filters)

    def test_amount_bounds_are_independent_overlaps(self):
        spec = _compose(GRANTS, {"amount_min": "5000", "amount_max": "20000"})
        assert spec.overlap_filters == [
            RangeOverlapFilter("amount_min", "amount_max", floor=5000),
            RangeOverlapFilter("amount_min", "amount_max", ceiling=20000),
        ]

    def test_upcoming_only_uses_today(self):
        spec = _compose(GRANTS, {"upcoming_only": "1"})
        assert spec.lower_bound_or_null_filters == [LowerBoundOrNullFilter("deadline", TODAY)]
        assert _compose(GRANTS, {"upcoming_only": "0"}).lower_bound_or_null_filters == []

    def test_numeric_sdgs(self):
        spec = _compose(GRANTS, {"sdgs": "3,13"})
        assert spec.contains_all_filters == [ContainsAllFilter("sdgs", (3, 13))]


class TestOtherEntities:
    def test_watchdog_always_approved_even_when_signed_in(self):
        spec = _compose(WATCHDOG_ISSUES, {}, viewer=SIGNED_IN)
        assert spec.categorical_filters == [CategoricalFilter("status", ("approved",))]

    def test_organisation_columns_are_mapped(self):
        spec = _compose(ORGANISATIONS, {"country": "Kenya", "thematic_area": "water", "min_projects": "2"})
        assert spec.categorical_filters == [CategoricalFilter("based_in_country", ("Kenya",))]
        assert spec.contains_all_filters == [ContainsAllFilter("thematic_tags", ("water",))]
        assert spec.range_filters == [RangeFilter("projects_total_count", min_value=2)]

    def test_organisations_have_no_implicit_constraint(self):
        assert _compose(ORGANISATIONS, {}).is_empty()


class TestResolve:
    def test_page_math(self):
        sort, page = resolve(PROJECTS, parse_search_params(PROJECTS, {"page": "3"}))
        assert page.offset == 50
        assert page.limit == 25

    def test_grants_default_sort_puts_nulls_last(self):
        sort, _ = resolve(GRANTS, parse_search_params(GRANTS, {}))
        assert (sort.field, sort.order, sort.nulls_last) == ("deadline", SortOrder.ASC, True)

    def test_non_nullable_sort(self):
        sort, _ = resolve(PROJECTS, parse_search_params(PROJECTS, {"sort": "name", "dir": "asc"}))
        assert sort.nulls_last is False

    def test_watchdog_urgency_nulls_last(self):
        sort, _ = resolve(WATCHDOG_ISSUES, parse_search_params(WATCHDOG_ISSUES, {"sort": "urgency"}))
        assert sort.nulls_last is True
        assert sort.order == SortOrder.DESC

    def test_huge_page_is_capped_to_a_bindable_offset(self):
        _, page = resolve(PROJECTS, parse_search_params(PROJECTS, {"page": "1e20"}))
        assert page.page == MAX_OFFSET // 25
        assert page.offset <= 2**63 - 1

    def test_build_query_bundles_everything(self):
        spec = build_query(
            PROJECTS,
            parse_search_params(PROJECTS, {"page": "2", "sort": "amount_needed", "dir": "asc"}),
            viewer=ANONYMOUS,
            today=TODAY,
        )
        assert spec.page.page == 2
        assert spec.sort.field == "amount_needed"
        assert spec.filters.categorical_filters == [CategoricalFilter("status", ("approved",))]
