"""Integration tests for SqlDirectoryRepository against in-memory SQLite."""

from __future__ import annotations

import pytest

from taskforce.domain.common.errors import BackendQueryError
from taskforce.domain.common.query import FilterSpec, PageSpec, QuerySpec, SortOrder, SortSpec
from taskforce.domain.directory.entities import GRANTS, ORGANISATIONS, PROJECTS
from taskforce.domain.directory.models import ANONYMOUS, EntityKind, Viewer
from taskforce.infra.db.repositories.directory_repo import SqlDirectoryRepository
from taskforce.infra.db.uow import SqlUnitOfWork
from taskforce.models.directory import (
    Grant,
    IfrcChallenge,
    Organisation,
    OrganisationDirectoryEntry,
    Project,
    Sdg,
)
from taskforce.use_cases.directory import SearchDirectoryQuery, SearchDirectoryUseCase


def _seed_projects(session) -> None:
    for i in range(30):
        session.add(Project(
            id=f"p{i:02d}",
            slug=f"clean-water-{i}",
            name=f"Clean Water {i}",
            category="environmental",
            status="approved",
            amount_needed=1000 + i * 10,
            thematic_area=["water"],
        ))
    session.add_all([
        Project(id="x1", name="Water for all", category="humanitarian", status="approved", amount_needed=5000),
        Project(id="x2", name="Water pending", category="environmental", status="pending", amount_needed=5000),
        Project(id="x3", name="Small water", category="environmental", status="approved", amount_needed=500),
        Project(id="x4", name="Solar", category="environmental", status="approved", amount_needed=5000),
        Project(id="x5", name="Unfunded water", category="environmental", status="approved"),
    ])
    session.commit()


class TestProjectListing:
    def test_filtered_second_page(self, session, session_factory):
        _seed_projects(session)
        result = SearchDirectoryUseCase().execute(
            SqlUnitOfWork(session_factory),
            SearchDirectoryQuery(
                entity=EntityKind.PROJECTS,
                raw_params={
                    "q": "water",
                    "category": ["environmental"],
                    "min_needed": "1000",
                    "sort": "amount_needed",
                    "dir": "asc",
                    "page": "2",
                },
            ),
        )
        page = result.page
        assert page.count == 30
        assert page.page_count == 2
        assert [r["id"] for r in page.rows] == ["p25", "p26", "p27", "p28", "p29"]
        assert set(page.rows[0]) == set(PROJECTS.list_columns)
        assert page.rows[0]["thematic_area"] == ["water"]

    def test_anonymous_viewer_does_not_see_pending(self, session, session_factory):
        _seed_projects(session)
        use_case = SearchDirectoryUseCase()
        raw = {"q": "pending"}
        anon = use_case.execute(
            SqlUnitOfWork(session_factory),
            SearchDirectoryQuery(entity=EntityKind.PROJECTS, raw_params=raw, viewer=ANONYMOUS),
        )
        signed_in = use_case.execute(
            SqlUnitOfWork(session_factory),
            SearchDirectoryQuery(
                entity=EntityKind.PROJECTS, raw_params=raw, viewer=Viewer(is_authenticated=True)
            ),
        )
        assert anon.page.count == 0
        assert [r["id"] for r in signed_in.page.rows] == ["x2"]

    def test_page_past_the_end_keeps_count(self, session, session_factory):
        _seed_projects(session)
        result = SearchDirectoryUseCase().execute(
            SqlUnitOfWork(session_factory),
            SearchDirectoryQuery(entity=EntityKind.PROJECTS, raw_params={"page": "9"}),
        )
        assert result.page.rows == ()
        assert result.page.count == 34

    def test_huge_page_number_is_an_empty_page(self, session, session_factory):
        _seed_projects(session)
        result = SearchDirectoryUseCase().execute(
            SqlUnitOfWork(session_factory),
            SearchDirectoryQuery(entity=EntityKind.PROJECTS, raw_params={"page": "1e20"}),
        )
        assert result.page.rows == ()
        assert result.page.count == 34

    def test_nulls_sort_last_descending(self, session):
        _seed_projects(session)
        repo = SqlDirectoryRepository(session)
        spec = QuerySpec(
            filters=FilterSpec(),
            sort=SortSpec(field="amount_needed", order=SortOrder.DESC, nulls_last=True),
            page=PageSpec(page=2, per_page=25),
        )
        page = repo.query(PROJECTS, spec)
        assert page.rows[-1]["id"] == "x5"

    def test_text_search_is_literal(self, session):
        session.add_all([
            Project(id="a", name="100% solar", status="approved"),
            Project(id="b", name="1000 solar panels", status="approved"),
        ])
        session.commit()
        filters = FilterSpec()
        filters.add_text_search(("name",), "100%")
        spec = QuerySpec(filters=filters, sort=SortSpec(field="name"), page=PageSpec())
        page = SqlDirectoryRepository(session).query(PROJECTS, spec)
        assert [r["id"] for r in page.rows] == ["a"]


class TestGrantListing:
    def test_defaults_hide_closed_and_unpublished(self, session, session_factory):
        session.add_all([
            Grant(id="g1", title="Open", status="open", is_published=True, deadline="2025-07-01"),
            Grant(id="g2", title="Closed", status="closed", is_published=True),
            Grant(id="g3", title="Draft", status="open", is_published=False),
            Grant(id="g4", title="No deadline", status="open", is_published=True),
            Grant(id="g5", title="Early", status="open", is_published=True, deadline="2025-06-15"),
        ])
        session.commit()
        result = SearchDirectoryUseCase().execute(
            SqlUnitOfWork(session_factory),
            SearchDirectoryQuery(entity=EntityKind.GRANTS),
        )
        # deadline ascending, grants without a deadline last
        assert [r["id"] for r in result.page.rows] == ["g5", "g1", "g4"]

    def test_amount_overlap(self, session, session_factory):
        session.add_all([
            Grant(id="small", title="s", status="open", is_published=True, amount_min=100, amount_max=900),
            Grant(id="mid", title="m", status="open", is_published=True, amount_min=800, amount_max=5000),
            Grant(id="big", title="b", status="open", is_published=True, amount_min=20000, amount_max=90000),
        ])
        session.commit()
        result = SearchDirectoryUseCase().execute(
            SqlUnitOfWork(session_factory),
            SearchDirectoryQuery(
                entity=EntityKind.GRANTS,
                raw_params={"amount_min": "1000", "amount_max": "10000"},
            ),
        )
        assert [r["id"] for r in result.page.rows] == ["mid"]


class TestMarkersAndSamples:
    def test_query_markers_sort_and_limit(self, session):
        session.add_all([
            OrganisationDirectoryEntry(id="o1", name="A", based_in_country="Kenya", lat=1.0, lng=2.0),
            OrganisationDirectoryEntry(id="o2", name="B", based_in_country="Peru"),
            OrganisationDirectoryEntry(id="o3", name="C"),
        ])
        session.commit()
        rows = SqlDirectoryRepository(session).query_markers(
            ORGANISATIONS, FilterSpec(), sort=SortSpec(field="name", order=SortOrder.DESC), limit=2
        )
        assert [r["id"] for r in rows] == ["o3", "o2"]
        assert set(rows[0]) == set(ORGANISATIONS.marker.columns)

    def test_sample_rows_respects_limit_and_filters(self, session):
        _seed_projects(session)
        filters = FilterSpec()
        filters.add_categorical("category", ("humanitarian",))
        rows = SqlDirectoryRepository(session).sample_rows(PROJECTS, ("country", "region"), filters, 10)
        assert rows == [{"country": None, "region": None}]
        assert len(SqlDirectoryRepository(session).sample_rows(PROJECTS, ("id",), FilterSpec(), 7)) == 7


class TestLookups:
    def test_sdgs_by_id_and_challenges_by_name(self, session):
        session.add_all([
            Sdg(id=13, name="Climate Action"),
            Sdg(id=2, name="Zero Hunger"),
            IfrcChallenge(id="c2", name="Migration"),
            IfrcChallenge(id="c1", name="Climate"),
        ])
        session.commit()
        repo = SqlDirectoryRepository(session)
        assert [r["id"] for r in repo.list_sdgs()] == [2, 13]
        assert [r["name"] for r in repo.list_global_challenges()] == ["Climate", "Migration"]

    def test_organisation_search(self, session):
        session.add_all([
            Organisation(id="1", name="100% Green", verification_status="verified"),
            Organisation(id="2", name="1000 Greens", verification_status="verified"),
            Organisation(id="3", name="100% Greenish", verification_status="pending"),
        ])
        session.commit()
        rows = SqlDirectoryRepository(session).search_verified_organisations("100%", 10)
        assert rows == [{"id": "1", "name": "100% Green", "logo_url": None, "country_based": None}]

    def test_missing_home_stats_procedure_is_a_backend_error(self, session):
        with pytest.raises(BackendQueryError) as exc_info:
            SqlDirectoryRepository(session).fetch_home_stats()
        assert exc_info.value.resource == "get_home_stats"


def test_grants_config_reads_grants_table():
    assert GRANTS.resource == Grant.__tablename__
