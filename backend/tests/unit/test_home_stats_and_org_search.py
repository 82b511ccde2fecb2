"""Unit tests for GetHomeStatsUseCase and SearchOrganisationsUseCase."""

import pytest

from taskforce.domain.common.errors import BackendQueryError
from taskforce.use_cases.directory import (
    GetHomeStatsUseCase,
    SearchOrganisationsQuery,
    SearchOrganisationsUseCase,
)
from taskforce.use_cases.directory.get_home_stats import number_from

from tests.unit.directory_fakes import FakeDirectoryRepository, FakeUnitOfWork


class TestNumberFrom:
    @pytest.mark.parametrize("raw,expected", [
        (12, 12),
        (1.5, 1.5),
        ("42", 42),
        ("1234.50", 1234.5),
        ("", None),
        (None, None),
        ("n/a", None),
        (True, None),
    ])
    def test_coercion(self, raw, expected):
        assert number_from(raw) == expected


class TestHomeStats:
    def test_groups_and_coerces(self):
        repo = FakeDirectoryRepository(home_stats={
            "updated_at": "2025-06-01T10:00:00+00:00",
            "projects_projects_approved": "42",
            "projects_donations_received_eur": "1234.50",
            "funding_open_calls": 7,
            "issues_issues_total": None,
        })
        stats = GetHomeStatsUseCase().execute(FakeUnitOfWork(repo))
        assert stats.updated_at == "2025-06-01T10:00:00+00:00"
        assert stats.projects["projects_approved"] == 42
        assert stats.projects["donations_received_eur"] == 1234.5
        assert stats.projects["projects_ongoing"] is None
        assert stats.funding["open_calls"] == 7
        assert stats.issues == {"issues_total": None, "issues_open": None}

    def test_missing_row_defaults_timestamp(self):
        stats = GetHomeStatsUseCase(now=lambda: "NOW").execute(FakeUnitOfWork(FakeDirectoryRepository()))
        assert stats.updated_at == "NOW"
        assert set(stats.funding) == {"opportunities_total", "funders_registered", "open_calls"}

    def test_errors_propagate(self):
        uow = FakeUnitOfWork(FakeDirectoryRepository(failing={"get_home_stats"}))
        with pytest.raises(BackendQueryError):
            GetHomeStatsUseCase().execute(uow)


class TestSearchOrganisations:
    def _repo(self):
        return FakeDirectoryRepository(organisations=[
            {"id": "1", "name": "Green Earth", "logo_url": None, "country_based": "Kenya", "verification_status": "verified"},
            {"id": "2", "name": "Greenpeace-ish", "logo_url": None, "country_based": None, "verification_status": "pending"},
        ])

    @pytest.mark.parametrize("term", [None, "", "   "])
    def test_blank_term_skips_backend(self, term):
        repo = self._repo()
        uow = FakeUnitOfWork(repo)
        assert SearchOrganisationsUseCase().execute(uow, SearchOrganisationsQuery(term=term)) == []
        assert repo.search_calls == []
        assert uow.entered == 0

    def test_only_verified_with_limit(self):
        repo = self._repo()
        rows = SearchOrganisationsUseCase(limit=10).execute(FakeUnitOfWork(repo), SearchOrganisationsQuery(term=" green "))
        assert rows == [{"id": "1", "name": "Green Earth", "logo_url": None, "country_based": "Kenya"}]
        assert repo.search_calls == [("green", 10)]
