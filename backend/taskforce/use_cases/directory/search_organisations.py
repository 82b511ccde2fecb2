"""SearchOrganisationsUseCase: name lookup over verified organisations."""

from __future__ import annotations

from dataclasses import dataclass

from taskforce.domain.common.uow import UnitOfWork

DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class SearchOrganisationsQuery:
    term: str | None = None


class SearchOrganisationsUseCase:
    def __init__(self, limit: int = DEFAULT_LIMIT) -> None:
        self._limit = limit

    def execute(self, uow: UnitOfWork, query: SearchOrganisationsQuery) -> list[dict]:
        term = (query.term or "").strip()
        if not term:
            return []
        with uow:
            return uow.directory.search_verified_organisations(term, self._limit)
