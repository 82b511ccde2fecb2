"""Organisation quick-search used by partner pickers."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ...infra.db.uow import SqlUnitOfWork
from ...schemas.directory import OrganisationSearchItem, OrganisationSearchResponse
from ...use_cases.directory import SearchOrganisationsQuery, SearchOrganisationsUseCase
from ...wiring.bootstrap import get_search_organisations_use_case, get_uow

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/search", response_model=OrganisationSearchResponse)
def search_organisations(
    q: Optional[str] = Query(None, description="Case-insensitive name fragment"),
    uow: SqlUnitOfWork = Depends(get_uow),
    use_case: SearchOrganisationsUseCase = Depends(get_search_organisations_use_case),
):
    try:
        rows = use_case.execute(uow, SearchOrganisationsQuery(term=q))
    except Exception as e:
        logger.error("Organisation search failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to search organisations")
    return OrganisationSearchResponse(
        organisations=[OrganisationSearchItem(**row) for row in rows]
    )
