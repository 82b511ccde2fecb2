"""Directory listing endpoints: projects, organisations, grants, watchdog issues."""

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from ...config import settings
from ...domain.common.errors import BackendQueryError
from ...domain.directory.models import EntityKind, ViewMode, Viewer
from ...domain.directory.search_params import RawSearchParams
from ...infra.db.uow import SqlUnitOfWork
from ...schemas.directory import (
    DirectoryPageResponse,
    DirectoryViewResponse,
    FilterOptionResponse,
    MapMarkerResponse,
    filter_options_response,
    markers_response,
)
from ...use_cases.directory import (
    GetFilterOptionsQuery,
    GetFilterOptionsUseCase,
    GetMapMarkersQuery,
    GetMapMarkersUseCase,
    SearchDirectoryQuery,
    SearchDirectoryResult,
    SearchDirectoryUseCase,
)
from ...wiring.bootstrap import (
    get_filter_options_use_case,
    get_map_markers_use_case,
    get_search_directory_use_case,
    get_uow,
)
from .directory_params import get_raw_params, get_viewer

logger = logging.getLogger(__name__)
router = APIRouter()


def _search(
    use_case: SearchDirectoryUseCase,
    uow: SqlUnitOfWork,
    entity: EntityKind,
    raw: RawSearchParams,
    viewer: Viewer,
) -> SearchDirectoryResult:
    try:
        return use_case.execute(uow, SearchDirectoryQuery(entity=entity, raw_params=raw, viewer=viewer))
    except BackendQueryError as e:
        logger.error("Directory search for %s failed: %s", entity.value, e)
        raise HTTPException(status_code=500, detail=f"Failed to load {entity.value}")
    except Exception as e:
        logger.error("Directory search for %s failed: %s", entity.value, e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to load {entity.value}")


@router.get("/{entity}", response_model=DirectoryPageResponse)
def search_directory(
    entity: EntityKind,
    raw: RawSearchParams = Depends(get_raw_params),
    viewer: Viewer = Depends(get_viewer),
    uow: SqlUnitOfWork = Depends(get_uow),
    use_case: SearchDirectoryUseCase = Depends(get_search_directory_use_case),
):
    """One page of a listing: ``{rows, count, page, pageCount, warnings}``."""
    result = _search(use_case, uow, entity, raw, viewer)
    return DirectoryPageResponse.from_domain(result)


@router.get("/{entity}/markers", response_model=List[MapMarkerResponse])
async def get_directory_markers(
    entity: EntityKind,
    raw: RawSearchParams = Depends(get_raw_params),
    viewer: Viewer = Depends(get_viewer),
    uow: SqlUnitOfWork = Depends(get_uow),
    use_case: GetMapMarkersUseCase = Depends(get_map_markers_use_case),
):
    """Unpaginated markers for the current filters. Never fails."""
    markers = await use_case.execute(
        uow, GetMapMarkersQuery(entity=entity, raw_params=raw, viewer=viewer)
    )
    return markers_response(markers)


@router.get("/{entity}/filter-options", response_model=Dict[str, List[FilterOptionResponse]])
def get_directory_filter_options(
    entity: EntityKind,
    uow: SqlUnitOfWork = Depends(get_uow),
    use_case: GetFilterOptionsUseCase = Depends(get_filter_options_use_case),
):
    options = use_case.execute(uow, GetFilterOptionsQuery(entity=entity))
    return filter_options_response(options)


@router.get("/{entity}/page", response_model=DirectoryViewResponse)
async def get_directory_page(
    entity: EntityKind,
    raw: RawSearchParams = Depends(get_raw_params),
    viewer: Viewer = Depends(get_viewer),
    uow: SqlUnitOfWork = Depends(get_uow),
    search_use_case: SearchDirectoryUseCase = Depends(get_search_directory_use_case),
    markers_use_case: GetMapMarkersUseCase = Depends(get_map_markers_use_case),
):
    """List envelope plus globe markers.

    The globe view falls back to the table when no map token is set.
    """
    result = await run_in_threadpool(_search, search_use_case, uow, entity, raw, viewer)

    view = result.parsed.view
    if view == ViewMode.GLOBE and not settings.globe_enabled:
        view = ViewMode.TABLE

    markers = []
    if view == ViewMode.GLOBE:
        markers = await markers_use_case.execute(
            uow, GetMapMarkersQuery(entity=entity, raw_params=raw, viewer=viewer)
        )

    page = DirectoryPageResponse.from_domain(result)
    return DirectoryViewResponse(
        **page.model_dump(),
        view=view.value,
        markers=markers_response(markers),
    )
