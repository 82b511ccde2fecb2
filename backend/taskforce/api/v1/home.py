"""Landing-page endpoints: globe markers and headline statistics."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ...domain.directory.models import Viewer
from ...infra.db.uow import SqlUnitOfWork
from ...schemas.directory import HomeMarkersResponse, HomeStatsResponse
from ...use_cases.directory import (
    GetHomeMarkersQuery,
    GetHomeMarkersUseCase,
    GetHomeStatsUseCase,
)
from ...wiring.bootstrap import get_home_markers_use_case, get_home_stats_use_case, get_uow
from .directory_params import get_viewer

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/markers", response_model=HomeMarkersResponse)
async def get_home_markers(
    viewer: Viewer = Depends(get_viewer),
    uow: SqlUnitOfWork = Depends(get_uow),
    use_case: GetHomeMarkersUseCase = Depends(get_home_markers_use_case),
):
    try:
        markers = await use_case.execute(uow, GetHomeMarkersQuery(viewer=viewer))
    except Exception as e:
        logger.error("Failed to load home markers: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load home markers")
    return HomeMarkersResponse.from_domain(markers)


@router.get("/stats", response_model=HomeStatsResponse)
def get_home_stats(
    uow: SqlUnitOfWork = Depends(get_uow),
    use_case: GetHomeStatsUseCase = Depends(get_home_stats_use_case),
):
    try:
        stats = use_case.execute(uow)
    except Exception as e:
        logger.error("Failed to load home stats: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load home stats")
    return HomeStatsResponse.from_domain(stats)
