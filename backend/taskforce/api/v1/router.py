"""
Main API router that includes all endpoint routers.
"""
from fastapi import APIRouter

from . import directory, home, organisations

router = APIRouter()

router.include_router(directory.router, prefix="/directory", tags=["directory"])
router.include_router(home.router, prefix="/home", tags=["home"])
router.include_router(organisations.router, prefix="/organisations", tags=["organisations"])
