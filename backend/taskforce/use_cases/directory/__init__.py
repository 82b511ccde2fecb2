from .get_filter_options import GetFilterOptionsQuery, GetFilterOptionsUseCase
from .get_home_markers import GetHomeMarkersQuery, GetHomeMarkersUseCase, HomeMarkers
from .get_home_stats import GetHomeStatsUseCase
from .get_map_markers import GetMapMarkersQuery, GetMapMarkersUseCase
from .search_directory import (
    SearchDirectoryQuery,
    SearchDirectoryResult,
    SearchDirectoryUseCase,
)
from .search_organisations import SearchOrganisationsQuery, SearchOrganisationsUseCase

__all__ = [
    "GetFilterOptionsQuery",
    "GetFilterOptionsUseCase",
    "GetHomeMarkersQuery",
    "GetHomeMarkersUseCase",
    "HomeMarkers",
    "GetHomeStatsUseCase",
    "GetMapMarkersQuery",
    "GetMapMarkersUseCase",
    "SearchDirectoryQuery",
    "SearchDirectoryResult",
    "SearchDirectoryUseCase",
    "SearchOrganisationsQuery",
    "SearchOrganisationsUseCase",
]
