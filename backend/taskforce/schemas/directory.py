"""Pydantic schemas for the directory API endpoints.

Response models for list envelopes, filter options, map markers, home
statistics and organisation quick-search.
"""

from typing import Any, Dict, List, Optional, Self

from pydantic import BaseModel, Field

from ..domain.directory.models import FilterOptions, HomeStats, MapMarker, ParseWarning
from ..use_cases.directory import HomeMarkers, SearchDirectoryResult


class ParseWarningResponse(BaseModel):
    param: str
    value: str
    reason: str

    @classmethod
    def from_domain(cls, warning: ParseWarning) -> Self:
        return cls(param=warning.param, value=warning.value, reason=warning.reason)


class DirectoryPageResponse(BaseModel):
    """One page of a directory listing."""

    rows: List[Dict[str, Any]]
    count: int
    page: int
    page_count: int = Field(serialization_alias="pageCount")
    warnings: List[ParseWarningResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, result: SearchDirectoryResult) -> Self:
        page = result.page
        return cls(
            rows=list(page.rows),
            count=page.count,
            page=page.page,
            page_count=page.page_count,
            warnings=[ParseWarningResponse.from_domain(w) for w in result.parsed.warnings],
        )


class MapMarkerResponse(BaseModel):
    id: str
    slug: str
    title: str
    lat: float
    lng: float
    place_name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def from_domain(cls, marker: MapMarker) -> Self:
        return cls(
            id=marker.id,
            slug=marker.slug,
            title=marker.title,
            lat=marker.lat,
            lng=marker.lng,
            place_name=marker.place_name,
            description=marker.description,
            category=marker.category,
        )


def markers_response(markers) -> List[MapMarkerResponse]:
    return [MapMarkerResponse.from_domain(m) for m in markers]


class DirectoryViewResponse(DirectoryPageResponse):
    """List envelope plus markers for the globe view."""

    view: str
    markers: List[MapMarkerResponse] = Field(default_factory=list)


class FilterOptionResponse(BaseModel):
    value: str
    label: str


def filter_options_response(options: FilterOptions) -> Dict[str, List[FilterOptionResponse]]:
    return {
        name: [FilterOptionResponse(value=o.value, label=o.label) for o in values]
        for name, values in options.dimensions.items()
    }


class HomeMarkersResponse(BaseModel):
    project_markers: List[MapMarkerResponse] = Field(serialization_alias="projectMarkers")
    grant_markers: List[MapMarkerResponse] = Field(serialization_alias="grantMarkers")
    issue_markers: List[MapMarkerResponse] = Field(serialization_alias="issueMarkers")

    @classmethod
    def from_domain(cls, markers: HomeMarkers) -> Self:
        return cls(
            project_markers=markers_response(markers.projects),
            grant_markers=markers_response(markers.grants),
            issue_markers=markers_response(markers.issues),
        )


class HomeStatsResponse(BaseModel):
    updated_at: str
    projects: Dict[str, Optional[int | float]]
    funding: Dict[str, Optional[int | float]]
    issues: Dict[str, Optional[int | float]]

    @classmethod
    def from_domain(cls, stats: HomeStats) -> Self:
        return cls(
            updated_at=stats.updated_at,
            projects=stats.projects,
            funding=stats.funding,
            issues=stats.issues,
        )


class OrganisationSearchItem(BaseModel):
    id: str
    name: str
    logo_url: Optional[str] = None
    country_based: Optional[str] = None


class OrganisationSearchResponse(BaseModel):
    organisations: List[OrganisationSearchItem]
