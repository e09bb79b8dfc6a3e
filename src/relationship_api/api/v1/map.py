"""Map API endpoint — aggregated markers and viewport for a region."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from relationship_api.core.config import Settings, get_settings
from relationship_api.core.dependencies import get_async_session, get_coordinate_resolver
from relationship_api.lib.geocoder import CoordinateResolver
from relationship_api.lib.mapping import DisplayMode, MapMarker
from relationship_api.schemas.entity import OrganizationStatusLiteral
from relationship_api.schemas.map import (
    MapMarkerResponse,
    MapResponse,
    MarkerOrganization,
    MarkerPerson,
    ViewportResponse,
)
from relationship_api.services.map_service import build_map

map_router = APIRouter(prefix="/map", tags=["map"])


def _marker_response(marker: MapMarker) -> MapMarkerResponse:
    return MapMarkerResponse(
        position=marker.position,
        city=marker.city,
        type=marker.type,
        count=marker.count,
        color=marker.color,
        size=marker.size,
        badge=marker.badge,
        selected=marker.selected,
        organizations=[
            MarkerOrganization(id=org.id, name=org.name, city=org.city, state=org.state)
            for org in marker.organizations
        ],
        people=[MarkerPerson(id=p.id, org_id=p.org_id, name=p.display_name) for p in marker.people],
    )


@map_router.get("", response_model=MapResponse)
async def get_map(
    display_mode: DisplayMode = Query(DisplayMode.BOTH),  # noqa: B008
    region: str | None = Query(None, max_length=50),
    selected_org_id: uuid.UUID | None = Query(None),  # noqa: B008
    q: str | None = Query(None, max_length=255, description="Organization name search"),
    city: list[str] | None = Query(None, description="Filter organizations by city (repeatable)"),  # noqa: B008
    state: list[str] | None = Query(None, description="Filter organizations by state (repeatable)"),  # noqa: B008
    org_status: list[OrganizationStatusLiteral] | None = Query(  # noqa: B008
        None, alias="status", description="Filter organizations by status (repeatable)"
    ),
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    resolver: CoordinateResolver = Depends(get_coordinate_resolver),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> MapResponse:
    """Markers grouped by coordinate plus the viewport that fits them."""
    view = await build_map(
        session,
        resolver,
        settings,
        display_mode=display_mode,
        region=region,
        selected_org_id=selected_org_id,
        query=q,
        cities=city,
        states=state,
        statuses=org_status,
    )
    return MapResponse(
        region=view.region.code,
        display_mode=view.display_mode,
        markers=[_marker_response(m) for m in view.markers],
        viewport=ViewportResponse(
            center=view.viewport.center,
            zoom=view.viewport.zoom,
            bounds=view.viewport.bounds,
        ),
    )
