"""Geography reference API endpoints.

GET /geography/divisions                          — Division options
GET /geography/regions                            — Region options (optionally per map region)
GET /geography/chapters                           — Chapter options (optionally per map region)
GET /geography/states/{state}/counties            — County units in a state
GET /geography/units/{unit_id}                    — Single county unit
GET /geography/organizations/{org_id}/hierarchy   — An organization's county hierarchy
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from relationship_api.core.dependencies import get_async_session
from relationship_api.schemas.geography import GeographyUnitResponse, GeographyUnitSummary, OptionResponse
from relationship_api.services.geography_service import (
    get_organization_hierarchy,
    get_unit,
    list_chapters,
    list_counties_by_state,
    list_divisions,
    list_regions,
)

geography_router = APIRouter(prefix="/geography", tags=["geography"])


@geography_router.get("/divisions", response_model=list[OptionResponse])
async def get_divisions(
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> list[OptionResponse]:
    return [OptionResponse(**o) for o in await list_divisions(session)]


@geography_router.get("/regions", response_model=list[OptionResponse])
async def get_regions(
    region: str | None = Query(None, max_length=50, description="Limit to a served map region's states"),
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> list[OptionResponse]:
    return [OptionResponse(**o) for o in await list_regions(session, region)]


@geography_router.get("/chapters", response_model=list[OptionResponse])
async def get_chapters(
    region: str | None = Query(None, max_length=50, description="Limit to a served map region's states"),
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> list[OptionResponse]:
    return [OptionResponse(**o) for o in await list_chapters(session, region)]


@geography_router.get("/states/{state}/counties", response_model=list[GeographyUnitSummary])
async def get_counties_for_state(
    state: str,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> list[GeographyUnitSummary]:
    """County units in a state (name or code), ordered by county."""
    units = await list_counties_by_state(session, state)
    return [GeographyUnitSummary.model_validate(u) for u in units]


@geography_router.get("/units/{unit_id}", response_model=GeographyUnitResponse)
async def get_unit_endpoint(
    unit_id: uuid.UUID,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> GeographyUnitResponse:
    unit = await get_unit(session, unit_id)
    if unit is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Geography unit not found")
    return GeographyUnitResponse.model_validate(unit)


@geography_router.get("/organizations/{org_id}/hierarchy", response_model=GeographyUnitSummary)
async def get_hierarchy_for_organization(
    org_id: uuid.UUID,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> GeographyUnitSummary:
    """Division, region, chapter and county for an organization."""
    unit = await get_organization_hierarchy(session, org_id)
    if unit is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Organization not found or has no county assignment",
        )
    return GeographyUnitSummary.model_validate(unit)
