"""Geocoding API endpoints.

GET  /geocoding/resolve         — City/state to coordinate
GET  /geocoding/address         — Full address to coordinate, county breakdown and unit
POST /geocoding/backfill        — Queue the county backfill
GET  /geocoding/jobs/{job_id}   — Background job status
GET  /geocoding/cache           — Coordinate cache statistics
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from relationship_api.core.background import QueuedTaskRunner, QueueFullError
from relationship_api.core.dependencies import (
    get_async_session,
    get_coordinate_resolver,
    get_county_assigner,
    get_task_runner,
)
from relationship_api.lib.geocoder import CoordinateResolver
from relationship_api.schemas.geocoding import (
    AddressResolutionResponse,
    BackfillRequest,
    BackgroundJobResponse,
    CacheStatsResponse,
    CoordinateResponse,
)
from relationship_api.schemas.geography import GeographyUnitSummary
from relationship_api.services.county_assignment_service import CountyAssigner
from relationship_api.services.hierarchy_service import find_unit_match

geocoding_router = APIRouter(prefix="/geocoding", tags=["geocoding"])


@geocoding_router.get("/resolve", response_model=CoordinateResponse)
async def resolve_city(
    city: str = Query(..., min_length=1, max_length=100),
    state: str = Query(..., min_length=2, max_length=50),
    resolver: CoordinateResolver = Depends(get_coordinate_resolver),  # noqa: B008
) -> CoordinateResponse:
    """Resolve a city and state to coordinates (cached)."""
    coordinate = await resolver.resolve(city, state)
    if coordinate is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Could not resolve coordinates for {city}, {state}",
        )
    return CoordinateResponse(
        city=city,
        state=state,
        latitude=coordinate.latitude,
        longitude=coordinate.longitude,
        display_name=coordinate.display_name,
    )


@geocoding_router.get("/address", response_model=AddressResolutionResponse)
async def resolve_address(
    address: str = Query(..., min_length=1, max_length=500),
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    resolver: CoordinateResolver = Depends(get_coordinate_resolver),  # noqa: B008
    assigner: CountyAssigner = Depends(get_county_assigner),  # noqa: B008
) -> AddressResolutionResponse:
    """Geocode a free-text address and find its county unit."""
    resolution = await resolver.resolve_address(address)
    if resolution is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Address could not be geocoded",
        )

    coordinate = resolution.coordinate
    match = await find_unit_match(
        session,
        coordinate.latitude,
        coordinate.longitude,
        resolution.county,
        resolution.state,
        assigner.state_locator,
    )
    return AddressResolutionResponse(
        address=address,
        latitude=coordinate.latitude,
        longitude=coordinate.longitude,
        display_name=coordinate.display_name,
        county=resolution.county,
        state=resolution.state,
        city=resolution.city,
        provider=resolution.provider,
        unit=GeographyUnitSummary.model_validate(match.unit) if match else None,
        match_confidence=match.confidence.value if match else None,
    )


@geocoding_router.post("/backfill", response_model=BackgroundJobResponse, status_code=status.HTTP_202_ACCEPTED)
async def trigger_backfill(
    request: BackfillRequest,
    assigner: CountyAssigner = Depends(get_county_assigner),  # noqa: B008
    task_runner: QueuedTaskRunner = Depends(get_task_runner),  # noqa: B008
) -> BackgroundJobResponse:
    """Queue a county backfill for every entity with a city but no county."""
    try:
        job_id = task_runner.submit_task(
            assigner.run_backfill, request.kinds, request.delay_seconds, name="county-backfill"
        )
    except QueueFullError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
    return BackgroundJobResponse(job_id=job_id, status=task_runner.get_status(job_id))


@geocoding_router.get("/jobs/{job_id}", response_model=BackgroundJobResponse)
async def get_job_status(
    job_id: str,
    task_runner: QueuedTaskRunner = Depends(get_task_runner),  # noqa: B008
) -> BackgroundJobResponse:
    """Get the status of a background job."""
    try:
        job_status = task_runner.get_status(job_id)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Background job not found") from None
    return BackgroundJobResponse(job_id=job_id, status=job_status, error=task_runner.get_error(job_id))


@geocoding_router.get("/cache", response_model=CacheStatsResponse)
async def get_cache_stats(
    resolver: CoordinateResolver = Depends(get_coordinate_resolver),  # noqa: B008
) -> CacheStatsResponse:
    """Get coordinate cache statistics and the active provider chain."""
    return CacheStatsResponse(**resolver.cache.stats(), providers=resolver.provider_names)
