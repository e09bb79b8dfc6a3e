"""Organization API endpoints.

Create and update resolve the organization's county: a direct city match
before the write, otherwise a queued background geocode after it. The list
endpoint filters by name, city, state and status, newest updates first.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from relationship_api.core.dependencies import get_async_session, get_county_assigner
from relationship_api.schemas.common import PaginationMeta
from relationship_api.schemas.entity import (
    OrganizationCreateRequest,
    OrganizationResponse,
    OrganizationStatusLiteral,
    OrganizationUpdateRequest,
    OrganizationWriteResponse,
    PaginatedOrganizationResponse,
    PersonResponse,
)
from relationship_api.services.county_assignment_service import CountyAssigner
from relationship_api.services.entity_service import (
    EntityNotFoundError,
    create_organization,
    get_organization,
    list_organization_people,
    list_organizations,
    update_organization,
)

organizations_router = APIRouter(prefix="/organizations", tags=["organizations"])


@organizations_router.post("", response_model=OrganizationWriteResponse, status_code=status.HTTP_201_CREATED)
async def create_organization_endpoint(
    request: OrganizationCreateRequest,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    assigner: CountyAssigner = Depends(get_county_assigner),  # noqa: B008
) -> OrganizationWriteResponse:
    """Create an organization."""
    org, job_id = await create_organization(session, assigner, request.model_dump())
    response = OrganizationWriteResponse.model_validate(org)
    response.county_assignment_job_id = job_id
    return response


@organizations_router.get("", response_model=PaginatedOrganizationResponse)
async def list_organizations_endpoint(
    q: str | None = Query(None, max_length=255, description="Case-insensitive name search"),
    city: list[str] | None = Query(None, description="Filter by city (repeatable)"),  # noqa: B008
    state: list[str] | None = Query(None, description="Filter by state code or name (repeatable)"),  # noqa: B008
    org_status: list[OrganizationStatusLiteral] | None = Query(  # noqa: B008
        None, alias="status", description="Filter by status (repeatable)"
    ),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> PaginatedOrganizationResponse:
    """List organizations with optional filters."""
    orgs, total = await list_organizations(
        session,
        query=q,
        cities=city,
        states=state,
        statuses=org_status,
        page=page,
        page_size=page_size,
    )
    return PaginatedOrganizationResponse(
        items=[OrganizationResponse.model_validate(o) for o in orgs],
        pagination=PaginationMeta.build(page, page_size, total),
    )


@organizations_router.get("/{org_id}/people", response_model=list[PersonResponse])
async def list_organization_people_endpoint(
    org_id: uuid.UUID,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> list[PersonResponse]:
    """People belonging to an organization."""
    try:
        people = await list_organization_people(session, org_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return [PersonResponse.model_validate(p) for p in people]


@organizations_router.get("/{org_id}", response_model=OrganizationResponse)
async def get_organization_endpoint(
    org_id: uuid.UUID,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> OrganizationResponse:
    """Get an organization by ID."""
    org = await get_organization(session, org_id)
    if org is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found")
    return OrganizationResponse.model_validate(org)


@organizations_router.patch("/{org_id}", response_model=OrganizationWriteResponse)
async def update_organization_endpoint(
    org_id: uuid.UUID,
    request: OrganizationUpdateRequest,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    assigner: CountyAssigner = Depends(get_county_assigner),  # noqa: B008
) -> OrganizationWriteResponse:
    """Partially update an organization."""
    try:
        org, job_id = await update_organization(session, assigner, org_id, request.model_dump(exclude_unset=True))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    response = OrganizationWriteResponse.model_validate(org)
    response.county_assignment_job_id = job_id
    return response
