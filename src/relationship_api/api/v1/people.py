"""People API endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from relationship_api.core.dependencies import get_async_session, get_county_assigner
from relationship_api.schemas.common import PaginationMeta
from relationship_api.schemas.entity import (
    PaginatedPersonResponse,
    PersonCreateRequest,
    PersonResponse,
    PersonUpdateRequest,
    PersonWriteResponse,
)
from relationship_api.services.county_assignment_service import CountyAssigner
from relationship_api.services.entity_service import (
    EntityNotFoundError,
    create_person,
    get_person,
    list_people,
    update_person,
)

people_router = APIRouter(prefix="/people", tags=["people"])


@people_router.post("", response_model=PersonWriteResponse, status_code=status.HTTP_201_CREATED)
async def create_person_endpoint(
    request: PersonCreateRequest,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    assigner: CountyAssigner = Depends(get_county_assigner),  # noqa: B008
) -> PersonWriteResponse:
    """Create a person."""
    try:
        person, job_id = await create_person(session, assigner, request.model_dump())
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    response = PersonWriteResponse.model_validate(person)
    response.county_assignment_job_id = job_id
    return response


@people_router.get("", response_model=PaginatedPersonResponse)
async def list_people_endpoint(
    q: str | None = Query(None, max_length=255, description="Search first name, last name, title or email"),
    org_id: list[uuid.UUID] | None = Query(None, description="Filter by organization (repeatable)"),  # noqa: B008
    title: list[str] | None = Query(None, description="Filter by exact title (repeatable)"),  # noqa: B008
    city: list[str] | None = Query(None, description="Filter by the organization's city (repeatable)"),  # noqa: B008
    state: list[str] | None = Query(None, description="Filter by the organization's state (repeatable)"),  # noqa: B008
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> PaginatedPersonResponse:
    """List people with optional filters."""
    people, total = await list_people(
        session,
        query=q,
        organization_ids=org_id,
        titles=title,
        cities=city,
        states=state,
        page=page,
        page_size=page_size,
    )
    return PaginatedPersonResponse(
        items=[PersonResponse.model_validate(p) for p in people],
        pagination=PaginationMeta.build(page, page_size, total),
    )


@people_router.get("/{person_id}", response_model=PersonResponse)
async def get_person_endpoint(
    person_id: uuid.UUID,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> PersonResponse:
    """Get a person by ID."""
    person = await get_person(session, person_id)
    if person is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Person not found")
    return PersonResponse.model_validate(person)


@people_router.patch("/{person_id}", response_model=PersonWriteResponse)
async def update_person_endpoint(
    person_id: uuid.UUID,
    request: PersonUpdateRequest,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    assigner: CountyAssigner = Depends(get_county_assigner),  # noqa: B008
) -> PersonWriteResponse:
    """Partially update a person."""
    try:
        person, job_id = await update_person(session, assigner, person_id, request.model_dump(exclude_unset=True))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    response = PersonWriteResponse.model_validate(person)
    response.county_assignment_job_id = job_id
    return response
