"""Organization and person read and write paths.

Writes drive county assignment; reads support the filtered, paginated
listings and the map.
"""

import uuid
from collections.abc import Sequence

from loguru import logger
from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from relationship_api.lib.geocoder.states import state_variants
from relationship_api.models.organization import Organization
from relationship_api.models.person import Person
from relationship_api.services.county_assignment_service import CountyAssigner, EntityKind

_ADDRESS_FIELDS: frozenset[str] = frozenset({"address", "city", "state", "zip"})
_LOCATABLE_FIELDS: frozenset[str] = _ADDRESS_FIELDS | {"county_id"}

# Fields that may be set through create/update.  Anything else in the payload
# is ignored, so ``id`` and timestamps cannot be mass-assigned.
_ORGANIZATION_FIELDS: frozenset[str] = _LOCATABLE_FIELDS | {
    "name",
    "description",
    "status",
    "website",
    "phone",
    "latitude",
    "longitude",
}
_PERSON_FIELDS: frozenset[str] = _LOCATABLE_FIELDS | {
    "org_id",
    "first_name",
    "last_name",
    "title",
    "email",
    "phone",
    "notes",
}


class EntityNotFoundError(LookupError):
    """Raised when an organization or person ID does not exist."""

    def __init__(self, kind: str, entity_id: uuid.UUID) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.capitalize()} {entity_id} not found")


async def get_organization(session: AsyncSession, org_id: uuid.UUID) -> Organization | None:
    return await session.get(Organization, org_id)


async def get_person(session: AsyncSession, person_id: uuid.UUID) -> Person | None:
    return await session.get(Person, person_id)


def organization_filters(
    *,
    query: str | None = None,
    cities: Sequence[str] | None = None,
    states: Sequence[str] | None = None,
    statuses: Sequence[str] | None = None,
) -> list[ColumnElement[bool]]:
    """SQL conditions for the organization search filters.

    Args:
        query: Case-insensitive substring of the organization name.
        cities: City names; matched case-insensitively, ignoring extra whitespace.
        states: State codes or names; rows stored either way match.
        statuses: Exact status values.

    Returns:
        Conditions to AND together. Empty or blank filters add nothing.
    """
    conditions: list[ColumnElement[bool]] = []
    if query and query.strip():
        conditions.append(Organization.name.icontains(query.strip(), autoescape=True))
    city_names = [" ".join(c.split()).lower() for c in cities or () if c and c.strip()]
    if city_names:
        conditions.append(func.lower(func.trim(Organization.city)).in_(city_names))
    state_names = set().union(*(state_variants(s) for s in states or () if s and s.strip()))
    if state_names:
        conditions.append(func.upper(func.trim(Organization.state)).in_(sorted(state_names)))
    if statuses:
        conditions.append(Organization.status.in_(list(statuses)))
    return conditions


async def list_organizations(
    session: AsyncSession,
    *,
    query: str | None = None,
    cities: Sequence[str] | None = None,
    states: Sequence[str] | None = None,
    statuses: Sequence[str] | None = None,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Organization], int]:
    """List organizations, most recently updated first.

    Returns:
        Tuple of (organizations, total count).
    """
    conditions = organization_filters(query=query, cities=cities, states=states, statuses=statuses)
    total = (await session.execute(select(func.count(Organization.id)).where(*conditions))).scalar_one()
    result = await session.execute(
        select(Organization)
        .where(*conditions)
        .order_by(Organization.updated_at.desc(), Organization.name, Organization.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return list(result.scalars().all()), total


async def list_people(
    session: AsyncSession,
    *,
    query: str | None = None,
    organization_ids: Sequence[uuid.UUID] | None = None,
    titles: Sequence[str] | None = None,
    cities: Sequence[str] | None = None,
    states: Sequence[str] | None = None,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Person], int]:
    """List people, most recently updated first.

    ``query`` matches first name, last name, title or email. ``cities`` and
    ``states`` filter on the person's organization, so people without one
    are excluded when either is given.

    Returns:
        Tuple of (people, total count).
    """
    conditions: list[ColumnElement[bool]] = []
    if query and query.strip():
        needle = query.strip()
        conditions.append(
            or_(
                Person.first_name.icontains(needle, autoescape=True),
                Person.last_name.icontains(needle, autoescape=True),
                Person.title.icontains(needle, autoescape=True),
                Person.email.icontains(needle, autoescape=True),
            )
        )
    if organization_ids:
        conditions.append(Person.org_id.in_(list(organization_ids)))
    if titles:
        conditions.append(Person.title.in_(list(titles)))
    org_conditions = organization_filters(cities=cities, states=states)
    if org_conditions:
        conditions.append(Person.org_id.in_(select(Organization.id).where(*org_conditions)))

    total = (await session.execute(select(func.count(Person.id)).where(*conditions))).scalar_one()
    result = await session.execute(
        select(Person)
        .where(*conditions)
        .order_by(Person.updated_at.desc(), Person.last_name, Person.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return list(result.scalars().all()), total


async def list_organization_people(session: AsyncSession, org_id: uuid.UUID) -> list[Person]:
    """People belonging to an organization, by last then first name.

    Raises:
        EntityNotFoundError: If the organization does not exist.
    """
    if await get_organization(session, org_id) is None:
        raise EntityNotFoundError("organization", org_id)
    result = await session.execute(
        select(Person).where(Person.org_id == org_id).order_by(Person.last_name, Person.first_name, Person.id)
    )
    return list(result.scalars().all())


async def _save(
    session: AsyncSession,
    assigner: CountyAssigner,
    entity: Organization | Person,
    kind: EntityKind,
    *,
    explicit_county: bool,
    location_changed: bool = True,
) -> str | None:
    """Direct-match, commit, then queue geocoding if still unresolved.

    The workflow is skipped when the county was supplied explicitly or, on
    update, when no address field changed value.

    Returns:
        Background job ID when geocoding was queued.
    """
    run_workflow = location_changed and not explicit_county
    if run_workflow:
        await assigner.prepare(session, entity)
    await session.commit()
    await session.refresh(entity)

    if not run_workflow or not assigner.needs_geocoding(entity):
        return None
    # Scheduled only after the commit above, so the job always sees the row
    return assigner.schedule(kind, entity.id)


def _apply(entity: Organization | Person, data: dict, allowed: frozenset[str]) -> bool:
    """Set allowlisted fields on ``entity``; True when an address field changed value."""
    location_changed = False
    for field_name, value in data.items():
        if field_name not in allowed:
            continue
        if field_name in _ADDRESS_FIELDS and getattr(entity, field_name) != value:
            location_changed = True
        setattr(entity, field_name, value)
    return location_changed


async def create_organization(
    session: AsyncSession,
    assigner: CountyAssigner,
    data: dict,
) -> tuple[Organization, str | None]:
    """Create an organization and resolve its county.

    Args:
        session: Database session.
        assigner: County assigner for the direct match and background geocoding.
        data: Field values. Only allowlisted fields are applied.

    Returns:
        Tuple of (organization, background job ID or None).
    """
    org = Organization(**{k: v for k, v in data.items() if k in _ORGANIZATION_FIELDS})
    session.add(org)
    explicit = data.get("county_id") is not None
    job_id = await _save(session, assigner, org, EntityKind.ORGANIZATION, explicit_county=explicit)
    logger.info(f"Created organization {org.id} ({org.name})")
    return org, job_id


async def update_organization(
    session: AsyncSession,
    assigner: CountyAssigner,
    org_id: uuid.UUID,
    data: dict,
) -> tuple[Organization, str | None]:
    """Update an organization. An explicit ``county_id`` in ``data`` skips county assignment,
    and so does an update that leaves address, city, state and zip unchanged.

    Raises:
        EntityNotFoundError: If the organization does not exist.
    """
    org = await get_organization(session, org_id)
    if org is None:
        raise EntityNotFoundError("organization", org_id)

    moved = _apply(org, data, _ORGANIZATION_FIELDS)
    job_id = await _save(
        session,
        assigner,
        org,
        EntityKind.ORGANIZATION,
        explicit_county="county_id" in data,
        location_changed=moved,
    )
    logger.info(f"Updated organization {org.id}")
    return org, job_id


async def create_person(
    session: AsyncSession,
    assigner: CountyAssigner,
    data: dict,
) -> tuple[Person, str | None]:
    """Create a person and resolve their county.

    Raises:
        EntityNotFoundError: If ``org_id`` references a missing organization.
    """
    org_id = data.get("org_id")
    if org_id is not None and await get_organization(session, org_id) is None:
        raise EntityNotFoundError("organization", org_id)

    person = Person(**{k: v for k, v in data.items() if k in _PERSON_FIELDS})
    session.add(person)
    explicit = data.get("county_id") is not None
    job_id = await _save(session, assigner, person, EntityKind.PERSON, explicit_county=explicit)
    logger.info(f"Created person {person.id}")
    return person, job_id


async def update_person(
    session: AsyncSession,
    assigner: CountyAssigner,
    person_id: uuid.UUID,
    data: dict,
) -> tuple[Person, str | None]:
    """Update a person. An explicit ``county_id`` in ``data`` skips county assignment,
    and so does an update that leaves address, city, state and zip unchanged.

    Raises:
        EntityNotFoundError: If the person (or a new ``org_id``) does not exist.
    """
    person = await get_person(session, person_id)
    if person is None:
        raise EntityNotFoundError("person", person_id)
    new_org_id = data.get("org_id")
    if new_org_id is not None and await get_organization(session, new_org_id) is None:
        raise EntityNotFoundError("organization", new_org_id)

    moved = _apply(person, data, _PERSON_FIELDS)
    job_id = await _save(
        session,
        assigner,
        person,
        EntityKind.PERSON,
        explicit_county="county_id" in data,
        location_changed=moved,
    )
    logger.info(f"Updated person {person.id}")
    return person, job_id
