"""County assignment for organizations and people.

Write paths first try a cheap synchronous match of the entity's city against
county names. When that misses, the entity is saved unresolved and a
background job geocodes its address, finds the containing unit, and sets
``county_id`` with a compare-and-set update, so an existing assignment is
never overwritten.
"""

import asyncio
import uuid
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from loguru import logger
from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from relationship_api.core.background import BackgroundTaskRunner, QueueFullError
from relationship_api.core.database import session_scope
from relationship_api.lib.geocoder import (
    DEFAULT_STATE_LOCATOR,
    Coordinate,
    CoordinateResolver,
    Locatable,
    StateLocator,
    build_address_string,
    locatable_address,
    normalize_state,
)
from relationship_api.models.geography_unit import GeographyUnit
from relationship_api.models.organization import Organization
from relationship_api.models.person import Person
from relationship_api.services.hierarchy_service import MatchConfidence, find_unit_match

DEFAULT_BACKFILL_DELAY = 1.0


class EntityKind(StrEnum):
    ORGANIZATION = "organization"
    PERSON = "person"


_MODELS: dict[EntityKind, type[Organization] | type[Person]] = {
    EntityKind.ORGANIZATION: Organization,
    EntityKind.PERSON: Person,
}


class AssignmentReason(StrEnum):
    """Why an assignment attempt did not set a county."""

    ALREADY_ASSIGNED = "already_assigned"
    NO_ADDRESS = "no_address"
    UNRESOLVED = "unresolved"
    NO_MATCHING_UNIT = "no_matching_unit"


@dataclass
class AssignmentResult:
    success: bool
    unit: GeographyUnit | None = None
    confidence: MatchConfidence | None = None
    coordinate: Coordinate | None = None
    reason: AssignmentReason | None = None


@dataclass
class BackfillSummary:
    processed: int = 0
    succeeded: int = 0
    failed: list[str] = field(default_factory=list)


def entity_kind(entity: Organization | Person) -> EntityKind:
    return EntityKind.ORGANIZATION if isinstance(entity, Organization) else EntityKind.PERSON


def failure_label(entity: Organization | Person) -> str:
    """Human-readable identifier used in backfill failure lists: ``"Name (City, ST)"``."""
    return f"{entity.display_name} ({entity.city or ''}, {entity.state or ''})"


class CountyAssigner:
    """Resolves and persists ``county_id`` for Locatable entities.

    Args:
        resolver: Coordinate resolver used for address geocoding.
        session_factory: Factory for the background job's own sessions.
        task_runner: Queue the background pipeline is submitted to.
        state_locator: Coordinate-to-state lookup for the fallback tier.
        backfill_delay: Default pause between entities during a backfill.
        min_delay: Floor for every pause between provider calls (the provider
            chain's rate limit); caller-supplied delays never go below it.
        sleep: Awaitable pause (injectable for tests).
    """

    def __init__(
        self,
        resolver: CoordinateResolver,
        session_factory: async_sessionmaker[AsyncSession] | None,
        task_runner: BackgroundTaskRunner,
        state_locator: StateLocator = DEFAULT_STATE_LOCATOR,
        backfill_delay: float = DEFAULT_BACKFILL_DELAY,
        min_delay: float = 0.0,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._resolver = resolver
        self._session_factory = session_factory
        self._task_runner = task_runner
        self._state_locator = state_locator
        self._backfill_delay = backfill_delay
        self._min_delay = min_delay
        self._sleep = sleep

    @property
    def task_runner(self) -> BackgroundTaskRunner:
        return self._task_runner

    @property
    def min_delay(self) -> float:
        return self._min_delay

    @property
    def state_locator(self) -> StateLocator:
        return self._state_locator

    async def find_direct_match(self, session: AsyncSession, city: str, state: str) -> GeographyUnit | None:
        """Match a city name against county names within a state (single query).

        Args:
            session: Database session.
            city: City as entered by the owner.
            state: State name or code.

        Returns:
            First unit whose short or long county name equals the city
            (case-insensitive), or None.
        """
        name = " ".join(city.split()).lower()
        if not name:
            return None
        result = await session.execute(
            select(GeographyUnit)
            .where(
                GeographyUnit.state == normalize_state(state),
                or_(func.lower(GeographyUnit.county) == name, func.lower(GeographyUnit.county_long) == name),
            )
            .order_by(GeographyUnit.county)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def prepare(self, session: AsyncSession, entity: Locatable) -> bool:
        """Set ``county_id`` in memory from the direct match, before the entity is committed.

        Returns:
            True when a unit was matched and assigned.
        """
        if entity.county_id is not None or not entity.city or not entity.state:
            return False
        unit = await self.find_direct_match(session, entity.city, entity.state)
        if unit is None:
            return False
        entity.county_id = unit.id
        logger.info(f"Direct county match for {entity.city}, {entity.state} -> {unit.county}")
        return True

    def needs_geocoding(self, entity: Locatable) -> bool:
        """Whether an entity is unresolved but has something to geocode."""
        return entity.county_id is None and bool(locatable_address(entity))

    def schedule(self, kind: EntityKind | str, entity_id: uuid.UUID) -> str | None:
        """Queue the background pipeline for an already-committed entity.

        Returns:
            The background job ID, or None when the queue is full (the entity
            stays unresolved until the next backfill).
        """
        kind = EntityKind(kind)
        try:
            job_id = self._task_runner.submit_task(
                self.run_background, kind, entity_id, name=f"assign-county:{kind}:{entity_id}"
            )
        except QueueFullError as e:
            logger.warning(f"Could not queue county assignment for {kind} {entity_id}: {e}")
            return None
        logger.debug(f"Queued county assignment job {job_id} for {kind} {entity_id}")
        return job_id

    async def assign_county(
        self,
        session: AsyncSession,
        entity: Organization | Person,
        pause: float = 0.0,
    ) -> AssignmentResult:
        """Geocode an entity's address and set its county if still unset.

        Tries the full address first, then the bare city and state, waiting
        ``pause`` seconds (at least the provider rate limit) between the two
        provider calls. The write is conditional on ``county_id IS NULL``;
        organizations also get latitude/longitude when they have none.

        Returns:
            AssignmentResult describing the outcome. Never raises for
            unresolved addresses.
        """
        if entity.county_id is not None:
            return AssignmentResult(success=False, reason=AssignmentReason.ALREADY_ASSIGNED)

        address = locatable_address(entity)
        if not address:
            return AssignmentResult(success=False, reason=AssignmentReason.NO_ADDRESS)

        resolution = await self._resolver.resolve_address(address)
        city_only = build_address_string(city=entity.city, state=entity.state)
        if resolution is None and city_only and city_only != address:
            gap = max(pause, self._min_delay)
            if gap > 0:
                await self._sleep(gap)
            resolution = await self._resolver.resolve_address(city_only)
        if resolution is None:
            logger.info(f"Could not geocode {entity_kind(entity)} {entity.id}")
            return AssignmentResult(success=False, reason=AssignmentReason.UNRESOLVED)

        coordinate = resolution.coordinate
        match = await find_unit_match(
            session,
            coordinate.latitude,
            coordinate.longitude,
            resolution.county,
            resolution.state or entity.state,
            self._state_locator,
        )
        if match is None:
            return AssignmentResult(success=False, coordinate=coordinate, reason=AssignmentReason.NO_MATCHING_UNIT)

        model = _MODELS[entity_kind(entity)]
        result = await session.execute(
            update(model).where(model.id == entity.id, model.county_id.is_(None)).values(county_id=match.unit.id)
        )
        if isinstance(entity, Organization):
            await session.execute(
                update(Organization)
                .where(Organization.id == entity.id, Organization.latitude.is_(None))
                .values(latitude=coordinate.latitude, longitude=coordinate.longitude)
            )
        await session.commit()

        if result.rowcount == 0:
            logger.info(f"{entity_kind(entity)} {entity.id} was assigned concurrently; leaving it unchanged")
            return AssignmentResult(
                success=False,
                confidence=match.confidence,
                coordinate=coordinate,
                reason=AssignmentReason.ALREADY_ASSIGNED,
            )

        logger.info(
            f"Assigned {entity_kind(entity)} {entity.id} to {match.unit.county}, {match.unit.state} "
            f"({match.confidence})"
        )
        return AssignmentResult(success=True, unit=match.unit, confidence=match.confidence, coordinate=coordinate)

    async def run_background(self, kind: EntityKind | str, entity_id: uuid.UUID) -> AssignmentResult | None:
        """Background job body: load the entity in a fresh session and assign it."""
        model = _MODELS[EntityKind(kind)]
        async with session_scope(self._session_factory) as session:
            entity = await session.get(model, entity_id)
            if entity is None:
                logger.warning(f"Background county assignment: {kind} {entity_id} no longer exists")
                return None
            result = await self.assign_county(session, entity)

        if not result.success:
            logger.info(f"Background county assignment for {kind} {entity_id} left unresolved: {result.reason}")
        return result

    async def backfill(
        self,
        session: AsyncSession,
        kinds: Iterable[EntityKind | str] = (EntityKind.ORGANIZATION, EntityKind.PERSON),
        delay: float | None = None,
    ) -> BackfillSummary:
        """Assign counties to every entity with a city but no county.

        Pauses ``delay`` seconds between entities, and between the address and
        city-only attempts for one entity, so no two provider calls run back to
        back. The pause never drops below the provider rate limit.

        Returns:
            BackfillSummary with counts and ``"Name (City, ST)"`` failure labels.
        """
        pause = max(self._backfill_delay if delay is None else delay, self._min_delay)
        summary = BackfillSummary()

        for kind in kinds:
            model = _MODELS[EntityKind(kind)]
            result = await session.execute(
                select(model)
                .where(model.county_id.is_(None), model.city.is_not(None), model.city != "")
                .order_by(model.created_at, model.id)
            )
            entities = list(result.scalars().all())
            logger.info(f"Backfilling counties for {len(entities)} {EntityKind(kind)} records")

            for entity in entities:
                if summary.processed and pause > 0:
                    await self._sleep(pause)
                label = failure_label(entity)
                outcome = await self.assign_county(session, entity, pause)
                summary.processed += 1
                if outcome.success:
                    summary.succeeded += 1
                else:
                    summary.failed.append(label)
                    logger.debug(f"Backfill could not assign {label}: {outcome.reason}")

        logger.info(
            f"County backfill completed: {summary.processed} processed, {summary.succeeded} succeeded, "
            f"{len(summary.failed)} failed"
        )
        return summary

    async def run_backfill(
        self,
        kinds: Iterable[EntityKind | str] = (EntityKind.ORGANIZATION, EntityKind.PERSON),
        delay: float | None = None,
    ) -> BackfillSummary:
        """Background job body for a backfill: runs ``backfill`` in its own session."""
        async with session_scope(self._session_factory) as session:
            return await self.backfill(session, kinds, delay)
