"""Hierarchy resolution — find the county unit containing a geocoded location.

Matching order:

1. Provider county name within the provider state (exact confidence).
2. State derived from the coordinate via the state locator, then the first
   unit in that state (state-fallback confidence).

Nothing is synthesized: no row, no match.
"""

import re
from dataclasses import dataclass
from enum import StrEnum

from loguru import logger
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from relationship_api.lib.geocoder import DEFAULT_STATE_LOCATOR, StateLocator, normalize_state
from relationship_api.models.geography_unit import GeographyUnit

_COUNTY_SUFFIX = re.compile(r"\s+county$", re.IGNORECASE)


class MatchConfidence(StrEnum):
    """How a unit was matched."""

    EXACT = "exact"
    STATE_FALLBACK = "state_fallback"


@dataclass(frozen=True)
class UnitMatch:
    unit: GeographyUnit
    confidence: MatchConfidence


def normalize_county_name(name: str) -> str:
    """Strip a trailing "County" and surrounding whitespace ("Miami-Dade County" -> "Miami-Dade")."""
    return _COUNTY_SUFFIX.sub("", name.strip()).strip()


async def find_unit_by_county_name(session: AsyncSession, county_name: str, state: str) -> GeographyUnit | None:
    """Case-insensitive partial match on the short or long county name within a state.

    Args:
        session: Database session.
        county_name: County name as reported by the geocoder.
        state: State name or code.

    Returns:
        First matching unit ordered by county name, or None.
    """
    raw = county_name.strip()
    clean = normalize_county_name(raw)
    if not clean:
        return None

    result = await session.execute(
        select(GeographyUnit)
        .where(
            GeographyUnit.state == normalize_state(state),
            or_(
                GeographyUnit.county.icontains(clean, autoescape=True),
                GeographyUnit.county_long.icontains(raw, autoescape=True),
            ),
        )
        .order_by(GeographyUnit.county)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def find_first_unit_in_state(session: AsyncSession, state_code: str) -> GeographyUnit | None:
    """Return the first unit (by county name) in a state, or None."""
    result = await session.execute(
        select(GeographyUnit).where(GeographyUnit.state == state_code).order_by(GeographyUnit.county).limit(1)
    )
    return result.scalar_one_or_none()


async def find_unit_match(
    session: AsyncSession,
    latitude: float | None,
    longitude: float | None,
    county_name: str | None = None,
    state_name: str | None = None,
    state_locator: StateLocator = DEFAULT_STATE_LOCATOR,
) -> UnitMatch | None:
    """Find the unit for a geocoded location, reporting how it was matched.

    Args:
        session: Database session.
        latitude: WGS84 latitude of the location.
        longitude: WGS84 longitude of the location.
        county_name: County name from the geocoder, if any.
        state_name: State name or code from the geocoder, if any.
        state_locator: Coordinate-to-state lookup for the fallback tier.

    Returns:
        UnitMatch, or None when neither tier finds a unit.
    """
    if county_name and state_name:
        unit = await find_unit_by_county_name(session, county_name, state_name)
        if unit is not None:
            logger.info(f"Exact hierarchy match: {unit.county}, {unit.state} -> {unit.chapter}")
            return UnitMatch(unit, MatchConfidence.EXACT)

    if latitude is None or longitude is None:
        return None

    state_code = state_locator.locate(latitude, longitude)
    if state_code is None:
        logger.debug(f"No state contains ({latitude}, {longitude})")
        return None

    unit = await find_first_unit_in_state(session, state_code)
    if unit is None:
        return None

    logger.warning(
        f"Low-confidence hierarchy match: first unit in {state_code} ({unit.county}) "
        f"for county {county_name!r}"
    )
    return UnitMatch(unit, MatchConfidence.STATE_FALLBACK)


async def find_unit(
    session: AsyncSession,
    latitude: float | None,
    longitude: float | None,
    county_name: str | None = None,
    state_name: str | None = None,
    state_locator: StateLocator = DEFAULT_STATE_LOCATOR,
) -> GeographyUnit | None:
    """Like ``find_unit_match`` but returns only the unit."""
    match = await find_unit_match(session, latitude, longitude, county_name, state_name, state_locator)
    return match.unit if match is not None else None
