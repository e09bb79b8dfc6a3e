"""Geography reference service — imports and queries the county hierarchy."""

import re
import uuid
from pathlib import Path

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from relationship_api.lib.geocoder import normalize_state
from relationship_api.lib.geography_loader import parse_geography_csv
from relationship_api.lib.mapping import get_region_config
from relationship_api.models.geography_unit import GeographyUnit
from relationship_api.models.organization import Organization


def option_value(label: str) -> str:
    """Build a select-option value from a label ("Southeast Division" -> "southeast_division")."""
    return re.sub(r"\s+", "_", label.strip().lower())


def _options(labels: list[str]) -> list[dict[str, str]]:
    return [{"value": option_value(label), "label": label} for label in labels]


def load_geography_csv(path: Path | str) -> list[dict[str, str | None]]:
    """Parse a geography CSV export into import records."""
    return parse_geography_csv(Path(path))


async def import_geography_units(session: AsyncSession, records: list[dict]) -> int:
    """Import geography records, upserting by ``geo_id``.

    Args:
        session: Database session.
        records: Dicts keyed by GeographyUnit column name.

    Returns:
        Number of records upserted.
    """
    logger.info(f"Importing {len(records)} geography records")

    upserted = 0
    for rec in records:
        geo_id = rec.get("geo_id")
        if not geo_id:
            continue

        result = await session.execute(select(GeographyUnit).where(GeographyUnit.geo_id == geo_id))
        existing = result.scalar_one_or_none()

        if existing:
            for key, value in rec.items():
                if key not in ("geo_id", "id") and hasattr(existing, key):
                    setattr(existing, key, value)
        else:
            session.add(GeographyUnit(**{k: v for k, v in rec.items() if hasattr(GeographyUnit, k)}))

        upserted += 1

    await session.commit()
    logger.info(f"Upserted {upserted} geography records")
    return upserted


async def _distinct(
    session: AsyncSession,
    column: InstrumentedAttribute[str],
    region: str | None = None,
) -> list[str]:
    query = select(column).distinct().order_by(column)
    if region:
        states = get_region_config(region).states
        if states:
            query = query.where(GeographyUnit.state.in_(states))
    result = await session.execute(query)
    return [value for value in result.scalars().all() if value]


async def list_divisions(session: AsyncSession) -> list[dict[str, str]]:
    """Distinct divisions as ``{value, label}`` options."""
    return _options(await _distinct(session, GeographyUnit.division))


async def list_regions(session: AsyncSession, region: str | None = None) -> list[dict[str, str]]:
    """Distinct regions as options, optionally limited to a served map region's states."""
    return _options(await _distinct(session, GeographyUnit.region, region))


async def list_chapters(session: AsyncSession, region: str | None = None) -> list[dict[str, str]]:
    """Distinct chapters as options, optionally limited to a served map region's states."""
    return _options(await _distinct(session, GeographyUnit.chapter, region))


async def list_counties_by_state(session: AsyncSession, state: str) -> list[GeographyUnit]:
    """All units in a state, ordered by county name."""
    result = await session.execute(
        select(GeographyUnit).where(GeographyUnit.state == normalize_state(state)).order_by(GeographyUnit.county)
    )
    return list(result.scalars().all())


async def get_unit(session: AsyncSession, unit_id: uuid.UUID) -> GeographyUnit | None:
    return await session.get(GeographyUnit, unit_id)


async def get_organization_hierarchy(session: AsyncSession, org_id: uuid.UUID) -> GeographyUnit | None:
    """Return the county unit (carrying chapter, region, division) for an organization.

    Returns:
        The unit, or None when the organization is missing or unassigned.
    """
    result = await session.execute(
        select(GeographyUnit)
        .join(Organization, Organization.county_id == GeographyUnit.id)
        .where(Organization.id == org_id)
    )
    return result.scalar_one_or_none()
