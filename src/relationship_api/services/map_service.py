"""Map service — loads entities and aggregates them into markers and a viewport."""

import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger
from sqlalchemy import ColumnElement, select
from sqlalchemy.ext.asyncio import AsyncSession

from relationship_api.core.config import Settings
from relationship_api.lib.geocoder import CoordinateResolver, normalize_state
from relationship_api.lib.mapping import (
    DisplayMode,
    MapMarker,
    RegionMapConfig,
    Viewport,
    build_markers,
    fit_viewport,
    get_city_coordinates,
    get_region_config,
)
from relationship_api.models.organization import Organization
from relationship_api.models.person import Person
from relationship_api.services.entity_service import organization_filters


@dataclass
class MapView:
    region: RegionMapConfig
    display_mode: DisplayMode
    markers: list[MapMarker]
    viewport: Viewport


async def _load_entities(
    session: AsyncSession,
    region: RegionMapConfig,
    conditions: Sequence[ColumnElement[bool]] = (),
) -> tuple[list[Organization], list[Person]]:
    result = await session.execute(
        select(Organization).where(*conditions).order_by(Organization.name, Organization.id)
    )
    orgs = [
        org
        for org in result.scalars().all()
        if region.covers_state(normalize_state(org.state) if org.state else None)
    ]
    if not orgs:
        return [], []

    people_result = await session.execute(
        select(Person).where(Person.org_id.in_([org.id for org in orgs])).order_by(Person.last_name, Person.id)
    )
    return orgs, list(people_result.scalars().all())


async def build_map(
    session: AsyncSession,
    resolver: CoordinateResolver,
    settings: Settings,
    display_mode: DisplayMode | str = DisplayMode.BOTH,
    region: str | None = None,
    selected_org_id: uuid.UUID | None = None,
    query: str | None = None,
    cities: Sequence[str] | None = None,
    states: Sequence[str] | None = None,
    statuses: Sequence[str] | None = None,
) -> MapView:
    """Build markers and a viewport for the organizations in a region.

    The organization search filters narrow the set first; people follow
    their organizations.

    Organization cities are resolved through the coordinate resolver
    (cache, static table, then providers); anything it cannot place falls
    back to the region's static city table.

    Args:
        session: Database session.
        resolver: Coordinate resolver.
        settings: Application settings (batch delay, zoom, padding).
        display_mode: Which entity collections to show.
        region: Region code; unknown or missing means NATIONAL.
        selected_org_id: Currently selected organization, if any.
        query: Organization name substring filter.
        cities: Organization city filter.
        states: Organization state filter (codes or names).
        statuses: Organization status filter.

    Returns:
        MapView with markers and the fitted viewport.
    """
    mode = DisplayMode(display_mode)
    region_config = get_region_config(region or settings.map_default_region)
    conditions = organization_filters(query=query, cities=cities, states=states, statuses=statuses)
    orgs, people = await _load_entities(session, region_config, conditions)

    pairs = [(org.city, org.state) for org in orgs if org.city and org.state]
    resolved = await resolver.batch_resolve(pairs, delay=settings.geocoder_batch_delay_seconds)

    def lookup(city: str, state: str | None) -> tuple[float, float] | None:
        coordinate = resolved.get((city, state)) if state else None
        if coordinate is not None:
            return coordinate.position
        return get_city_coordinates(city, region_config.code)

    markers = build_markers(orgs, people, mode, lookup, selected_organization_id=selected_org_id)
    viewport = fit_viewport(
        markers,
        default_center=region_config.center,
        default_zoom=region_config.zoom,
        city_zoom=settings.map_city_zoom,
        padding=settings.map_bounds_padding,
    )
    logger.debug(f"Built {len(markers)} markers for {len(orgs)} organizations in {region_config.code}")
    return MapView(region=region_config, display_mode=mode, markers=markers, viewport=viewport)
