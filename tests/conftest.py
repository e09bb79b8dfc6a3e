"""Shared test fixtures for settings, the async database, sessions, and reference geography."""

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from relationship_api.core.config import Settings
from relationship_api.models.base import Base
from relationship_api.models.geography_unit import GeographyUnit


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        geocoder_batch_delay_seconds=0,
        geocoder_backfill_delay_seconds=0,
    )


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine for testing.

    StaticPool keeps one connection so sessions opened by background jobs
    see the same database as the test session.
    """
    engine = create_async_engine("sqlite+aiosqlite://", echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    async with session_factory() as session:
        yield session


def _make_unit(**overrides: str) -> GeographyUnit:
    """Build a GeographyUnit with plausible defaults."""
    values = {
        "geo_id": "12086",
        "county": "Miami-Dade",
        "county_long": "Miami-Dade County",
        "state": "FL",
        "division": "Southeast and Caribbean",
        "division_code": "D05",
        "region": "South Florida",
        "region_code": "R51",
        "chapter": "Greater Miami and The Keys",
        "chapter_code": "E123",
    }
    values.update(overrides)
    return GeographyUnit(**values)


@pytest.fixture
async def geography_units(async_session: AsyncSession) -> dict[str, GeographyUnit]:
    """Seed a small county reference: three Florida counties, one Nebraska, one Iowa."""
    units = {
        "miami_dade": _make_unit(),
        "broward": _make_unit(
            geo_id="12011",
            county="Broward",
            county_long="Broward County",
            chapter="Broward County",
            chapter_code="E124",
        ),
        "orange": _make_unit(
            geo_id="12095",
            county="Orange",
            county_long="Orange County",
            region="North Florida",
            region_code="R52",
            chapter="Central Florida",
            chapter_code="E130",
        ),
        "douglas": _make_unit(
            geo_id="31055",
            county="Douglas",
            county_long="Douglas County",
            state="NE",
            division="North Central",
            division_code="D03",
            region="Nebraska and Southwest Iowa",
            region_code="R31",
            chapter="Heartland",
            chapter_code="E310",
        ),
        "polk": _make_unit(
            geo_id="19153",
            county="Polk",
            county_long="Polk County",
            state="IA",
            division="North Central",
            division_code="D03",
            region="Iowa",
            region_code="R32",
            chapter="Central Iowa",
            chapter_code="E320",
        ),
    }
    async_session.add_all(units.values())
    await async_session.commit()
    return units


@pytest.fixture
def unit_factory():
    """Factory for unsaved GeographyUnit rows."""
    return _make_unit
