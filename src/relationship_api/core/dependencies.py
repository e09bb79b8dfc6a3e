"""FastAPI dependency injection and application service wiring.

Long-lived collaborators (coordinate cache, resolver, background runner,
county assigner) are built once per process by ``build_app_services`` and
kept on ``app.state``; request handlers reach them through the dependencies
below.
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from datetime import timedelta

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from relationship_api.core.background import QueuedTaskRunner
from relationship_api.core.config import Settings
from relationship_api.core.database import get_session_factory
from relationship_api.lib.geocoder import (
    DEFAULT_STATE_LOCATOR,
    CoordinateCache,
    CoordinateResolver,
    get_configured_providers,
)
from relationship_api.services.county_assignment_service import CountyAssigner


@dataclass
class AppServices:
    """Process-wide collaborators shared by the API and the CLI."""

    cache: CoordinateCache
    resolver: CoordinateResolver
    task_runner: QueuedTaskRunner
    assigner: CountyAssigner


def build_app_services(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> AppServices:
    """Construct the cache, resolver, background runner, and county assigner from settings."""
    cache = CoordinateCache(ttl=timedelta(days=settings.geocoder_cache_ttl_days))
    resolver = CoordinateResolver(
        get_configured_providers(settings),
        cache,
        batch_delay=settings.geocoder_batch_delay_seconds,
    )
    task_runner = QueuedTaskRunner(
        max_queue_size=settings.background_queue_size,
        workers=settings.background_workers,
        max_attempts=settings.background_max_attempts,
        max_history=settings.background_job_history,
    )
    assigner = CountyAssigner(
        resolver,
        session_factory,
        task_runner,
        state_locator=DEFAULT_STATE_LOCATOR,
        backfill_delay=settings.geocoder_backfill_delay_seconds,
        min_delay=resolver.rate_limit_delay,
    )
    return AppServices(cache=cache, resolver=resolver, task_runner=task_runner, assigner=assigner)


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


def get_app_services(request: Request) -> AppServices:
    return request.app.state.services


def get_coordinate_resolver(request: Request) -> CoordinateResolver:
    return get_app_services(request).resolver


def get_county_assigner(request: Request) -> CountyAssigner:
    return get_app_services(request).assigner


def get_task_runner(request: Request) -> QueuedTaskRunner:
    return get_app_services(request).task_runner
