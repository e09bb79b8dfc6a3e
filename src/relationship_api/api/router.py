"""Root API router with /api/v1 prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from relationship_api.api.middleware import setup_cors
from relationship_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from relationship_api.api.v1.geocoding import geocoding_router
    from relationship_api.api.v1.geography import geography_router
    from relationship_api.api.v1.map import map_router
    from relationship_api.api.v1.organizations import organizations_router
    from relationship_api.api.v1.people import people_router

    root_router = APIRouter(prefix=settings.api_v1_prefix)
    root_router.include_router(geocoding_router)
    root_router.include_router(organizations_router)
    root_router.include_router(people_router)
    root_router.include_router(map_router)
    root_router.include_router(geography_router)

    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    setup_cors(app, settings)
