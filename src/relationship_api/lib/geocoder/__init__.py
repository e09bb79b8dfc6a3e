"""Geocoder library — pluggable provider chain, coordinate cache, and state lookup.

Public API:
    - BaseGeocoder: Abstract provider interface
    - GeocodingResult: Result dataclass with county/state/city breakdown
    - Coordinate: Resolved latitude/longitude pair
    - NominatimGeocoder: OpenStreetMap Nominatim provider (primary)
    - MapboxGeocoder: Mapbox provider (secondary)
    - CoordinateCache: TTL cache with injectable clock
    - CoordinateResolver: Cache -> static table -> providers resolution
    - Locatable: Shared address shape of organizations and people
    - normalize_state / BoundingBoxStateLocator: State utilities
    - get_geocoder / get_configured_providers: Provider factory/registry
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

from relationship_api.lib.geocoder.address import (
    Locatable,
    build_address_string,
    coordinate_cache_key,
    locatable_address,
)
from relationship_api.lib.geocoder.base import (
    BaseGeocoder,
    Coordinate,
    GeocodeQuality,
    GeocodingProviderError,
    GeocodingResult,
)
from relationship_api.lib.geocoder.cache import CachedCoordinate, CoordinateCache
from relationship_api.lib.geocoder.mapbox import MapboxGeocoder
from relationship_api.lib.geocoder.nominatim import NominatimGeocoder
from relationship_api.lib.geocoder.point_lookup import (
    DEFAULT_STATE_BOUNDS,
    DEFAULT_STATE_LOCATOR,
    BoundingBoxStateLocator,
    StateBounds,
    StateLocator,
)
from relationship_api.lib.geocoder.resolver import AddressResolution, CoordinateResolver
from relationship_api.lib.geocoder.states import STATE_CODES, normalize_state, state_variants
from relationship_api.lib.geocoder.static_table import COORDINATE_TABLE

if TYPE_CHECKING:
    from relationship_api.core.config import Settings

# Provider registry: all known providers
_PROVIDERS: dict[str, type[BaseGeocoder]] = {
    "nominatim": NominatimGeocoder,
    "mapbox": MapboxGeocoder,
}


def get_available_providers() -> list[str]:
    """Return the names of all registered geocoder providers.

    Returns:
        Sorted list of provider name strings.
    """
    return sorted(_PROVIDERS.keys())


def get_geocoder(provider: str = "nominatim", **kwargs: Any) -> BaseGeocoder:
    """Get a geocoder instance by provider name.

    Args:
        provider: Provider name (e.g., "nominatim").
        **kwargs: Additional arguments forwarded to the provider constructor
            (e.g., ``timeout=2.0``).

    Returns:
        An instance of the requested geocoder provider.

    Raises:
        ValueError: If the provider is not registered.
    """
    cls = _PROVIDERS.get(provider)
    if cls is None:
        msg = f"Unknown geocoder provider: {provider!r}. Available: {get_available_providers()}"
        raise ValueError(msg)
    return cls(**kwargs)


def get_configured_providers(settings: Settings) -> list[BaseGeocoder]:
    """Get geocoder instances for all providers that are enabled and properly configured.

    Args:
        settings: Application settings.

    Returns:
        List of configured BaseGeocoder instances, in fallback order.
    """
    provider_configs: dict[str, dict[str, Any]] = {
        "nominatim": {
            "enabled": settings.geocoder_nominatim_enabled,
            "kwargs": {
                "timeout": settings.geocoder_nominatim_timeout,
                "email": settings.geocoder_nominatim_email,
                "user_agent": settings.geocoder_user_agent,
            },
        },
        "mapbox": {
            "enabled": settings.geocoder_mapbox_enabled,
            "kwargs": {
                "api_key": settings.geocoder_mapbox_api_key or "",
                "timeout": settings.geocoder_mapbox_timeout,
            },
        },
    }

    # Return in fallback order, filtered to enabled + configured (deduplicated)
    providers: list[BaseGeocoder] = []
    seen: set[str] = set()

    for name in settings.geocoder_fallback_order_list:
        if name in seen:
            continue
        seen.add(name)
        config = provider_configs.get(name)
        if config is None or not config.get("enabled", False):
            continue

        geocoder = get_geocoder(name, **config.get("kwargs", {}))
        if geocoder.requires_api_key and not geocoder.is_configured:
            logger.warning(f"Geocoder provider {name} is enabled but has no API key; skipping")
            continue
        providers.append(geocoder)

    return providers


__all__ = [
    "COORDINATE_TABLE",
    "DEFAULT_STATE_BOUNDS",
    "DEFAULT_STATE_LOCATOR",
    "STATE_CODES",
    "AddressResolution",
    "BaseGeocoder",
    "BoundingBoxStateLocator",
    "CachedCoordinate",
    "Coordinate",
    "CoordinateCache",
    "CoordinateResolver",
    "GeocodeQuality",
    "GeocodingProviderError",
    "GeocodingResult",
    "Locatable",
    "MapboxGeocoder",
    "NominatimGeocoder",
    "StateBounds",
    "StateLocator",
    "build_address_string",
    "coordinate_cache_key",
    "get_available_providers",
    "get_configured_providers",
    "get_geocoder",
    "locatable_address",
    "normalize_state",
    "state_variants",
]
