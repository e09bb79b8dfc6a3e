"""City/state and free-text address resolution over a provider fallback chain.

Resolution order for a city/state pair: coordinate cache, static city table,
then each configured provider in fallback order. Provider failures are
logged and folded into ``None``; callers treat ``None`` as "unresolved".
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass

from loguru import logger

from relationship_api.lib.geocoder.address import coordinate_cache_key
from relationship_api.lib.geocoder.base import BaseGeocoder, Coordinate, GeocodingProviderError, GeocodingResult
from relationship_api.lib.geocoder.cache import CoordinateCache
from relationship_api.lib.geocoder.static_table import COORDINATE_TABLE

DEFAULT_BATCH_DELAY = 0.1


@dataclass
class AddressResolution:
    """Coordinates plus the provider's administrative breakdown for an address."""

    coordinate: Coordinate
    county: str | None
    state: str | None
    city: str | None
    provider: str

    @classmethod
    def from_result(cls, provider: str, result: GeocodingResult) -> "AddressResolution":
        return cls(
            coordinate=result.coordinate,
            county=result.county,
            state=result.state,
            city=result.city,
            provider=provider,
        )


class CoordinateResolver:
    """Resolve cities and addresses to coordinates without ever raising on failure.

    Args:
        providers: Geocoders tried in order until one returns a match.
        cache: Shared coordinate cache for city/state lookups.
        static_table: Precomputed ``"city, st"`` coordinates checked before the network.
        sleep: Awaitable pause used between batched network calls.
        batch_delay: Default pause in seconds for ``batch_resolve``.
    """

    def __init__(
        self,
        providers: Sequence[BaseGeocoder],
        cache: CoordinateCache,
        static_table: Mapping[str, Coordinate] = COORDINATE_TABLE,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        batch_delay: float = DEFAULT_BATCH_DELAY,
    ) -> None:
        self._providers = list(providers)
        self._cache = cache
        self._static_table = static_table
        self._sleep = sleep
        self._batch_delay = batch_delay

    @property
    def cache(self) -> CoordinateCache:
        return self._cache

    @property
    def provider_names(self) -> list[str]:
        return [p.provider_name for p in self._providers]

    @property
    def rate_limit_delay(self) -> float:
        """Smallest pause between network calls that every provider in the chain allows."""
        return max((p.rate_limit_delay for p in self._providers), default=0.0)

    async def resolve(self, city: str, state: str) -> Coordinate | None:
        """Resolve a city/state pair to a coordinate.

        A fresh cache entry is returned without any network call.

        Returns:
            The coordinate, or None when the pair cannot be resolved.
        """
        if not city or not city.strip() or not state or not state.strip():
            return None
        coordinate = self._lookup_local(city, state)
        if coordinate is not None:
            return coordinate
        return await self._fetch(city, state)

    async def resolve_address(self, address: str) -> AddressResolution | None:
        """Resolve a free-text address, returning county/state/city detail too.

        Returns:
            AddressResolution from the first provider that matches, or None.
        """
        if not address or not address.strip():
            return None
        hit = await self._geocode(address.strip())
        if hit is None:
            return None
        provider, result = hit
        return AddressResolution.from_result(provider, result)

    async def batch_resolve(
        self,
        pairs: Iterable[tuple[str, str]],
        delay: float | None = None,
    ) -> dict[tuple[str, str], Coordinate]:
        """Resolve many city/state pairs, pausing between provider calls.

        Pairs are deduplicated by normalized key. Cache and static-table hits
        never pause; ``delay`` seconds are awaited before every network call
        after the first. The pause never drops below the provider chain's
        ``rate_limit_delay``.

        Args:
            pairs: ``(city, state)`` tuples as entered.
            delay: Pause between network calls. Defaults to the resolver's batch delay.

        Returns:
            Mapping of each input pair that resolved to its coordinate.
        """
        pause = max(self._batch_delay if delay is None else delay, self.rate_limit_delay)
        by_key: dict[str, Coordinate | None] = {}
        resolved: dict[tuple[str, str], Coordinate] = {}
        network_calls = 0

        for city, state in pairs:
            if not city or not city.strip() or not state or not state.strip():
                continue
            key = coordinate_cache_key(city, state)
            if key not in by_key:
                coordinate = self._lookup_local(city, state)
                if coordinate is None:
                    if network_calls and pause > 0:
                        await self._sleep(pause)
                    network_calls += 1
                    coordinate = await self._fetch(city, state)
                by_key[key] = coordinate
            if by_key[key] is not None:
                resolved[(city, state)] = by_key[key]

        logger.debug(f"Batch resolved {len(resolved)} pairs ({len(by_key)} unique, {network_calls} network calls)")
        return resolved

    def _lookup_local(self, city: str, state: str) -> Coordinate | None:
        cached = self._cache.get(city, state)
        if cached is not None:
            logger.debug(f"Coordinate cache hit for {city}, {state}")
            return cached
        static = self._static_table.get(coordinate_cache_key(city, state))
        if static is not None:
            logger.debug(f"Static coordinate table hit for {city}, {state}")
            self._cache.put(city, state, static)
            return static
        return None

    async def _fetch(self, city: str, state: str) -> Coordinate | None:
        hit = await self._geocode(f"{city.strip()}, {state.strip()}, United States")
        if hit is None:
            return None
        _, result = hit
        coordinate = result.coordinate
        self._cache.put(city, state, coordinate)
        logger.info(f"Geocoded {city}, {state} -> ({coordinate.latitude}, {coordinate.longitude})")
        return coordinate

    async def _geocode(self, address: str) -> tuple[str, GeocodingResult] | None:
        for provider in self._providers:
            try:
                result = await provider.geocode(address)
            except GeocodingProviderError as e:
                logger.warning(f"Provider {provider.provider_name} failed, trying next: {e.message}")
                continue
            if result is not None:
                return provider.provider_name, result
        return None
