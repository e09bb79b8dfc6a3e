"""Mapbox Geocoding API v6 provider.

Uses the Mapbox Geocoding API v6
(https://docs.mapbox.com/api/search/geocoding-v6/)
for address-to-coordinate resolution. Requires an access token.
"""

import httpx
from loguru import logger

from relationship_api.lib.geocoder.base import (
    BaseGeocoder,
    GeocodeQuality,
    GeocodingProviderError,
    GeocodingResult,
)

MAPBOX_API_URL = "https://api.mapbox.com/search/geocode/v6/forward"
DEFAULT_TIMEOUT = 10.0


class MapboxGeocoder(BaseGeocoder):
    """Mapbox geocoder provider."""

    def __init__(self, api_key: str = "", timeout: float = DEFAULT_TIMEOUT) -> None:
        self._api_key = api_key
        self._timeout = timeout

    @property
    def provider_name(self) -> str:
        return "mapbox"

    @property
    def requires_api_key(self) -> bool:
        return True

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def geocode(self, address: str) -> GeocodingResult | None:
        """Geocode a single address using the Mapbox API.

        Args:
            address: Free-text address string.

        Returns:
            GeocodingResult or None if no match found.

        Raises:
            GeocodingProviderError: On transport or service errors.
        """
        params = {
            "q": address,
            "access_token": self._api_key,
            "country": "us",
            "limit": 1,
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(MAPBOX_API_URL, params=params)
                response.raise_for_status()

            data = response.json()
            return self._parse_response(data)

        except httpx.TimeoutException as e:
            logger.warning("Mapbox geocoder timeout for address (redacted)")
            raise GeocodingProviderError("mapbox", "Geocoding request timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"Mapbox geocoder HTTP error {e.response.status_code}")
            raise GeocodingProviderError(
                "mapbox",
                f"Provider returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.ConnectError as e:
            logger.warning("Mapbox geocoder connection error")
            raise GeocodingProviderError("mapbox", "Connection to geocoding provider failed") from e
        except GeocodingProviderError:
            raise
        except Exception as e:
            logger.exception("Mapbox geocoder unexpected error")
            raise GeocodingProviderError("mapbox", f"Unexpected error: {e}") from e

    def _parse_response(self, data: dict) -> GeocodingResult | None:
        """Parse Mapbox API response into a GeocodingResult."""
        features = data.get("features", [])
        if not features:
            return None

        best = features[0]
        properties = best.get("properties", {})
        try:
            coords = best["geometry"]["coordinates"]
            lng = float(coords[0])
            lat = float(coords[1])
            relevance = float(properties.get("relevance", 0.5))
            result = GeocodingResult(
                latitude=lat,
                longitude=lng,
                confidence_score=max(0.0, min(relevance, 1.0)),
                matched_address=properties.get("full_address") or properties.get("name"),
            )
        except (KeyError, IndexError, ValueError, TypeError) as e:
            logger.warning(f"Failed to parse Mapbox response: {e}")
            raise GeocodingProviderError("mapbox", f"Failed to parse response: {e}") from e

        match_code = properties.get("match_code", {})
        result.quality = self._map_quality(properties.get("feature_type", ""), match_code.get("confidence", "low"))

        # v6 reports US counties as "district"
        context = properties.get("context", {})
        result.county = context.get("district", {}).get("name")
        result.state = context.get("region", {}).get("name")
        result.city = context.get("place", {}).get("name") or context.get("locality", {}).get("name")
        return result

    @staticmethod
    def _map_quality(feature_type: str, confidence: str) -> GeocodeQuality:
        """Map Mapbox feature type and confidence to GeocodeQuality."""
        if feature_type == "address" and confidence == "exact":
            return GeocodeQuality.EXACT
        if feature_type == "address":
            return GeocodeQuality.INTERPOLATED
        return GeocodeQuality.APPROXIMATE
