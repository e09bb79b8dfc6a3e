"""Abstract base geocoder interface for pluggable provider support."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import NamedTuple


class GeocodeQuality(StrEnum):
    """Quality level of a geocoding result, from most to least precise."""

    EXACT = "exact"
    INTERPOLATED = "interpolated"
    APPROXIMATE = "approximate"


class Coordinate(NamedTuple):
    """A resolved WGS84 point, optionally labelled with the provider's display name."""

    latitude: float
    longitude: float
    display_name: str | None = None

    @property
    def position(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass
class GeocodingResult:
    """Result from a geocoding operation.

    ``county``, ``state`` and ``city`` carry the provider's address breakdown
    when it returns one; they feed the hierarchy name match.
    """

    latitude: float
    longitude: float
    confidence_score: float | None = None
    matched_address: str | None = None
    quality: GeocodeQuality | None = None
    county: str | None = None
    state: str | None = None
    city: str | None = None

    def __post_init__(self) -> None:
        if not (-90 <= self.latitude <= 90):
            msg = f"latitude must be between -90 and 90, got {self.latitude}"
            raise ValueError(msg)
        if not (-180 <= self.longitude <= 180):
            msg = f"longitude must be between -180 and 180, got {self.longitude}"
            raise ValueError(msg)
        if self.confidence_score is not None and not (0 <= self.confidence_score <= 1):
            msg = f"confidence_score must be between 0 and 1, got {self.confidence_score}"
            raise ValueError(msg)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude, self.matched_address)


class GeocodingProviderError(Exception):
    """Raised when a geocoding provider experiences a transport or service error.

    Distinguishes provider failures (timeout, HTTP error, connection error,
    malformed payload) from a successful response with no match (which
    returns None).

    Args:
        provider_name: Name of the failing provider.
        message: Human-readable error description.
        status_code: Optional HTTP status code from the provider.
    """

    def __init__(self, provider_name: str, message: str, status_code: int | None = None) -> None:
        self.provider_name = provider_name
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider_name}: {message}")


class BaseGeocoder(ABC):
    """Abstract geocoder interface. All providers must implement this."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this geocoder provider."""

    @property
    def requires_api_key(self) -> bool:
        """Whether this provider requires an API key to function."""
        return False

    @property
    def is_configured(self) -> bool:
        """Whether this provider has all required configuration (e.g., API keys)."""
        return True

    @property
    def rate_limit_delay(self) -> float:
        """Minimum delay in seconds between requests (for rate-limited providers)."""
        return 0.0

    @abstractmethod
    async def geocode(self, address: str) -> GeocodingResult | None:
        """Geocode a single address.

        Args:
            address: Free-text address, from a bare "city, state" up to a full street address.

        Returns:
            GeocodingResult or None if the address could not be geocoded.

        Raises:
            GeocodingProviderError: On transport or service errors.
        """
