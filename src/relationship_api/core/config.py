"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        description="Async SQLAlchemy connection string (postgresql+asyncpg or sqlite+aiosqlite)",
    )

    # Geocoding: general
    geocoder_fallback_order: str = Field(
        default="nominatim,mapbox",
        description="Comma-separated provider fallback order for address resolution",
    )
    geocoder_user_agent: str = Field(
        default="relationship-api/1.0",
        description="Client identifier sent to geocoding providers (required by Nominatim usage policy)",
    )
    geocoder_cache_ttl_days: int = Field(
        default=30,
        description="Days a cached city/state coordinate stays fresh",
        gt=0,
    )
    geocoder_batch_delay_seconds: float = Field(
        default=0.1,
        description="Pause between consecutive provider calls when resolving many cities",
        ge=0,
    )
    geocoder_backfill_delay_seconds: float = Field(
        default=1.0,
        description="Pause between provider calls during the county backfill (floored at the provider rate limit)",
        ge=0,
    )

    # Geocoding: Nominatim (OpenStreetMap)
    geocoder_nominatim_enabled: bool = Field(
        default=True,
        description="Enable Nominatim (OpenStreetMap) geocoder",
    )
    geocoder_nominatim_email: str = Field(
        default="",
        description="Email for Nominatim usage policy compliance",
    )
    geocoder_nominatim_timeout: float = Field(
        default=10.0,
        description="Nominatim request timeout in seconds",
        gt=0,
    )

    # Geocoding: Mapbox
    geocoder_mapbox_enabled: bool = Field(
        default=False,
        description="Enable Mapbox geocoder (requires API key)",
    )
    geocoder_mapbox_api_key: str | None = Field(
        default=None,
        description="Mapbox access token",
    )
    geocoder_mapbox_timeout: float = Field(
        default=10.0,
        description="Mapbox request timeout in seconds",
        gt=0,
    )

    @property
    def geocoder_fallback_order_list(self) -> list[str]:
        """Parse fallback order string into a list of provider names.

        Returns:
            List of provider names in fallback order.
        """
        if not self.geocoder_fallback_order.strip():
            return []
        return [p.strip().lower() for p in self.geocoder_fallback_order.split(",") if p.strip()]

    # Background work queue
    background_queue_size: int = Field(
        default=1000,
        description="Maximum number of queued background jobs",
        gt=0,
    )
    background_workers: int = Field(
        default=1,
        description="Number of background worker tasks",
        gt=0,
    )
    background_max_attempts: int = Field(
        default=2,
        description="Attempts per background job before it is marked failed",
        gt=0,
    )
    background_job_history: int = Field(
        default=1000,
        description="Finished background jobs kept for status lookups; oldest are evicted first",
        gt=0,
    )

    # Map
    map_default_region: str = Field(
        default="NATIONAL",
        description="Region whose default center/zoom is used when no marker resolves",
    )
    map_city_zoom: int = Field(
        default=10,
        description="Zoom level used when exactly one marker is shown",
        gt=0,
    )
    map_bounds_padding: float = Field(
        default=0.1,
        description="Fractional padding added to each side of the fitted bounds",
        ge=0,
        le=1,
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # CORS
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (must be explicitly configured)",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Environment
    environment: str = Field(
        default="production",
        description="Deployment environment name (e.g. production, dev, staging)",
    )

    # API
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version prefix",
    )


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]
