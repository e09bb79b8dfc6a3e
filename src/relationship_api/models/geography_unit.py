"""GeographyUnit model — one county-equivalent in the division/region/chapter tree.

Populated by the geography import (CSV export of the organizational
geography workbook). Read-only from the geocoding pipeline's perspective.

Each row belongs to exactly one chapter, region, and division; the hierarchy
is denormalized onto every county row.
"""

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from relationship_api.models.base import Base, TimestampMixin, UUIDMixin


class GeographyUnit(Base, UUIDMixin, TimestampMixin):
    """County-level reference row carrying its chapter, region, and division."""

    __tablename__ = "geography_units"

    geo_id: Mapped[str] = mapped_column(String(20), nullable=False)
    fips: Mapped[str | None] = mapped_column(String(5), nullable=True)

    # County names: short ("Miami-Dade") and long ("Miami-Dade County")
    county: Mapped[str] = mapped_column(String(100), nullable=False)
    county_long: Mapped[str | None] = mapped_column(String(150), nullable=True)
    state: Mapped[str] = mapped_column(String(2), nullable=False)

    # Hierarchy
    division: Mapped[str] = mapped_column(String(100), nullable=False)
    division_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    region: Mapped[str] = mapped_column(String(100), nullable=False)
    region_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    chapter: Mapped[str] = mapped_column(String(150), nullable=False)
    chapter_code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Chapter contact info (informational)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address_2: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    zip: Mapped[str | None] = mapped_column(String(10), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    time_zone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    fema_region: Mapped[str | None] = mapped_column(String(10), nullable=True)

    __table_args__ = (
        UniqueConstraint("geo_id", name="uq_geography_units_geo_id"),
        Index("ix_geography_units_state", "state"),
        Index("ix_geography_units_county", "county"),
    )

    def __repr__(self) -> str:
        return f"<GeographyUnit {self.county}, {self.state} ({self.chapter})>"
