"""Organization model — a partner organization tracked by a chapter."""

import enum

from sqlalchemy import Double, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from relationship_api.models.base import Base, LocatableMixin, TimestampMixin, UUIDMixin


class OrganizationStatus(enum.StrEnum):
    """Relationship status with the partner."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    PROSPECT = "prospect"


class Organization(Base, UUIDMixin, TimestampMixin, LocatableMixin):
    """Partner organization with an owner-entered address.

    ``county_id`` is filled either by the direct city match at write time or
    later by the background geocoding job. ``latitude``/``longitude`` are
    filled by the same job when the provider returns coordinates.
    """

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=OrganizationStatus.ACTIVE)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    latitude: Mapped[float | None] = mapped_column(Double, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Double, nullable=True)

    county = relationship("GeographyUnit", lazy="raise")
    people = relationship("Person", back_populates="organization", lazy="raise")

    @property
    def display_name(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<Organization {self.name!r}>"
