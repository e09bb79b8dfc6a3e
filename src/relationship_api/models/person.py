"""Person model — a contact, usually attached to an organization."""

import uuid

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from relationship_api.models.base import Base, LocatableMixin, TimestampMixin, UUIDMixin


class Person(Base, UUIDMixin, TimestampMixin, LocatableMixin):
    """Contact person.

    People carry their own (optional) address for sole proprietors; on the
    map they are placed at their organization's city.
    """

    __tablename__ = "people"

    org_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=True, index=True
    )
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    title: Mapped[str | None] = mapped_column(String(150), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    organization = relationship("Organization", back_populates="people", lazy="raise")
    county = relationship("GeographyUnit", lazy="raise")

    @property
    def display_name(self) -> str:
        full = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full or (self.email or str(self.id))

    def __repr__(self) -> str:
        return f"<Person {self.display_name!r}>"
