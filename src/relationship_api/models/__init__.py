"""ORM model registry — import all models so Alembic autogenerate discovers them."""

from relationship_api.models.base import Base
from relationship_api.models.geography_unit import GeographyUnit
from relationship_api.models.organization import Organization, OrganizationStatus
from relationship_api.models.person import Person

__all__ = [
    "Base",
    "GeographyUnit",
    "Organization",
    "OrganizationStatus",
    "Person",
]
