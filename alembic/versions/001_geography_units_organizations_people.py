"""Initial migration: geography_units, organizations and people tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _locatable() -> list[sa.Column]:
    return [
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(50), nullable=True),
        sa.Column("zip", sa.String(10), nullable=True),
        sa.Column(
            "county_id",
            UUID(as_uuid=True),
            sa.ForeignKey("geography_units.id", ondelete="SET NULL"),
            nullable=True,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "geography_units",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("geo_id", sa.String(20), nullable=False),
        sa.Column("fips", sa.String(5), nullable=True),
        sa.Column("county", sa.String(100), nullable=False),
        sa.Column("county_long", sa.String(150), nullable=True),
        sa.Column("state", sa.String(2), nullable=False),
        sa.Column("division", sa.String(100), nullable=False),
        sa.Column("division_code", sa.String(20), nullable=True),
        sa.Column("region", sa.String(100), nullable=False),
        sa.Column("region_code", sa.String(20), nullable=True),
        sa.Column("chapter", sa.String(150), nullable=False),
        sa.Column("chapter_code", sa.String(20), nullable=True),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("address_2", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("zip", sa.String(10), nullable=True),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("time_zone", sa.String(50), nullable=True),
        sa.Column("fema_region", sa.String(10), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("geo_id", name="uq_geography_units_geo_id"),
    )
    op.create_index("ix_geography_units_state", "geography_units", ["state"])
    op.create_index("ix_geography_units_county", "geography_units", ["county"])

    op.create_table(
        "organizations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("website", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("latitude", sa.Double, nullable=True),
        sa.Column("longitude", sa.Double, nullable=True),
        *_locatable(),
        *_timestamps(),
    )
    op.create_index("ix_organizations_county_id", "organizations", ["county_id"])

    op.create_table(
        "people",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "org_id",
            UUID(as_uuid=True),
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("title", sa.String(150), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_locatable(),
        *_timestamps(),
    )
    op.create_index("ix_people_org_id", "people", ["org_id"])
    op.create_index("ix_people_county_id", "people", ["county_id"])


def downgrade() -> None:
    op.drop_index("ix_people_county_id", table_name="people")
    op.drop_index("ix_people_org_id", table_name="people")
    op.drop_table("people")
    op.drop_index("ix_organizations_county_id", table_name="organizations")
    op.drop_table("organizations")
    op.drop_index("ix_geography_units_county", table_name="geography_units")
    op.drop_index("ix_geography_units_state", table_name="geography_units")
    op.drop_table("geography_units")
