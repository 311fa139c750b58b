"""initial_schema

Revision ID: 3c7e91a0d2f4
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the ``crops`` and ``crop_observations`` tables.  Enables the
uuid-ossp extension used for server-side crop ids.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3c7e91a0d2f4"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # crops
    op.create_table(
        "crops",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("soil_type", sa.String(100), nullable=False),
        sa.Column("area", sa.Float(), nullable=False),
        sa.Column("sowing_date", sa.Date(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("area > 0", name="ck_crops_area_positive"),
        sa.PrimaryKeyConstraint("id", name="pk_crops"),
    )
    op.create_index("ix_crops_owner_id", "crops", ["owner_id"])

    # crop_observations (append-only)
    op.create_table(
        "crop_observations",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("crop_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "observation_date",
            sa.Date(),
            server_default=sa.text("CURRENT_DATE"),
            nullable=False,
        ),
        sa.Column("temperature", sa.Float(), nullable=False),
        sa.Column("humidity", sa.Float(), nullable=False),
        sa.Column("soil_moisture", sa.Float(), nullable=False),
        sa.Column("growth_stage", sa.String(100), nullable=False),
        sa.Column(
            "ingested_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["crop_id"],
            ["crops.id"],
            name="fk_crop_observations_crop_id_crops",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_crop_observations"),
    )
    op.create_index(
        "ix_crop_observations_crop_date",
        "crop_observations",
        ["crop_id", "observation_date", "id"],
    )


def downgrade() -> None:
    op.drop_index("ix_crop_observations_crop_date", table_name="crop_observations")
    op.drop_table("crop_observations")
    op.drop_index("ix_crops_owner_id", table_name="crops")
    op.drop_table("crops")
