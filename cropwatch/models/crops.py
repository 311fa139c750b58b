"""Crop ORM model: a tracked plot owned by a single grower.

``owner_id`` is the subject of the bearer token that created the crop.
Accounts live outside this service, so there is no foreign key behind it.
"""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import CheckConstraint, Date, Float, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from cropwatch.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Crop(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Crop plot metadata: name, soil, area in hectares, sowing date."""

    __tablename__ = "crops"
    __table_args__ = (
        CheckConstraint("area > 0", name="area_positive"),
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    soil_type: Mapped[str] = mapped_column(String(100), nullable=False)
    area: Mapped[float] = mapped_column(Float, nullable=False)
    sowing_date: Mapped[date] = mapped_column(Date, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<Crop id={self.id} name={self.name!r} "
            f"owner={self.owner_id}>"
        )
