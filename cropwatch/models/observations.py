"""Crop observation ORM model, one dated field reading per row.

Rows are append-only.  Reads order by ``(observation_date, id)`` and the
composite index below covers exactly that range scan per crop.
"""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Date, Float, ForeignKey, Index, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from cropwatch.models.base import AppendOnlyMixin, Base


class Observation(Base, AppendOnlyMixin):
    """Temperature, humidity, soil moisture and growth stage for a crop."""

    __tablename__ = "crop_observations"
    __table_args__ = (
        Index(
            "ix_crop_observations_crop_date",
            "crop_id",
            "observation_date",
            "id",
        ),
    )

    crop_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("crops.id", ondelete="CASCADE"),
        nullable=False,
    )
    observation_date: Mapped[date] = mapped_column(
        Date, nullable=False, server_default=func.current_date()
    )
    temperature: Mapped[float] = mapped_column(Float, nullable=False)
    humidity: Mapped[float] = mapped_column(Float, nullable=False)
    soil_moisture: Mapped[float] = mapped_column(Float, nullable=False)
    growth_stage: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<Observation id={self.id} crop={self.crop_id} "
            f"date={self.observation_date}>"
        )
