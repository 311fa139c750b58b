"""Pydantic schemas for crop observations."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class ObservationCreate(BaseModel):
	observation_date: date | None = None
	temperature: float = Field(strict=True, allow_inf_nan=False)
	humidity: float = Field(strict=True, allow_inf_nan=False)
	soil_moisture: float = Field(strict=True, allow_inf_nan=False)
	growth_stage: str = Field(min_length=1, max_length=100)


class ObservationRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: int
	crop_id: uuid.UUID
	observation_date: date
	temperature: float
	humidity: float
	soil_moisture: float
	growth_stage: str
	ingested_at: datetime | None = None


class ObservationListRead(BaseModel):
	crop_id: uuid.UUID
	items: list[ObservationRead] = Field(default_factory=list)
