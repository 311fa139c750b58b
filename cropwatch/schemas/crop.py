"""Pydantic request/response schemas for crop objects."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class CropCreate(BaseModel):
	name: str = Field(min_length=1, max_length=255)
	soil_type: str = Field(min_length=1, max_length=100)
	area: float = Field(gt=0, allow_inf_nan=False, description="Area in hectares")
	sowing_date: date


class CropRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	owner_id: uuid.UUID
	name: str
	soil_type: str
	area: float
	sowing_date: date
	created_at: datetime
	updated_at: datetime


class CropListRead(BaseModel):
	items: list[CropRead]
