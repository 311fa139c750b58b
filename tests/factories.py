"""Row stand-ins for crops and observations used across API and service tests."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from types import SimpleNamespace
from typing import Any

OWNER_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")


def make_crop(owner_id: uuid.UUID = OWNER_ID, **overrides: Any) -> SimpleNamespace:
	"""Crop row stand-in accepted by ``CropRead.model_validate``."""
	now = datetime(2026, 3, 1, 8, 0, tzinfo=UTC)
	values: dict[str, Any] = {
		"id": uuid.uuid4(),
		"owner_id": owner_id,
		"name": "North Field Wheat",
		"soil_type": "Loamy",
		"area": 2.5,
		"sowing_date": date(2026, 1, 10),
		"created_at": now,
		"updated_at": now,
	}
	values.update(overrides)
	return SimpleNamespace(**values)


def make_observation(
	crop_id: uuid.UUID,
	observation_id: int,
	observation_date: date,
	temperature: float = 26.0,
	humidity: float = 60.0,
	soil_moisture: float = 55.0,
	growth_stage: str = "Vegetative",
) -> SimpleNamespace:
	return SimpleNamespace(
		id=observation_id,
		crop_id=crop_id,
		observation_date=observation_date,
		temperature=temperature,
		humidity=humidity,
		soil_moisture=soil_moisture,
		growth_stage=growth_stage,
		ingested_at=datetime(2026, 3, 1, 9, 0, tzinfo=UTC),
	)


