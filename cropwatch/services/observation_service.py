"""Observation store access: ordered reads and appends per crop."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cropwatch.models.observations import Observation
from cropwatch.schemas.observation import ObservationCreate


class ObservationService:
	def __init__(self, db: AsyncSession):
		self.db = db

	async def list_observations(self, crop_id: uuid.UUID) -> list[Observation]:
		"""All observations of a crop, by date then insertion order."""
		stmt = (
			select(Observation)
			.where(Observation.crop_id == crop_id)
			.order_by(Observation.observation_date.asc(), Observation.id.asc())
		)
		rows = await self.db.execute(stmt)
		return list(rows.scalars().all())

	async def append_observation(self, crop_id: uuid.UUID, payload: ObservationCreate) -> Observation:
		row = Observation(
			crop_id=crop_id,
			observation_date=payload.observation_date or datetime.now(UTC).date(),
			temperature=payload.temperature,
			humidity=payload.humidity,
			soil_moisture=payload.soil_moisture,
			growth_stage=payload.growth_stage,
		)
		self.db.add(row)
		await self.db.flush()
		await self.db.refresh(row)
		return row
