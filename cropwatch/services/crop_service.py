"""Crop CRUD service, scoped to the owning grower."""

from __future__ import annotations

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cropwatch.models.crops import Crop
from cropwatch.schemas.crop import CropCreate


class CropService:
	def __init__(self, db: AsyncSession):
		self.db = db

	async def create_crop(self, owner_id: uuid.UUID, payload: CropCreate) -> Crop:
		crop = Crop(
			owner_id=owner_id,
			name=payload.name,
			soil_type=payload.soil_type,
			area=payload.area,
			sowing_date=payload.sowing_date,
		)
		self.db.add(crop)
		await self.db.flush()
		await self.db.refresh(crop)
		return crop

	async def list_crops(self, owner_id: uuid.UUID, limit: int | None = None) -> list[Crop]:
		stmt = (
			select(Crop)
			.where(Crop.owner_id == owner_id)
			.order_by(Crop.created_at.desc())
		)
		if limit is not None:
			stmt = stmt.limit(limit)
		rows = await self.db.execute(stmt)
		return list(rows.scalars().all())

	async def count_crops(self, owner_id: uuid.UUID) -> int:
		rows = await self.db.execute(
			select(func.count()).select_from(Crop).where(Crop.owner_id == owner_id)
		)
		return int(rows.scalar_one())

	async def get_crop(self, crop_id: uuid.UUID, owner_id: uuid.UUID) -> Crop:
		row = await self.db.execute(select(Crop).where(Crop.id == crop_id))
		crop = row.scalar_one_or_none()
		# Another grower's crop is reported exactly like a missing one.
		if crop is None or crop.owner_id != owner_id:
			raise LookupError(f"Crop {crop_id} not found")
		return crop
