"""Crop monitoring orchestration: store reads, view rebuilds and live events.

The health verdict and trend series are recomputed from a fully fetched
observation sequence on every read and after every append.  Upstream
failures (observation store, weather provider) never take the view down:
they are reported as warnings and the view falls back to crop metadata.
"""

from __future__ import annotations

import json
import uuid
from datetime import UTC, datetime
from typing import Any

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from cropwatch.config import get_settings
from cropwatch.core.health import evaluate
from cropwatch.core.trends import aggregate
from cropwatch.core.view import build_view
from cropwatch.models.crops import Crop
from cropwatch.models.observations import Observation
from cropwatch.schemas.crop import CropRead
from cropwatch.schemas.health import (
	CropViewResponse,
	DashboardResponse,
	HealthEvaluationRequest,
	HealthVerdictRead,
	ObservationReceipt,
	TrendPointRead,
	TrendResponse,
	ViewWarning,
)
from cropwatch.schemas.observation import ObservationCreate, ObservationListRead, ObservationRead
from cropwatch.schemas.weather import WeatherRead
from cropwatch.services.crop_service import CropService
from cropwatch.services.observation_service import ObservationService
from cropwatch.services.weather_service import WeatherService

logger = structlog.get_logger("cropwatch.monitoring")


def live_channel(crop_id: uuid.UUID) -> str:
	return f"crop:{crop_id}:live"


class MonitoringService:
	def __init__(
		self,
		db: AsyncSession,
		redis_client: Redis | None = None,
		weather_service: WeatherService | None = None,
	):
		self.db = db
		self.redis_client = redis_client
		self.weather_service = weather_service or WeatherService(redis_client)
		self.settings = get_settings()

	@staticmethod
	def evaluate_metrics(payload: HealthEvaluationRequest) -> HealthVerdictRead:
		verdict = evaluate(payload)
		logger.info(
			"crop_health_evaluated",
			temperature=payload.temperature,
			humidity=payload.humidity,
			soil_moisture=payload.soil_moisture,
			status=verdict.status.value,
			rule=verdict.rule,
		)
		return HealthVerdictRead.from_verdict(verdict)

	async def get_crop_view(
		self,
		crop_id: uuid.UUID,
		owner_id: uuid.UUID,
		*,
		location: str | None = None,
	) -> CropViewResponse:
		crop = await CropService(self.db).get_crop(crop_id, owner_id)
		warnings: list[ViewWarning] = []
		observations = await self._fetch_observations(crop_id, warnings)
		weather = await self._fetch_weather(location, warnings) if location else None
		return self._render_view(crop, observations, warnings, weather)

	async def list_observations(self, crop_id: uuid.UUID, owner_id: uuid.UUID) -> ObservationListRead:
		await CropService(self.db).get_crop(crop_id, owner_id)
		rows = await ObservationService(self.db).list_observations(crop_id)
		return ObservationListRead(
			crop_id=crop_id,
			items=[ObservationRead.model_validate(row) for row in rows],
		)

	async def get_trend(self, crop_id: uuid.UUID, owner_id: uuid.UUID) -> TrendResponse:
		await CropService(self.db).get_crop(crop_id, owner_id)
		rows = await ObservationService(self.db).list_observations(crop_id)
		return TrendResponse.from_series(crop_id, aggregate(rows))

	async def record_observation(
		self,
		crop_id: uuid.UUID,
		owner_id: uuid.UUID,
		payload: ObservationCreate,
	) -> ObservationReceipt:
		crop = await CropService(self.db).get_crop(crop_id, owner_id)
		observation = await ObservationService(self.db).append_observation(crop_id, payload)
		logger.info(
			"observation_appended",
			crop_id=str(crop_id),
			observation_id=observation.id,
			observation_date=observation.observation_date.isoformat(),
		)

		warnings: list[ViewWarning] = []
		observations = await self._fetch_observations(crop_id, warnings)
		view = self._render_view(crop, observations, warnings)

		# Subscribers only ever see observations that are already durable.
		await self.db.commit()
		publish_warning = await self._publish_event(crop_id, observation, view)
		if publish_warning is not None:
			view = view.model_copy(update={"warnings": [*view.warnings, publish_warning]})
		return ObservationReceipt(
			observation=ObservationRead.model_validate(observation),
			view=view,
		)

	async def get_dashboard(self, owner_id: uuid.UUID, location: str | None = None) -> DashboardResponse:
		location = (location or "").strip() or self.settings.default_location
		crops = CropService(self.db)
		recent = await crops.list_crops(owner_id, limit=self.settings.dashboard_recent_crops)
		count = await crops.count_crops(owner_id)

		warnings: list[ViewWarning] = []
		weather = await self._fetch_weather(location, warnings)
		return DashboardResponse(
			crop_count=count,
			recent_crops=[CropRead.model_validate(crop) for crop in recent],
			location=location,
			weather=weather,
			warnings=warnings,
			generated_at=datetime.now(UTC),
		)

	async def _fetch_observations(
		self,
		crop_id: uuid.UUID,
		warnings: list[ViewWarning],
	) -> list[Observation] | None:
		try:
			return await ObservationService(self.db).list_observations(crop_id)
		except Exception as exc:
			logger.warning("observation_fetch_failed", crop_id=str(crop_id), error=str(exc))
			warnings.append(ViewWarning(source="observations", message=f"observation store unavailable: {exc}"))
			return None

	async def _fetch_weather(self, location: str, warnings: list[ViewWarning]) -> WeatherRead | None:
		try:
			return await self.weather_service.get_weather(location)
		except Exception as exc:
			logger.warning("weather_lookup_failed", location=location, error=str(exc))
			warnings.append(ViewWarning(source="weather", message=str(exc)))
			return None

	@staticmethod
	def _render_view(
		crop: Crop,
		observations: list[Observation] | None,
		warnings: list[ViewWarning],
		weather: WeatherRead | None = None,
	) -> CropViewResponse:
		crop_read = CropRead.model_validate(crop)
		generated_at = datetime.now(UTC)

		if observations is not None:
			try:
				view = build_view(crop, observations)
				latest_verdict = (
					HealthVerdictRead.from_verdict(view.latest_verdict)
					if view.latest_verdict is not None
					else None
				)
				latest_observation = (
					ObservationRead.model_validate(view.latest_observation)
					if view.latest_observation is not None
					else None
				)
				trend = [TrendPointRead.from_point(point) for point in view.trend]
			except Exception as exc:
				logger.exception("crop_view_build_failed", crop_id=str(crop_read.id), error=str(exc))
				warnings.append(ViewWarning(source="health", message=f"health evaluation failed: {exc}"))
			else:
				return CropViewResponse(
					crop=crop_read,
					latest_verdict=latest_verdict,
					latest_observation=latest_observation,
					trend=trend,
					observation_count=len(observations),
					weather=weather,
					warnings=warnings,
					generated_at=generated_at,
				)

		return CropViewResponse(
			crop=crop_read,
			weather=weather,
			degraded=True,
			warnings=warnings,
			generated_at=generated_at,
		)

	async def _publish_event(
		self,
		crop_id: uuid.UUID,
		observation: Observation,
		view: CropViewResponse,
	) -> ViewWarning | None:
		if self.redis_client is None:
			return None
		verdict = view.latest_verdict
		payload: dict[str, Any] = {
			"event_type": "observation_appended",
			"crop_id": str(crop_id),
			"observation_id": int(observation.id),
			"observation_date": observation.observation_date.isoformat(),
			"observation_count": view.observation_count,
			"verdict": verdict.model_dump(mode="json", by_alias=True) if verdict is not None else None,
			"degraded": view.degraded,
			"published_at": datetime.now(UTC).isoformat(),
		}
		try:
			await self.redis_client.publish(live_channel(crop_id), json.dumps(payload))
		except (RedisError, OSError) as exc:
			logger.warning(
				"live_event_publish_failed",
				crop_id=str(crop_id),
				observation_id=int(observation.id),
				error=str(exc),
			)
			return ViewWarning(source="live", message=f"live event not published: {exc}")
		return None
