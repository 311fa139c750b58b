"""Pydantic schemas for health evaluation, trends and the crop view.

Metric keys use the ``soilMoisture`` spelling on the wire (the shape chart
and badge components consume); Python code uses ``soil_moisture``.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from cropwatch.core.health import HealthStatus, HealthVerdict, Severity
from cropwatch.core.trends import TrendPoint, TrendSeries
from cropwatch.schemas.crop import CropRead
from cropwatch.schemas.observation import ObservationRead
from cropwatch.schemas.weather import WeatherRead


class HealthEvaluationRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	temperature: float = Field(strict=True, allow_inf_nan=False)
	humidity: float = Field(strict=True, allow_inf_nan=False)
	soil_moisture: float = Field(alias="soilMoisture", strict=True, allow_inf_nan=False)


class MetricsRead(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	temperature: float
	humidity: float
	soil_moisture: float = Field(alias="soilMoisture")


class HealthVerdictRead(BaseModel):
	status: HealthStatus
	advice: str
	color: Severity
	metrics: MetricsRead

	@classmethod
	def from_verdict(cls, verdict: HealthVerdict) -> HealthVerdictRead:
		return cls(
			status=verdict.status,
			advice=verdict.advice,
			color=verdict.severity,
			metrics=MetricsRead(
				temperature=verdict.metrics.temperature,
				humidity=verdict.metrics.humidity,
				soil_moisture=verdict.metrics.soil_moisture,
			),
		)


class TrendPointRead(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	label: str = Field(alias="date")
	observation_date: date
	temperature: float
	humidity: float
	soil_moisture: float = Field(alias="soilMoisture")

	@classmethod
	def from_point(cls, point: TrendPoint) -> TrendPointRead:
		return cls(
			label=point.label,
			observation_date=point.observation_date,
			temperature=point.temperature,
			humidity=point.humidity,
			soil_moisture=point.soil_moisture,
		)


class TrendSeriesRead(BaseModel):
	"""Per-metric lists aligned index by index with ``labels``."""

	model_config = ConfigDict(populate_by_name=True)

	labels: list[str] = Field(default_factory=list)
	temperature: list[float] = Field(default_factory=list)
	humidity: list[float] = Field(default_factory=list)
	soil_moisture: list[float] = Field(default_factory=list, alias="soilMoisture")


class TrendResponse(BaseModel):
	crop_id: uuid.UUID
	count: int
	points: list[TrendPointRead] = Field(default_factory=list)
	series: TrendSeriesRead = Field(default_factory=TrendSeriesRead)

	@classmethod
	def from_series(cls, crop_id: uuid.UUID, trend: TrendSeries) -> TrendResponse:
		return cls(
			crop_id=crop_id,
			count=len(trend),
			points=[TrendPointRead.from_point(point) for point in trend],
			series=TrendSeriesRead(
				labels=trend.labels,
				temperature=trend.temperature,
				humidity=trend.humidity,
				soil_moisture=trend.soil_moisture,
			),
		)


class ViewWarning(BaseModel):
	source: str
	message: str


class CropViewResponse(BaseModel):
	crop: CropRead
	latest_verdict: HealthVerdictRead | None = None
	latest_observation: ObservationRead | None = None
	trend: list[TrendPointRead] = Field(default_factory=list)
	observation_count: int | None = None
	weather: WeatherRead | None = None
	degraded: bool = False
	warnings: list[ViewWarning] = Field(default_factory=list)
	generated_at: datetime


class ObservationReceipt(BaseModel):
	observation: ObservationRead
	view: CropViewResponse


class DashboardResponse(BaseModel):
	crop_count: int
	recent_crops: list[CropRead] = Field(default_factory=list)
	location: str
	weather: WeatherRead | None = None
	warnings: list[ViewWarning] = Field(default_factory=list)
	generated_at: datetime
