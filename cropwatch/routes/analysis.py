"""Stateless crop health evaluation route."""

from __future__ import annotations

from fastapi import APIRouter

from cropwatch.schemas.health import HealthEvaluationRequest, HealthVerdictRead
from cropwatch.services.monitoring_service import MonitoringService

router = APIRouter(tags=["analysis"])


@router.post("/analyze-crop-health", response_model=HealthVerdictRead)
async def analyze_crop_health(payload: HealthEvaluationRequest) -> HealthVerdictRead:
	"""Score a single reading; malformed metrics are rejected with 422 before evaluation."""
	return MonitoringService.evaluate_metrics(payload)
