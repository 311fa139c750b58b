"""Crop aggregate read model: metadata, latest verdict and trend."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from cropwatch.core.health import HealthVerdict, evaluate
from cropwatch.core.trends import SupportsObservation, TrendSeries, aggregate, chronological


@dataclass(frozen=True, slots=True)
class CropView:
	crop: Any
	latest_verdict: HealthVerdict | None = None
	trend: TrendSeries = field(default_factory=TrendSeries)
	latest_observation: Any | None = None


def latest_observation(observations: Sequence[SupportsObservation]) -> SupportsObservation | None:
	"""Latest by date; on a tie the one inserted last wins."""
	ordered = chronological(observations)
	if not ordered:
		return None
	return ordered[-1]


def build_view(crop: Any, observations: Sequence[SupportsObservation]) -> CropView:
	"""Rebuild the whole view from a fully fetched observation sequence.

	With no observations the verdict stays ``None``; it is never derived
	from placeholder values.
	"""
	latest = latest_observation(observations)
	return CropView(
		crop=crop,
		latest_verdict=evaluate(latest) if latest is not None else None,
		trend=aggregate(observations),
		latest_observation=latest,
	)
