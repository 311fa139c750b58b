"""Rule-based crop health evaluation.

A verdict is derived from a single reading through an ordered rule table.
Rules are checked top to bottom and the first predicate that holds decides
the outcome, so overlapping thresholds resolve by position, not severity.
Soil-moisture deficiency sits first and short-circuits everything else.

The evaluator is pure: no I/O, no clock, no shared state.  Callers are
expected to hand it finite numbers (request models reject anything else).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol


class HealthStatus(StrEnum):
	good = "Good"
	moderate = "Moderate"
	poor = "Poor"


class Severity(StrEnum):
	"""UI-facing tag mirroring the verdict status."""

	success = "success"
	warning = "warning"
	destructive = "destructive"


class SupportsMetrics(Protocol):
	temperature: float
	humidity: float
	soil_moisture: float


SOIL_MOISTURE_CRITICAL = 35.0
SOIL_MOISTURE_ADEQUATE = 50.0
TEMPERATURE_HIGH = 38.0
TEMPERATURE_LOW = 15.0
HUMIDITY_LOW = 30.0


@dataclass(frozen=True, slots=True)
class MetricSnapshot:
	"""The three metrics a verdict is computed from."""

	temperature: float
	humidity: float
	soil_moisture: float

	@classmethod
	def of(cls, reading: SupportsMetrics) -> MetricSnapshot:
		if isinstance(reading, cls):
			return reading
		return cls(
			temperature=reading.temperature,
			humidity=reading.humidity,
			soil_moisture=reading.soil_moisture,
		)


@dataclass(frozen=True, slots=True)
class HealthRule:
	name: str
	predicate: Callable[[MetricSnapshot], bool]
	status: HealthStatus
	severity: Severity
	advice: str


@dataclass(frozen=True, slots=True)
class HealthVerdict:
	"""Outcome of :func:`evaluate`, carrying the snapshot it was derived from."""

	status: HealthStatus
	severity: Severity
	advice: str
	rule: str
	metrics: MetricSnapshot


HEALTH_RULES: tuple[HealthRule, ...] = (
	HealthRule(
		name="low_soil_moisture",
		predicate=lambda m: m.soil_moisture < SOIL_MOISTURE_CRITICAL,
		status=HealthStatus.poor,
		severity=Severity.destructive,
		advice="Soil moisture is low. Immediate irrigation required. Check irrigation system.",
	),
	HealthRule(
		name="adverse_climate",
		predicate=lambda m: m.temperature > TEMPERATURE_HIGH or m.humidity < HUMIDITY_LOW,
		status=HealthStatus.moderate,
		severity=Severity.warning,
		advice="Climate conditions need monitoring. Consider shade nets or humidity management.",
	),
	HealthRule(
		name="improvable_soil_moisture",
		predicate=lambda m: m.soil_moisture < SOIL_MOISTURE_ADEQUATE,
		status=HealthStatus.moderate,
		severity=Severity.warning,
		advice="Soil moisture is adequate but could be improved. Schedule irrigation soon.",
	),
	HealthRule(
		name="low_temperature",
		predicate=lambda m: m.temperature < TEMPERATURE_LOW,
		status=HealthStatus.moderate,
		severity=Severity.warning,
		advice="Temperature is low. Monitor for cold stress. Consider protective measures.",
	),
)

HEALTHY = HealthRule(
	name="healthy",
	predicate=lambda _m: True,
	status=HealthStatus.good,
	severity=Severity.success,
	advice="Crop is healthy. Continue current practices.",
)


def match_rule(metrics: MetricSnapshot, rules: tuple[HealthRule, ...] = HEALTH_RULES) -> HealthRule:
	"""Return the first rule whose predicate holds, or :data:`HEALTHY`."""
	for rule in rules:
		if rule.predicate(metrics):
			return rule
	return HEALTHY


def evaluate(reading: SupportsMetrics) -> HealthVerdict:
	"""Classify a reading as Good, Moderate or Poor.

	``reading`` is anything exposing ``temperature``, ``humidity`` and
	``soil_moisture`` (an ORM observation, a request model, a
	:class:`MetricSnapshot`).  The verdict embeds a copy of those values.
	"""
	metrics = MetricSnapshot.of(reading)
	rule = match_rule(metrics)
	return HealthVerdict(
		status=rule.status,
		severity=rule.severity,
		advice=rule.advice,
		rule=rule.name,
		metrics=metrics,
	)
