"""Observation sequence → chart-ready trend series."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class SupportsObservation(Protocol):
	observation_date: date
	temperature: float
	humidity: float
	soil_moisture: float


def format_date_label(value: date) -> str:
	"""Short display label such as ``"Jan 5"`` (independent of locale)."""
	return f"{_MONTHS[value.month - 1]} {value.day}"


def chronological(observations: Iterable[SupportsObservation]) -> list[SupportsObservation]:
	"""Sort ascending by date; ties keep insertion order.

	Insertion order is the store id when every item has an integer one,
	otherwise the position in ``observations`` (``sorted`` is stable).
	"""
	items = list(observations)
	if items and all(isinstance(getattr(item, "id", None), int) for item in items):
		return sorted(items, key=lambda item: (item.observation_date, item.id))  # type: ignore[attr-defined]
	return sorted(items, key=lambda item: item.observation_date)


@dataclass(frozen=True, slots=True)
class TrendPoint:
	label: str
	observation_date: date
	temperature: float
	humidity: float
	soil_moisture: float


@dataclass(frozen=True, slots=True)
class TrendSeries:
	"""One point per observation, in chronological order."""

	points: tuple[TrendPoint, ...] = ()

	def __len__(self) -> int:
		return len(self.points)

	def __iter__(self) -> Iterator[TrendPoint]:
		return iter(self.points)

	@property
	def labels(self) -> list[str]:
		return [point.label for point in self.points]

	@property
	def temperature(self) -> list[float]:
		return [point.temperature for point in self.points]

	@property
	def humidity(self) -> list[float]:
		return [point.humidity for point in self.points]

	@property
	def soil_moisture(self) -> list[float]:
		return [point.soil_moisture for point in self.points]


def to_point(observation: SupportsObservation) -> TrendPoint:
	return TrendPoint(
		label=format_date_label(observation.observation_date),
		observation_date=observation.observation_date,
		temperature=observation.temperature,
		humidity=observation.humidity,
		soil_moisture=observation.soil_moisture,
	)


def aggregate(observations: Sequence[SupportsObservation]) -> TrendSeries:
	"""Map every observation to exactly one plotted point.

	No bucketing, resampling or gap filling.  An empty sequence yields an
	empty series, which is the "no data yet" state rather than an error.
	"""
	return TrendSeries(points=tuple(to_point(item) for item in chronological(observations)))
