from __future__ import annotations

from datetime import date
from types import SimpleNamespace
from uuid import uuid4

from cropwatch.core.health import evaluate
from cropwatch.core.trends import TrendSeries, aggregate, chronological, format_date_label
from cropwatch.core.view import build_view, latest_observation

from factories import make_crop, make_observation


def test_aggregate_empty_is_empty_series() -> None:
	series = aggregate([])
	assert series == TrendSeries()
	assert len(series) == 0
	assert series.labels == []
	assert series.soil_moisture == []


def test_aggregate_maps_each_observation_to_one_point() -> None:
	crop_id = uuid4()
	rows = [
		make_observation(crop_id, 1, date(2026, 1, 5), temperature=20, humidity=55, soil_moisture=40),
		make_observation(crop_id, 2, date(2026, 1, 9), temperature=24, humidity=50, soil_moisture=45),
		make_observation(crop_id, 3, date(2026, 2, 1), temperature=27, humidity=48, soil_moisture=52),
	]
	series = aggregate(rows)
	assert len(series) == 3
	assert series.labels == ["Jan 5", "Jan 9", "Feb 1"]
	assert series.temperature == [20, 24, 27]
	assert series.humidity == [55, 50, 48]
	assert series.soil_moisture == [40, 45, 52]


def test_aggregate_does_not_fill_date_gaps() -> None:
	crop_id = uuid4()
	rows = [
		make_observation(crop_id, 1, date(2026, 3, 1)),
		make_observation(crop_id, 2, date(2026, 3, 20)),
	]
	assert [point.observation_date for point in aggregate(rows)] == [date(2026, 3, 1), date(2026, 3, 20)]


def test_aggregate_sorts_unordered_input_by_date() -> None:
	crop_id = uuid4()
	rows = [
		make_observation(crop_id, 3, date(2026, 4, 3)),
		make_observation(crop_id, 1, date(2026, 4, 1)),
		make_observation(crop_id, 2, date(2026, 4, 2)),
	]
	assert aggregate(rows).labels == ["Apr 1", "Apr 2", "Apr 3"]


def test_same_date_ties_break_on_insertion_id() -> None:
	crop_id = uuid4()
	later = make_observation(crop_id, 9, date(2026, 5, 5), soil_moisture=20)
	earlier = make_observation(crop_id, 4, date(2026, 5, 5), soil_moisture=70)
	assert [row.id for row in chronological([later, earlier])] == [4, 9]


def test_same_date_without_ids_keeps_input_order() -> None:
	first = SimpleNamespace(observation_date=date(2026, 5, 5), temperature=1.0, humidity=1.0, soil_moisture=1.0)
	second = SimpleNamespace(observation_date=date(2026, 5, 5), temperature=2.0, humidity=2.0, soil_moisture=2.0)
	assert chronological([first, second]) == [first, second]
	assert aggregate([first, second]).temperature == [1.0, 2.0]


def test_aggregate_is_idempotent() -> None:
	crop_id = uuid4()
	rows = [make_observation(crop_id, i, date(2026, 6, i)) for i in range(1, 6)]
	assert aggregate(rows) == aggregate(rows)


def test_date_labels_are_short_and_locale_free() -> None:
	assert format_date_label(date(2026, 1, 5)) == "Jan 5"
	assert format_date_label(date(2026, 12, 31)) == "Dec 31"


def test_build_view_without_observations_has_no_verdict() -> None:
	crop = make_crop()
	view = build_view(crop, [])
	assert view.crop is crop
	assert view.latest_verdict is None
	assert view.latest_observation is None
	assert len(view.trend) == 0


def test_build_view_scores_the_latest_observation() -> None:
	crop = make_crop()
	rows = [
		make_observation(crop.id, 1, date(2026, 1, 2), soil_moisture=70),
		make_observation(crop.id, 3, date(2026, 1, 3), soil_moisture=30),
		make_observation(crop.id, 2, date(2026, 1, 3), soil_moisture=60),
	]
	view = build_view(crop, rows)
	assert view.latest_observation is rows[1]
	assert view.latest_verdict == evaluate(rows[1])
	assert view.latest_verdict.status.value == "Poor"
	assert len(view.trend) == 3


def test_latest_observation_of_empty_is_none() -> None:
	assert latest_observation([]) is None
