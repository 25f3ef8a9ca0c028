from __future__ import annotations

from datetime import datetime

import pytest

from mapty_cli.core.models import (
    Cycling,
    Location,
    Running,
    WorkoutIdFactory,
    as_record,
    build_workout,
    describe,
    entry_distance,
    entry_id,
    entry_location,
    new_cycling,
    new_running,
    popup_class,
    popup_text,
    to_record,
)


@pytest.mark.parametrize(
    ("distance", "duration"),
    [(5.0, 25.0), (5.2, 24.0), (0.4, 1.5), (42.195, 180.0)],
)
def test_running_pace_is_duration_over_distance(distance: float, duration: float, home: Location) -> None:
    workout = new_running(distance, duration, home, 170)
    assert workout.pace_min_per_km == duration / distance


@pytest.mark.parametrize(
    ("distance", "duration"),
    [(20.0, 60.0), (27.0, 95.0), (3.3, 7.0)],
)
def test_cycling_speed_is_km_per_hour(distance: float, duration: float, home: Location) -> None:
    workout = new_cycling(distance, duration, home, 0)
    assert workout.speed_kmh == distance / (duration / 60)


def test_running_scenario(home: Location, created_at: datetime) -> None:
    workout = new_running(5, 25, home, 180, created_at=created_at)
    assert isinstance(workout, Running)
    assert workout.kind == "running"
    assert workout.pace_min_per_km == 5.0
    assert workout.description == "Running on April 3"


def test_cycling_scenario(home: Location, created_at: datetime) -> None:
    workout = new_cycling(20, 60, home, 400, created_at=created_at)
    assert isinstance(workout, Cycling)
    assert workout.speed_kmh == 20.0
    assert workout.description == "Cycling on April 3"


@pytest.mark.parametrize(
    ("kind", "when", "expected"),
    [
        ("running", datetime(2026, 1, 1), "Running on January 1"),
        ("cycling", datetime(2025, 12, 31, 23, 59), "Cycling on December 31"),
        ("running", datetime(2024, 2, 29), "Running on February 29"),
    ],
)
def test_describe_uses_month_name_and_unpadded_day(kind: str, when: datetime, expected: str) -> None:
    assert describe(kind, when) == expected


def test_workouts_are_immutable(home: Location) -> None:
    workout = new_running(5, 25, home, 180)
    with pytest.raises(AttributeError):
        workout.distance_km = 10  # type: ignore[misc]


def test_same_inputs_on_different_days_differ_only_in_date(home: Location) -> None:
    first = new_running(5, 25, home, 180, created_at=datetime(2026, 4, 3), workout_id="a")
    second = new_running(5, 25, home, 180, created_at=datetime(2026, 5, 9), workout_id="a")
    assert first.pace_min_per_km == second.pace_min_per_km
    assert first.description == "Running on April 3"
    assert second.description == "Running on May 9"
    assert first != second


def test_id_factory_issues_unique_ten_digit_ids(created_at: datetime) -> None:
    ids = WorkoutIdFactory()
    first = ids(created_at)
    second = ids(created_at)
    assert len(first) == 10
    assert first.isdigit()
    assert first != second
    assert int(second) == int(first) + 1


def test_ids_differ_for_back_to_back_workouts(home: Location) -> None:
    first = new_running(5, 25, home, 180)
    second = new_running(5, 25, home, 180)
    assert first.id != second.id


def test_build_workout_dispatches_on_kind(home: Location) -> None:
    assert isinstance(build_workout("running", 5, 25, home, 180), Running)
    assert isinstance(build_workout("cycling", 5, 25, home, -5), Cycling)
    with pytest.raises(ValueError):
        build_workout("swimming", 5, 25, home, 0)


def test_to_record_running_shape(home: Location, created_at: datetime) -> None:
    record = to_record(new_running(5, 25, home, 180, created_at=created_at, workout_id="1234567890"))
    assert record == {
        "id": "1234567890",
        "createdAt": "2026-04-03T09:30:00",
        "distanceKm": 5,
        "durationMin": 25,
        "location": [39.0, -12.0],
        "kind": "running",
        "description": "Running on April 3",
        "cadenceSpm": 180,
        "paceMinPerKm": 5.0,
    }


def test_to_record_cycling_carries_speed_and_elevation(home: Location) -> None:
    record = to_record(new_cycling(20, 60, home, 400))
    assert record["speedKmh"] == 20.0
    assert record["elevationGainM"] == 400
    assert "paceMinPerKm" not in record
    assert "cadenceSpm" not in record


def test_entry_helpers_accept_live_and_hydrated(home: Location, sample_cycling_record) -> None:
    live = new_running(5, 25, home, 180)
    assert entry_id(live) == live.id
    assert entry_location(live) == home
    assert entry_distance(live) == 5

    assert as_record(sample_cycling_record) is sample_cycling_record
    assert entry_id(sample_cycling_record) == "0000000102"
    assert entry_location(sample_cycling_record) == Location(39.1, -12.1)
    assert entry_distance(sample_cycling_record) == 27.0


def test_location_from_value_variants() -> None:
    assert Location.from_value([1, 2]) == Location(1.0, 2.0)
    assert Location.from_value({"lat": 1, "lng": 2}) == Location(1.0, 2.0)
    assert Location.from_value({"latitude": 1, "longitude": 2}) == Location(1.0, 2.0)


def test_popup_text_and_class(sample_running_record, sample_cycling_record) -> None:
    assert popup_text(sample_running_record) == "🏃‍♂️ Running on April 1"
    assert popup_text(sample_cycling_record) == "🚴‍♀️ Cycling on April 2"
    assert popup_class(sample_cycling_record) == "cycling-popup"
