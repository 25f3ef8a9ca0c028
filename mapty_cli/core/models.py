"""Workout entities and their persisted record shape.

Live workouts are frozen dataclasses built only through ``new_running`` and
``new_cycling``; those are the single place where derived metrics and the
description are computed. Hydrated workouts are plain dict records with the
same keys ``to_record`` produces, and callers read them through ``as_record``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Union

from mapty_cli.core.constants import CYCLING, KIND_ICONS, MONTHS, RUNNING

WorkoutRecord = Dict[str, Any]


@dataclass(frozen=True)
class Location:
    """Latitude/longitude pair."""

    latitude: float
    longitude: float

    def to_list(self) -> list[float]:
        return [self.latitude, self.longitude]

    @classmethod
    def from_value(cls, value: Union["Location", Sequence[float], Dict[str, Any]]) -> "Location":
        """Build a location from a ``[lat, lng]`` pair or a ``{lat, lng}`` mapping."""
        if isinstance(value, Location):
            return value
        if isinstance(value, dict):
            lat = value.get("lat", value.get("latitude"))
            lng = value.get("lng", value.get("longitude"))
            return cls(float(lat), float(lng))
        lat, lng = value
        return cls(float(lat), float(lng))


class WorkoutIdFactory:
    """Issue ids from the last 10 digits of the creation time in milliseconds."""

    def __init__(self) -> None:
        self._last = -1

    def __call__(self, created_at: datetime) -> str:
        token = int(created_at.timestamp() * 1000) % 10**10
        if token <= self._last:
            token = self._last + 1
        self._last = token
        return str(token).zfill(10)


_next_id = WorkoutIdFactory()


@dataclass(frozen=True)
class Workout:
    id: str
    created_at: datetime
    distance_km: float
    duration_min: float
    location: Location
    kind: str
    description: str


@dataclass(frozen=True)
class Running(Workout):
    cadence_spm: float
    pace_min_per_km: float


@dataclass(frozen=True)
class Cycling(Workout):
    elevation_gain_m: float
    speed_kmh: float


AnyWorkout = Union[Running, Cycling]
WorkoutEntry = Union[Running, Cycling, WorkoutRecord]


def describe(kind: str, created_at: datetime) -> str:
    """Return ``<Kind> on <Month> <day>``."""
    return f"{kind[:1].upper()}{kind[1:]} on {MONTHS[created_at.month - 1]} {created_at.day}"


def new_running(
    distance_km: float,
    duration_min: float,
    location: Location,
    cadence_spm: float,
    created_at: Optional[datetime] = None,
    workout_id: Optional[str] = None,
) -> Running:
    """Build a running workout; pace is min/km."""
    created = created_at or datetime.now()
    return Running(
        id=workout_id or _next_id(created),
        created_at=created,
        distance_km=distance_km,
        duration_min=duration_min,
        location=location,
        kind=RUNNING,
        description=describe(RUNNING, created),
        cadence_spm=cadence_spm,
        pace_min_per_km=duration_min / distance_km,
    )


def new_cycling(
    distance_km: float,
    duration_min: float,
    location: Location,
    elevation_gain_m: float,
    created_at: Optional[datetime] = None,
    workout_id: Optional[str] = None,
) -> Cycling:
    """Build a cycling workout; speed is km/h."""
    created = created_at or datetime.now()
    return Cycling(
        id=workout_id or _next_id(created),
        created_at=created,
        distance_km=distance_km,
        duration_min=duration_min,
        location=location,
        kind=CYCLING,
        description=describe(CYCLING, created),
        elevation_gain_m=elevation_gain_m,
        speed_kmh=distance_km / (duration_min / 60),
    )


def build_workout(
    kind: str,
    distance_km: float,
    duration_min: float,
    location: Location,
    extra: float,
    created_at: Optional[datetime] = None,
) -> AnyWorkout:
    """Dispatch on the kind tag; ``extra`` is cadence or elevation gain."""
    if kind == RUNNING:
        return new_running(distance_km, duration_min, location, extra, created_at=created_at)
    if kind == CYCLING:
        return new_cycling(distance_km, duration_min, location, extra, created_at=created_at)
    raise ValueError(f"Unsupported workout kind: {kind}")


def to_record(workout: AnyWorkout) -> WorkoutRecord:
    """Serialize a live workout, derived fields included."""
    record: WorkoutRecord = {
        "id": workout.id,
        "createdAt": workout.created_at.isoformat(),
        "distanceKm": workout.distance_km,
        "durationMin": workout.duration_min,
        "location": workout.location.to_list(),
        "kind": workout.kind,
        "description": workout.description,
    }
    if isinstance(workout, Running):
        record["cadenceSpm"] = workout.cadence_spm
        record["paceMinPerKm"] = workout.pace_min_per_km
    else:
        record["elevationGainM"] = workout.elevation_gain_m
        record["speedKmh"] = workout.speed_kmh
    return record


def as_record(entry: WorkoutEntry) -> WorkoutRecord:
    """Record view of a live workout or a hydrated record (returned as-is)."""
    if isinstance(entry, Workout):
        return to_record(entry)
    return entry


def entry_id(entry: WorkoutEntry) -> str:
    if isinstance(entry, Workout):
        return entry.id
    return str(entry.get("id"))


def entry_location(entry: WorkoutEntry) -> Location:
    if isinstance(entry, Workout):
        return entry.location
    return Location.from_value(entry["location"])


def entry_distance(entry: WorkoutEntry) -> float:
    if isinstance(entry, Workout):
        return entry.distance_km
    return float(entry.get("distanceKm") or 0)


def popup_text(record: WorkoutRecord) -> str:
    """Marker popup: kind icon followed by the stored description."""
    icon = KIND_ICONS.get(record.get("kind", ""), "")
    return f"{icon} {record.get('description', '')}".strip()


def popup_class(record: WorkoutRecord) -> str:
    return f"{record.get('kind', 'workout')}-popup"
