"""Gate raw form input before a workout is constructed."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional

from mapty_cli.core.constants import (
    INVALID_INPUT_MESSAGE,
    MISSING_LOCATION_MESSAGE,
    RUNNING,
    WORKOUT_KINDS,
)
from mapty_cli.core.errors import InvalidInputError, MissingLocationError
from mapty_cli.core.models import AnyWorkout, Location, new_cycling, new_running


def to_number(value: Any) -> float:
    """Coerce a raw form value the way a numeric form field does.

    Blank strings become ``0``; unparsable values become ``nan``.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip() if value is not None else ""
    if not text:
        return 0.0
    if "_" in text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def valid_inputs(*inputs: float) -> bool:
    return all(math.isfinite(value) for value in inputs)


def all_positive(*inputs: float) -> bool:
    return all(value > 0 for value in inputs)


def create_workout(
    kind: str,
    distance: Any,
    duration: Any,
    extra: Any,
    pending_location: Optional[Location],
    created_at: Optional[datetime] = None,
) -> AnyWorkout:
    """Validate raw input and build the workout variant for ``kind``.

    ``extra`` is cadence for running and elevation gain for cycling. Elevation
    gain only has to be finite; every other field must also be positive.
    Pending location is not consumed here.
    """
    if pending_location is None:
        raise MissingLocationError(MISSING_LOCATION_MESSAGE)

    kind_key = str(kind or "").strip().lower()
    if kind_key not in WORKOUT_KINDS:
        raise InvalidInputError(f"Unsupported workout type: {kind}")

    distance_km = to_number(distance)
    duration_min = to_number(duration)
    extra_value = to_number(extra)

    if not valid_inputs(distance_km, duration_min, extra_value):
        raise InvalidInputError(INVALID_INPUT_MESSAGE)

    if kind_key == RUNNING:
        if not all_positive(distance_km, duration_min, extra_value):
            raise InvalidInputError(INVALID_INPUT_MESSAGE)
        cadence = int(extra_value) if extra_value.is_integer() else extra_value
        return new_running(distance_km, duration_min, pending_location, cadence, created_at=created_at)

    # TODO: confirm with product whether negative elevation gain should be rejected for cycling.
    if not all_positive(distance_km, duration_min):
        raise InvalidInputError(INVALID_INPUT_MESSAGE)
    return new_cycling(distance_km, duration_min, pending_location, extra_value, created_at=created_at)
