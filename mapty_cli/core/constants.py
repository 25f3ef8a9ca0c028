"""Static constants and mappings for Mapty."""

from __future__ import annotations

STORAGE_KEY = "workouts"

RUNNING = "running"
CYCLING = "cycling"
WORKOUT_KINDS = (RUNNING, CYCLING)

KIND_ICONS = {RUNNING: "🏃‍♂️", CYCLING: "🚴‍♀️"}

MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

DEFAULT_ZOOM_LEVEL = 13
DEFAULT_GEOLOCATION_URL = "https://ipapi.co/json/"
MAP_VIEW_URL = "https://www.openstreetmap.org/#map={zoom}/{lat:.5f}/{lng:.5f}"

SORT_CYCLES = ("restore", "descending")

INVALID_INPUT_MESSAGE = "Inputs have to be positive numbers!"
MISSING_LOCATION_MESSAGE = "Pick a location on the map first"
GEOLOCATION_FAILED_MESSAGE = "Could not get your position"

REQUIRED_RECORD_KEYS = ("id", "kind", "distanceKm", "durationMin", "location", "description")
