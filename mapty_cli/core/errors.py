"""Error taxonomy shared by the workout core and the CLI."""

from __future__ import annotations


class MaptyError(RuntimeError):
    """Base class for workout domain failures."""


class MissingLocationError(MaptyError):
    """Raised when a workout is submitted before any location was picked."""


class InvalidInputError(MaptyError):
    """Raised when a required form field is not a finite (positive) number."""


class GeolocationUnavailableError(MaptyError):
    """Raised when the startup location request is declined or fails."""


class PersistenceError(MaptyError):
    """Raised for blob store read/write failures."""


class MapUnavailableError(MaptyError):
    """Raised when the map is used before it was initialized."""


class CoordinatorTerminatedError(MaptyError):
    """Raised when an event reaches a coordinator that was already reset."""
