"""Mapty: record running and cycling workouts on a map from the terminal."""

__version__ = "0.1.0"
