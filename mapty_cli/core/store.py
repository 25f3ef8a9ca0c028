"""In-memory ordered collection of the session's workouts."""

from __future__ import annotations

from typing import Iterable, List, Optional

from mapty_cli.core.models import WorkoutEntry, entry_id


class SessionStore:
    """Workouts in creation order; append-only apart from hydration."""

    def __init__(self, workouts: Optional[Iterable[WorkoutEntry]] = None) -> None:
        self._workouts: List[WorkoutEntry] = list(workouts or [])

    def __len__(self) -> int:
        return len(self._workouts)

    def append(self, workout: WorkoutEntry) -> None:
        self._workouts.append(workout)

    def replace_all(self, workouts: Iterable[WorkoutEntry]) -> None:
        self._workouts = list(workouts)

    def all(self) -> List[WorkoutEntry]:
        return list(self._workouts)

    def find_by_id(self, workout_id: str) -> Optional[WorkoutEntry]:
        for workout in self._workouts:
            if entry_id(workout) == workout_id:
                return workout
        return None
