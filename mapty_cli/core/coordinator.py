"""Event-driven view coordinator for one workout session.

The coordinator owns an ``AppContext`` (map handle, session store, pending
location, form and sort state) and reacts to one event at a time: location
picks, form submits, list clicks, sort clicks and reset. Rendering and
persistence happen as side effects through the ``Renderer`` and
``WorkoutPersistence`` collaborators.

The displayed list is tracked separately from the store. The store keeps
creation order; sorting only reorders ``AppContext.displayed``. Every new or
hydrated entry is shown next to the form, so the display is newest-first
until a sort is applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Protocol

from loguru import logger

from mapty_cli.core.constants import (
    DEFAULT_ZOOM_LEVEL,
    GEOLOCATION_FAILED_MESSAGE,
    RUNNING,
    SORT_CYCLES,
)
from mapty_cli.core.errors import (
    CoordinatorTerminatedError,
    GeolocationUnavailableError,
    InvalidInputError,
    MissingLocationError,
    PersistenceError,
)
from mapty_cli.core.geolocation import Geolocator
from mapty_cli.core.map import TerminalMap
from mapty_cli.core.models import (
    AnyWorkout,
    Location,
    WorkoutEntry,
    WorkoutRecord,
    as_record,
    entry_distance,
    entry_id,
    entry_location,
    popup_class,
    popup_text,
)
from mapty_cli.core.persistence import WorkoutPersistence
from mapty_cli.core.store import SessionStore
from mapty_cli.core.validation import create_workout


class FormState(str, Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"


@dataclass
class FormInput:
    """Raw form field values as typed by the user."""

    kind: str = RUNNING
    distance: Any = ""
    duration: Any = ""
    cadence: Any = ""
    elevation: Any = ""

    @property
    def extra(self) -> Any:
        return self.cadence if str(self.kind).lower() == RUNNING else self.elevation


class Renderer(Protocol):
    def render_workout(self, record: WorkoutRecord) -> None: ...

    def render_list(self, records: List[WorkoutRecord]) -> None: ...

    def alert(self, error: Exception) -> None: ...

    def clear_form(self) -> None: ...

    def reload(self) -> None: ...


@dataclass
class AppContext:
    """State owned by a single coordinator for the session's lifetime."""

    map: TerminalMap = field(default_factory=TerminalMap)
    store: SessionStore = field(default_factory=SessionStore)
    pending_location: Optional[Location] = None
    form_state: FormState = FormState.HIDDEN
    form: Optional[FormInput] = None
    sorted: bool = False
    displayed: List[str] = field(default_factory=list)
    order_before_sort: Optional[List[str]] = None


class ViewCoordinator:
    """Drive the session state machine from UI events."""

    def __init__(
        self,
        context: AppContext,
        persistence: WorkoutPersistence,
        geolocator: Geolocator,
        renderer: Renderer,
        zoom_level: int = DEFAULT_ZOOM_LEVEL,
        sort_cycle: str = "restore",
    ) -> None:
        if sort_cycle not in SORT_CYCLES:
            raise ValueError(f"Unsupported sort cycle: {sort_cycle}")
        self.context = context
        self.persistence = persistence
        self.geolocator = geolocator
        self.renderer = renderer
        self.zoom_level = zoom_level
        self.sort_cycle = sort_cycle
        self.terminated = False

    def _ensure_active(self) -> None:
        if self.terminated:
            raise CoordinatorTerminatedError("Session was reset; build a new coordinator")

    # Startup

    def start(self) -> None:
        """Hydrate from storage, then request the startup location."""
        self.hydrate()
        self.locate()

    def hydrate(self) -> int:
        self._ensure_active()
        try:
            records = self.persistence.load()
        except PersistenceError as exc:
            logger.warning("Ignoring stored workouts: {}", exc)
            self.renderer.alert(exc)
            records = []

        self.context.store.replace_all(records)
        self.context.displayed = []
        self.context.order_before_sort = None
        self.context.sorted = False
        for record in records:
            self._show(record)
        logger.debug("Hydrated {} workout(s)", len(records))
        return len(records)

    def locate(self) -> bool:
        """Center the map on the device position; False when unavailable."""
        self._ensure_active()
        try:
            center = self.geolocator.request_location()
        except GeolocationUnavailableError as exc:
            logger.warning("Map unavailable: {}", exc)
            self.renderer.alert(GeolocationUnavailableError(GEOLOCATION_FAILED_MESSAGE))
            return False

        ctx = self.context
        ctx.map.initialize(center, self.zoom_level)
        ctx.map.on_location_pick(self.pick_location)
        for entry in ctx.store.all():
            self._add_marker(entry)
        return True

    # Events

    def pick_location(self, location: Location) -> None:
        self._ensure_active()
        self.context.pending_location = location
        self.context.form_state = FormState.VISIBLE
        logger.debug("Location picked at {}", location)

    def submit(self, form: FormInput) -> Optional[AnyWorkout]:
        """Create a workout from the form; returns None when input is rejected."""
        self._ensure_active()
        ctx = self.context
        try:
            workout = create_workout(
                kind=form.kind,
                distance=form.distance,
                duration=form.duration,
                extra=form.extra,
                pending_location=ctx.pending_location,
            )
        except (MissingLocationError, InvalidInputError) as exc:
            logger.debug("Rejected workout input: {}", exc)
            ctx.form = form
            self.renderer.alert(exc)
            return None

        ctx.store.append(workout)
        self._add_marker(workout)
        self._show(workout)

        ctx.form = None
        ctx.pending_location = None
        ctx.form_state = FormState.HIDDEN
        self.renderer.clear_form()

        try:
            self.persistence.save(ctx.store)
        except PersistenceError as exc:
            logger.warning("Workout {} kept in memory only: {}", workout.id, exc)
            self.renderer.alert(exc)

        logger.debug("Created {} ({})", workout.description, workout.id)
        return workout

    def select(self, workout_id: str) -> Optional[WorkoutEntry]:
        """Pan the map to a listed workout; None when nothing happened."""
        self._ensure_active()
        entry = self.context.store.find_by_id(workout_id)
        if entry is None or not self.context.map.ready:
            return None
        self.context.map.pan_to(entry_location(entry), self.zoom_level, animate=True)
        return entry

    def toggle_sort(self) -> List[WorkoutRecord]:
        """Reorder the displayed list by distance; the store is untouched."""
        self._ensure_active()
        ctx = self.context
        if not ctx.sorted:
            ctx.order_before_sort = list(ctx.displayed)
            ctx.displayed = self._by_distance(ctx.displayed, descending=False)
            ctx.sorted = True
        else:
            if self.sort_cycle == "restore" and ctx.order_before_sort is not None:
                ctx.displayed = list(ctx.order_before_sort)
            else:
                ctx.displayed = self._by_distance(ctx.displayed, descending=True)
            ctx.order_before_sort = None
            ctx.sorted = False

        records = self.displayed_records()
        self.renderer.render_list(records)
        return records

    def reset(self) -> None:
        """Erase stored workouts and ask the host to reload from empty."""
        self._ensure_active()
        self.persistence.clear()
        self.terminated = True
        logger.debug("Session reset")
        self.renderer.reload()

    # Views

    def displayed_records(self) -> List[WorkoutRecord]:
        records: List[WorkoutRecord] = []
        for workout_id in self.context.displayed:
            entry = self.context.store.find_by_id(workout_id)
            if entry is not None:
                records.append(as_record(entry))
        return records

    def _by_distance(self, ids: List[str], descending: bool) -> List[str]:
        distances = {entry_id(entry): entry_distance(entry) for entry in self.context.store.all()}
        return sorted(ids, key=lambda item: distances.get(item, 0.0), reverse=descending)

    def _show(self, entry: WorkoutEntry) -> None:
        ctx = self.context
        workout_id = entry_id(entry)
        ctx.displayed.insert(0, workout_id)
        if ctx.order_before_sort is not None:
            ctx.order_before_sort.insert(0, workout_id)
        self.renderer.render_workout(as_record(entry))

    def _add_marker(self, entry: WorkoutEntry) -> None:
        if not self.context.map.ready:
            return
        record = as_record(entry)
        self.context.map.add_marker(entry_location(entry), popup_text(record), popup_class(record))
