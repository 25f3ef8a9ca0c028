"""Rich console rendering for workouts, alerts and the map view."""

from __future__ import annotations

import json
from typing import Any, Dict, List

import typer
from rich.markup import escape
from rich.table import Table

from mapty_cli.core.map import TerminalMap
from mapty_cli.core.models import WorkoutRecord
from mapty_cli.core.state import CLIState
from mapty_cli.utils.formatting import format_location, workout_row, workout_summary

WORKOUT_COLUMNS = ["id", "workout", "distance", "duration", "pace/speed", "cadence/elev"]


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    if state.plain_output:
        typer.echo(json.dumps(payload, separators=(",", ":"), ensure_ascii=False))
        return
    state.console.print_json(data=payload)


def print_workouts(state: CLIState, records: List[WorkoutRecord], title: str = "Workouts") -> None:
    """Print the displayed list in the active output mode."""
    if state.json_output:
        print_json_payload(state, {"workouts": records, "total": len(records)})
        return

    if state.plain_output:
        typer.echo("\t".join(WORKOUT_COLUMNS))
        for record in records:
            typer.echo("\t".join(workout_row(record)))
        typer.echo(f"total\t{len(records)}")
        return

    if not records:
        state.console.print("No workouts yet. Pick a location on the map to add one.")
        return

    table = Table(title=f"{title} ({len(records)} total)")
    for column in ("Id", "Workout", "Distance", "Duration", "Pace/Speed", "Cadence/Elev"):
        table.add_column(column)
    for record in records:
        table.add_row(*workout_row(record))
    state.console.print(table)


def map_payload(workout_map: TerminalMap) -> Dict[str, Any]:
    if not workout_map.ready or workout_map.center is None:
        return {"ready": False}
    return {
        "ready": True,
        "center": workout_map.center.to_list(),
        "zoom": workout_map.zoom_level,
        "url": workout_map.view_url(),
        "markers": [
            {
                "location": marker.location.to_list(),
                "popup": marker.popup_text,
                "class": marker.style_class,
            }
            for marker in workout_map.markers
        ],
    }


def print_map(state: CLIState, workout_map: TerminalMap) -> None:
    payload = map_payload(workout_map)
    if state.json_output:
        print_json_payload(state, {"map": payload})
        return

    if not payload["ready"]:
        if state.plain_output:
            typer.echo("map\tunavailable")
        else:
            state.console.print("Map is unavailable")
        return

    if state.plain_output:
        typer.echo(f"url\t{payload['url']}")
        for marker in payload["markers"]:
            typer.echo(f"marker\t{format_location(marker['location'])}\t{marker['popup']}")
        return

    state.console.print(f"Map view: {payload['url']}")
    if payload["markers"]:
        table = Table(title="Markers")
        table.add_column("Location")
        table.add_column("Popup")
        for marker in payload["markers"]:
            table.add_row(format_location(marker["location"]), marker["popup"])
        state.console.print(table)


class ConsoleRenderer:
    """UI collaborator for the view coordinator.

    Everything rendered is recorded so one-shot commands can report it; with
    ``echo`` enabled each side effect is also printed as it happens.
    """

    def __init__(self, state: CLIState, echo: bool = True) -> None:
        self.state = state
        self.echo = echo
        self.rendered: List[WorkoutRecord] = []
        self.alerts: List[str] = []
        self.form_cleared = False
        self.reloaded = False

    def _emit_event(self, event: str, **fields: Any) -> None:
        typer.echo(json.dumps({"event": event, **fields}, separators=(",", ":"), ensure_ascii=False))

    def render_workout(self, record: WorkoutRecord) -> None:
        self.rendered.append(record)
        if not self.echo:
            return
        if self.state.json_output:
            self._emit_event("workout", workout=record)
        elif self.state.plain_output:
            typer.echo("\t".join(workout_row(record)))
        else:
            self.state.console.print(f"[bold]{record.get('id')}[/bold]  {workout_summary(record)}")

    def render_list(self, records: List[WorkoutRecord]) -> None:
        if not self.echo:
            return
        if self.state.json_output:
            self._emit_event("list", workouts=records)
            return
        print_workouts(self.state, records)

    def alert(self, error: Exception) -> None:
        message = str(error)
        self.alerts.append(message)
        if not self.echo:
            return
        if self.state.json_output:
            self._emit_event("alert", error=type(error).__name__, message=message)
        elif self.state.plain_output:
            typer.echo(f"alert\t{message}")
        else:
            self.state.console.print(f"[red]{escape(message)}[/red]")

    def clear_form(self) -> None:
        self.form_cleared = True

    def reload(self) -> None:
        self.reloaded = True
        if not self.echo:
            return
        if self.state.json_output:
            self._emit_event("reload")
        elif self.state.plain_output:
            typer.echo("status\treset")
        else:
            self.state.console.print("Workouts cleared. Reloading session...")
