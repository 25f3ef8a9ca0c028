"""One-shot workout commands: add, list, show and reset."""

from __future__ import annotations

from typing import Optional

import typer

from mapty_cli.commands.common import build_coordinator, fail, get_state, print_alerts
from mapty_cli.core.constants import MISSING_LOCATION_MESSAGE, WORKOUT_KINDS
from mapty_cli.core.coordinator import FormInput
from mapty_cli.core.errors import PersistenceError
from mapty_cli.core.models import Location, as_record, to_record
from mapty_cli.render.console import ConsoleRenderer, map_payload, print_json_payload, print_workouts
from mapty_cli.utils.formatting import format_location, workout_summary


def add_command(
    ctx: typer.Context,
    workout_type: str = typer.Option("running", "--type", help="Workout type: running|cycling"),
    distance: str = typer.Option("", help="Distance in km"),
    duration: str = typer.Option("", help="Duration in minutes"),
    cadence: str = typer.Option("", help="Cadence in steps/min (running)"),
    elevation: str = typer.Option("", help="Elevation gain in meters (cycling)"),
    lat: Optional[float] = typer.Option(None, help="Latitude of the workout location"),
    lng: Optional[float] = typer.Option(None, help="Longitude of the workout location"),
) -> None:
    """Pick a location and record a workout there."""
    state = get_state(ctx)

    if workout_type not in WORKOUT_KINDS:
        raise typer.BadParameter("--type must be one of: running, cycling")
    if (lat is None) != (lng is None):
        raise typer.BadParameter("--lat and --lng must be given together")

    renderer = ConsoleRenderer(state, echo=False)
    coordinator = build_coordinator(state, renderer)
    coordinator.hydrate()

    if lat is not None and lng is not None:
        coordinator.pick_location(Location(lat, lng))

    alerts_before = len(renderer.alerts)
    workout = coordinator.submit(
        FormInput(
            kind=workout_type,
            distance=distance,
            duration=duration,
            cadence=cadence,
            elevation=elevation,
        )
    )
    if workout is None:
        message = renderer.alerts[-1] if renderer.alerts else MISSING_LOCATION_MESSAGE
        fail(state, message)
        return

    record = to_record(workout)
    persisted = len(renderer.alerts) == alerts_before
    payload = {
        "status": "created",
        "persisted": persisted,
        "workout": record,
        "total": len(coordinator.context.store),
    }

    if state.json_output:
        print_json_payload(state, payload)
    elif state.plain_output:
        typer.echo("status\tcreated")
        typer.echo(f"id\t{workout.id}")
        typer.echo(f"description\t{workout.description}")
        typer.echo(f"location\t{format_location(record['location'])}")
        typer.echo(f"persisted\t{str(persisted).lower()}")
    else:
        state.console.print(f"Created {workout_summary(record)}")
        state.console.print(f"Id: {workout.id}")

    if not persisted:
        if not state.json_output:
            print_alerts(state, renderer.alerts[alerts_before:])
        raise typer.Exit(code=1)


def list_command(
    ctx: typer.Context,
    sort: bool = typer.Option(False, "--sort", help="Order the list by distance (shortest first)"),
) -> None:
    """List stored workouts, newest first."""
    state = get_state(ctx)
    renderer = ConsoleRenderer(state, echo=False)
    coordinator = build_coordinator(state, renderer)
    coordinator.hydrate()

    records = coordinator.toggle_sort() if sort else coordinator.displayed_records()

    if state.json_output:
        print_json_payload(state, {"workouts": records, "total": len(records), "alerts": renderer.alerts})
        return

    print_alerts(state, renderer.alerts)
    print_workouts(state, records)


def show_command(
    ctx: typer.Context,
    workout_id: str = typer.Argument(..., help="Workout ID"),
) -> None:
    """Center the map on a workout."""
    state = get_state(ctx)
    renderer = ConsoleRenderer(state, echo=False)
    coordinator = build_coordinator(state, renderer)
    coordinator.start()

    entry = coordinator.context.store.find_by_id(workout_id)
    if entry is None:
        fail(state, f"Workout {workout_id} not found")
        return

    moved = coordinator.select(workout_id)
    view = map_payload(coordinator.context.map)
    record = as_record(entry)
    payload = {
        "status": "moved" if moved is not None else "map_unavailable",
        "workout": record,
        "map": view,
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"status\t{payload['status']}")
        typer.echo(f"id\t{workout_id}")
        typer.echo(f"description\t{record.get('description')}")
        if view["ready"]:
            typer.echo(f"url\t{view['url']}")
        return

    state.console.print(workout_summary(record))
    if view["ready"]:
        state.console.print(f"Map view: {view['url']}")
    else:
        print_alerts(state, renderer.alerts)
        state.console.print("Map is unavailable; nothing to center")


def reset_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Skip confirmation prompt"),
) -> None:
    """Delete every stored workout."""
    state = get_state(ctx)

    if not force:
        confirmed = typer.confirm("Delete all stored workouts?", default=False)
        if not confirmed:
            raise typer.Exit(code=0)

    renderer = ConsoleRenderer(state, echo=False)
    coordinator = build_coordinator(state, renderer)
    removed = coordinator.hydrate()
    try:
        coordinator.reset()
    except PersistenceError as exc:
        fail(state, str(exc))
        return

    payload = {"status": "reset", "removed": removed}
    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo("status\treset")
        typer.echo(f"removed\t{removed}")
        return

    state.console.print(f"Removed {removed} workout(s)")
