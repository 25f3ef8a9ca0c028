"""Shared command helpers."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import typer
from rich.markup import escape

from mapty_cli.core.config import resolve_zoom_level
from mapty_cli.core.coordinator import AppContext, Renderer, ViewCoordinator
from mapty_cli.core.geolocation import Geolocator, geolocator_from_config
from mapty_cli.core.persistence import BlobStore, FileBlobStore, WorkoutPersistence
from mapty_cli.core.state import CLIState
from mapty_cli.render.console import print_json_payload


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def build_coordinator(
    state: CLIState,
    renderer: Renderer,
    blob_store: Optional[BlobStore] = None,
    geolocator: Optional[Geolocator] = None,
) -> ViewCoordinator:
    """Wire a fresh coordinator to the configured storage and location provider."""
    storage = blob_store or FileBlobStore(state.storage_file)
    return ViewCoordinator(
        context=AppContext(),
        persistence=WorkoutPersistence(storage),
        geolocator=geolocator or geolocator_from_config(state.config),
        renderer=renderer,
        zoom_level=resolve_zoom_level(state.config),
        sort_cycle=state.sort_cycle,
    )


def fail(state: CLIState, message: str, code: int = 1, extra: Optional[Dict[str, Any]] = None) -> None:
    """Report an error in the active output mode and exit."""
    if state.json_output:
        print_json_payload(state, {"status": "error", "message": message, **(extra or {})})
    elif state.plain_output:
        typer.echo("status\terror")
        typer.echo(f"message\t{message}")
    else:
        state.console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code=code)


def print_alerts(state: CLIState, alerts: List[str]) -> None:
    """Show non-fatal alerts collected by a quiet renderer."""
    for message in alerts:
        if state.plain_output:
            typer.echo(f"alert\t{message}")
        else:
            state.console.print(f"[yellow]{escape(message)}[/yellow]")
