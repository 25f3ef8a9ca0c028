"""Configuration commands."""

from __future__ import annotations

from typing import Any, List, Tuple

import typer

from mapty_cli.commands.common import fail, get_state
from mapty_cli.core.config import ConfigError, update_config_file
from mapty_cli.render.console import print_json_payload

app = typer.Typer(help="Inspect and edit Mapty configuration")


def _flatten(prefix: str, value: Any, out: List[Tuple[str, Any]]) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            _flatten(f"{prefix}.{key}" if prefix else str(key), item, out)
        return
    out.append((prefix, value))


@app.command("show")
def show_command(ctx: typer.Context) -> None:
    """Print the effective configuration."""
    state = get_state(ctx)
    payload = {
        "config_file": str(state.config_path),
        "storage_file": str(state.storage_file),
        "config": state.config,
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    rows: List[Tuple[str, Any]] = []
    _flatten("", state.config, rows)
    if state.plain_output:
        typer.echo(f"config_file\t{state.config_path}")
        typer.echo(f"storage_file\t{state.storage_file}")
        for key, value in rows:
            typer.echo(f"{key}\t{value}")
        return

    state.console.print(f"Config file: {state.config_path}")
    state.console.print(f"Storage file: {state.storage_file}")
    for key, value in rows:
        state.console.print(f"{key} = {value!r}")


@app.command("home")
def home_command(
    ctx: typer.Context,
    latitude: float = typer.Option(..., "--lat", help="Home latitude"),
    longitude: float = typer.Option(..., "--lng", help="Home longitude"),
) -> None:
    """Use a fixed home location instead of IP geolocation."""
    state = get_state(ctx)
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise typer.BadParameter("latitude must be within ±90 and longitude within ±180")

    try:
        path = update_config_file(
            {"geolocation": {"provider": "fixed", "latitude": latitude, "longitude": longitude}},
            state.config_path,
        )
    except ConfigError as exc:
        fail(state, str(exc), code=2)
        return

    payload = {"status": "saved", "config_file": str(path), "home": [latitude, longitude]}
    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo("status\tsaved")
        typer.echo(f"config_file\t{path}")
        return

    state.console.print(f"Home location saved to {path}")
