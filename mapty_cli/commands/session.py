"""Interactive session: feed map, form, list, sort and reset events to one coordinator."""

from __future__ import annotations

import shlex
from typing import Callable, Dict, List

import typer

from mapty_cli.commands.common import build_coordinator, get_state
from mapty_cli.core.coordinator import FormInput, FormState, ViewCoordinator
from mapty_cli.core.errors import MapUnavailableError, MaptyError
from mapty_cli.core.models import Location
from mapty_cli.core.state import CLIState
from mapty_cli.render.console import ConsoleRenderer, print_map, print_workouts

HELP_TEXT = """Commands:
  pick LAT LNG                         click the map at a location
  submit running DIST DUR CADENCE      submit the workout form
  submit cycling DIST DUR ELEVATION
  select ID                            click a workout in the list
  sort                                 toggle sorting by distance
  list                                 show the displayed list
  map                                  show the map view and markers
  reset                                delete every workout and reload
  help                                 show this help
  quit                                 leave the session"""


class SessionShell:
    """Parse typed commands into coordinator events."""

    def __init__(self, state: CLIState) -> None:
        self.state = state
        self.renderer = ConsoleRenderer(state, echo=True)
        self.coordinator = self._boot()
        self._handlers: Dict[str, Callable[[List[str]], None]] = {
            "pick": self._pick,
            "submit": self._submit,
            "select": self._select,
            "sort": self._sort,
            "list": self._list,
            "map": self._map,
            "reset": self._reset,
            "help": self._help,
        }

    def _boot(self) -> ViewCoordinator:
        self.renderer.reloaded = False
        coordinator = build_coordinator(self.state, self.renderer)
        coordinator.start()
        return coordinator

    def say(self, text: str) -> None:
        if self.state.json_output:
            return
        if self.state.plain_output:
            typer.echo(text)
        else:
            self.state.console.print(text)

    def handle(self, line: str) -> bool:
        """Run one command line; False means the session should end."""
        try:
            parts = shlex.split(line)
        except ValueError as exc:
            self.say(f"Could not parse command: {exc}")
            return True
        if not parts:
            return True

        name, args = parts[0].lower(), parts[1:]
        if name in {"quit", "exit"}:
            return False

        handler = self._handlers.get(name)
        if handler is None:
            self.say(f"Unknown command '{name}'. Type 'help' for the list of commands.")
            return True

        try:
            handler(args)
        except MaptyError as exc:
            self.renderer.alert(exc)

        if self.renderer.reloaded:
            self.coordinator = self._boot()
        return True

    def _pick(self, args: List[str]) -> None:
        if len(args) != 2:
            self.say("Usage: pick LAT LNG")
            return
        try:
            location = Location(float(args[0]), float(args[1]))
        except ValueError:
            self.say("Latitude and longitude must be numbers")
            return
        workout_map = self.coordinator.context.map
        if not workout_map.ready:
            raise MapUnavailableError("Map is unavailable; cannot pick a location")
        workout_map.pick(location)
        if self.coordinator.context.form_state is FormState.VISIBLE:
            self.say("Form open. Submit the workout details.")

    def _submit(self, args: List[str]) -> None:
        if len(args) != 4:
            self.say("Usage: submit running|cycling DIST DUR CADENCE|ELEVATION")
            return
        kind, distance, duration, extra = args
        form = FormInput(kind=kind.lower(), distance=distance, duration=duration)
        if form.kind == "cycling":
            form.elevation = extra
        else:
            form.cadence = extra
        self.coordinator.submit(form)

    def _select(self, args: List[str]) -> None:
        if len(args) != 1:
            self.say("Usage: select ID")
            return
        entry = self.coordinator.select(args[0])
        if entry is None:
            self.say(f"Nothing to center for {args[0]}")
            return
        print_map(self.state, self.coordinator.context.map)

    def _sort(self, args: List[str]) -> None:
        self.coordinator.toggle_sort()

    def _list(self, args: List[str]) -> None:
        print_workouts(self.state, self.coordinator.displayed_records())

    def _map(self, args: List[str]) -> None:
        print_map(self.state, self.coordinator.context.map)

    def _reset(self, args: List[str]) -> None:
        self.coordinator.reset()

    def _help(self, args: List[str]) -> None:
        self.say(HELP_TEXT)


def session_command(ctx: typer.Context) -> None:
    """Start an interactive workout session."""
    state = get_state(ctx)
    shell = SessionShell(state)
    shell.say("Type 'help' for commands, 'quit' to leave.")

    while True:
        try:
            line = typer.prompt("mapty", default="", show_default=False, prompt_suffix="> ")
        except typer.Abort:
            break
        if not shell.handle(line):
            break
