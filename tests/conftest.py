from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from typer.testing import CliRunner

from mapty_cli.core.coordinator import AppContext, ViewCoordinator
from mapty_cli.core.errors import GeolocationUnavailableError, PersistenceError
from mapty_cli.core.geolocation import FixedGeolocator
from mapty_cli.core.models import Location
from mapty_cli.core.persistence import WorkoutPersistence


class MemoryBlobStore:
    """Dict-backed blob store; can be told to fail writes."""

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(data or {})
        self.fail_writes = False
        self.fail_reads = False

    def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise PersistenceError("storage read failed")
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError("storage write failed")
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class RecordingRenderer:
    def __init__(self) -> None:
        self.rendered: List[Dict[str, Any]] = []
        self.lists: List[List[Dict[str, Any]]] = []
        self.alerts: List[Exception] = []
        self.cleared = 0
        self.reloaded = False

    def render_workout(self, record: Dict[str, Any]) -> None:
        self.rendered.append(record)

    def render_list(self, records: List[Dict[str, Any]]) -> None:
        self.lists.append(records)

    def alert(self, error: Exception) -> None:
        self.alerts.append(error)

    def clear_form(self) -> None:
        self.cleared += 1

    def reload(self) -> None:
        self.reloaded = True


class FailingGeolocator:
    def request_location(self) -> Location:
        raise GeolocationUnavailableError("User denied Geolocation")


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def created_at() -> datetime:
    return datetime(2026, 4, 3, 9, 30, 0)


@pytest.fixture()
def home() -> Location:
    return Location(39.0, -12.0)


@pytest.fixture()
def blob_store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture()
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture()
def failing_geolocator() -> FailingGeolocator:
    return FailingGeolocator()


@pytest.fixture()
def make_coordinator(blob_store: MemoryBlobStore, renderer: RecordingRenderer, home: Location):
    def _make(geolocator: Any = None, sort_cycle: str = "restore", started: bool = True) -> ViewCoordinator:
        coordinator = ViewCoordinator(
            context=AppContext(),
            persistence=WorkoutPersistence(blob_store),
            geolocator=geolocator or FixedGeolocator(home),
            renderer=renderer,
            sort_cycle=sort_cycle,
        )
        if started:
            coordinator.start()
        return coordinator

    return _make


@pytest.fixture()
def sample_running_record() -> Dict[str, Any]:
    return {
        "id": "0000000101",
        "createdAt": "2026-04-01T07:00:00",
        "distanceKm": 5.2,
        "durationMin": 24.0,
        "location": [39.0, -12.0],
        "kind": "running",
        "description": "Running on April 1",
        "cadenceSpm": 178.0,
        "paceMinPerKm": 4.615384615384615,
    }


@pytest.fixture()
def sample_cycling_record() -> Dict[str, Any]:
    return {
        "id": "0000000102",
        "createdAt": "2026-04-02T18:00:00",
        "distanceKm": 27.0,
        "durationMin": 95.0,
        "location": [39.1, -12.1],
        "kind": "cycling",
        "description": "Cycling on April 2",
        "elevationGainM": 523.0,
        "speedKmh": 17.05263157894737,
    }


@pytest.fixture()
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Config with a fixed home location and storage under tmp_path; returns config path."""
    storage = tmp_path / "storage.json"
    monkeypatch.setenv("MAPTY_STORAGE_FILE", str(storage))
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        """
[geolocation]
provider = "fixed"
latitude = 39.0
longitude = -12.0
""".strip()
        + "\n"
    )
    return config_path
