from __future__ import annotations

import json
from pathlib import Path

import pytest

from mapty_cli.core.errors import PersistenceError
from mapty_cli.core.models import Location, new_cycling, new_running, to_record
from mapty_cli.core.persistence import FileBlobStore, WorkoutPersistence
from mapty_cli.core.store import SessionStore


def test_save_then_load_round_trips_every_field(blob_store, home: Location, created_at) -> None:
    store = SessionStore()
    store.append(new_running(5.2, 24, home, 178, created_at=created_at))
    store.append(new_cycling(27, 95, Location(39.1, -12.1), -5, created_at=created_at))
    store.append(new_running(5.2, 24, home, 178, created_at=created_at))

    persistence = WorkoutPersistence(blob_store)
    persistence.save(store)
    loaded = persistence.load()

    assert loaded == [to_record(workout) for workout in store.all()]
    assert [record["kind"] for record in loaded] == ["running", "cycling", "running"]


def test_save_includes_hydrated_records_verbatim(blob_store, sample_running_record, home: Location) -> None:
    store = SessionStore([sample_running_record])
    store.append(new_cycling(20, 60, home, 400))
    persistence = WorkoutPersistence(blob_store)
    persistence.save(store)

    loaded = persistence.load()
    assert loaded[0] == sample_running_record
    assert loaded[1]["speedKmh"] == 20.0


def test_save_overwrites_previous_blob(blob_store, home: Location) -> None:
    persistence = WorkoutPersistence(blob_store)
    persistence.save(SessionStore([new_running(5, 25, home, 180)]))
    persistence.save(SessionStore())
    assert json.loads(blob_store.data["workouts"]) == []


def test_load_absent_key_is_empty(blob_store) -> None:
    assert WorkoutPersistence(blob_store).load() == []


def test_load_null_blob_is_empty(blob_store) -> None:
    blob_store.data["workouts"] = "null"
    assert WorkoutPersistence(blob_store).load() == []


@pytest.mark.parametrize(
    "raw",
    [
        "{broken",
        '{"id": 1}',
        "[1, 2]",
        '[{"id": "1", "kind": "running", "distanceKm": 5, "durationMin": 25, "description": "Running on April 1"}]',
        '[{"id": "1", "kind": "running", "distanceKm": 5, "durationMin": 25, "description": "x", "location": "here"}]',
    ],
)
def test_load_rejects_malformed_blob(blob_store, raw: str) -> None:
    blob_store.data["workouts"] = raw
    with pytest.raises(PersistenceError):
        WorkoutPersistence(blob_store).load()


def test_clear_is_idempotent(blob_store, home: Location) -> None:
    persistence = WorkoutPersistence(blob_store)
    persistence.save(SessionStore([new_running(5, 25, home, 180)]))
    persistence.clear()
    persistence.clear()
    assert "workouts" not in blob_store.data
    assert persistence.load() == []


def test_file_blob_store_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    store = FileBlobStore(path)
    assert store.get("workouts") is None

    store.set("workouts", "[]")
    store.set("other", "x")
    assert path.exists()
    assert FileBlobStore(path).get("workouts") == "[]"

    store.remove("workouts")
    store.remove("workouts")
    assert store.get("workouts") is None
    assert store.get("other") == "x"


def test_file_blob_store_remove_without_file(tmp_path: Path) -> None:
    store = FileBlobStore(tmp_path / "missing.json")
    store.remove("workouts")
    assert not (tmp_path / "missing.json").exists()


def test_file_blob_store_corrupt_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{not json")
    with pytest.raises(PersistenceError):
        FileBlobStore(path).get("workouts")

    path.write_text("[]")
    with pytest.raises(PersistenceError):
        FileBlobStore(path).get("workouts")


def test_persistence_with_file_store(tmp_path: Path, home: Location) -> None:
    persistence = WorkoutPersistence(FileBlobStore(tmp_path / "storage.json"))
    workout = new_running(5, 25, home, 180)
    persistence.save(SessionStore([workout]))

    reopened = WorkoutPersistence(FileBlobStore(tmp_path / "storage.json"))
    assert reopened.load() == [to_record(workout)]


def test_file_blob_store_remove_resets_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{not json")

    store = FileBlobStore(path)
    store.remove("workouts")

    assert json.loads(path.read_text()) == {}
    assert store.get("workouts") is None


def test_clear_recovers_from_corrupt_file(tmp_path: Path, home: Location) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[]")
    persistence = WorkoutPersistence(FileBlobStore(path))

    persistence.clear()
    assert persistence.load() == []

    persistence.save(SessionStore([new_running(5, 25, home, 180)]))
    assert len(persistence.load()) == 1
