"""Session persistence on top of a key/value blob store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from loguru import logger

from mapty_cli.core.constants import REQUIRED_RECORD_KEYS, STORAGE_KEY
from mapty_cli.core.errors import PersistenceError
from mapty_cli.core.models import Location, WorkoutRecord, as_record
from mapty_cli.core.store import SessionStore


class BlobStore(Protocol):
    """Synchronous string key/value store."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class FileBlobStore:
    """Key/value blobs kept in a single JSON object on disk."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            loaded = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Failed to read storage file {self.path}: {exc}") from exc
        if not isinstance(loaded, dict):
            raise PersistenceError(f"Storage file {self.path} must contain an object at the root")
        return {str(key): str(value) for key, value in loaded.items()}

    def _write(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Failed to write storage file {self.path}: {exc}") from exc

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        try:
            data = self._read()
        except PersistenceError as exc:
            logger.warning("Resetting unreadable storage file: {}", exc)
            self._write({})
            return
        if key not in data:
            return
        del data[key]
        self._write(data)


class WorkoutPersistence:
    """Serialize the session store under one well-known key."""

    def __init__(self, blob_store: BlobStore, key: str = STORAGE_KEY) -> None:
        self.blob_store = blob_store
        self.key = key

    def save(self, store: SessionStore) -> None:
        records = [as_record(entry) for entry in store.all()]
        self.blob_store.set(self.key, json.dumps(records, ensure_ascii=False))
        logger.debug("Saved {} workout(s) under '{}'", len(records), self.key)

    def load(self) -> List[WorkoutRecord]:
        """Return stored records; an absent key yields an empty list.

        Records come back as plain dicts. Derived fields are read from the
        stored values and never recomputed.
        """
        raw = self.blob_store.get(self.key)
        if raw is None:
            logger.debug("No stored workouts under '{}'", self.key)
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Stored workouts are not valid JSON: {exc}") from exc
        if data is None:
            return []
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise PersistenceError("Stored workouts must be a list of objects")
        for item in data:
            missing = [key for key in REQUIRED_RECORD_KEYS if key not in item]
            if missing:
                raise PersistenceError(
                    f"Stored workout {item.get('id', '?')} is missing: {', '.join(missing)}"
                )
            try:
                Location.from_value(item["location"])
            except (TypeError, ValueError) as exc:
                raise PersistenceError(f"Stored workout {item['id']} has an invalid location") from exc
        logger.debug("Loaded {} workout(s) from '{}'", len(data), self.key)
        return data

    def clear(self) -> None:
        self.blob_store.remove(self.key)
        logger.debug("Cleared stored workouts under '{}'", self.key)
