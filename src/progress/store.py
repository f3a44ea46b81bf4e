"""
Key-value state stores.

Topic coverage and cached study material are persisted through the StateStore
interface so callers never touch ambient global storage:

- InMemoryStateStore: process-local dict (tests, throwaway sessions)
- JsonFileStateStore: one JSON file per key in ~/.studyspark/state/
- SqlStateStore: SQLAlchemy-backed `stored_state` table
"""

from __future__ import annotations

import copy
import hashlib
import json
import re
import tempfile
from pathlib import Path
from typing import Any, Protocol

from loguru import logger
from sqlalchemy import Engine

from config import Settings, get_settings
from src.db.database import get_engine, init_db, session_scope
from src.db.models import StoredState

STATE_DIR = Path.home() / ".studyspark" / "state"


class StateStore(Protocol):
    """Minimal key-value persistence used by the tracker and material cache."""

    def get(self, key: str) -> dict[str, Any] | None:
        """Return the stored value or None if the key was never written."""
        ...

    def put(self, key: str, value: dict[str, Any]) -> None:
        """Write the full value, replacing any prior one."""
        ...

    def delete(self, key: str) -> bool:
        """Remove the key. Returns True if something was deleted."""
        ...


class InMemoryStateStore:
    """Dict-backed store. Values are deep-copied in and out."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}

    def get(self, key: str) -> dict[str, Any] | None:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    def put(self, key: str, value: dict[str, Any]) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStateStore:
    """
    Stores each key as a JSON file.

    Keys are document names chosen by users, so file names are a readable
    slug plus a short hash of the exact key: {slug}-{hash}.json
    """

    def __init__(self, state_dir: Path | None = None):
        self.state_dir = Path(state_dir or STATE_DIR).expanduser()
        self.state_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        slug = re.sub(r"[^A-Za-z0-9._-]+", "_", key).strip("._")[:48] or "state"
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:12]
        return self.state_dir / f"{slug}-{digest}.json"

    def get(self, key: str) -> dict[str, Any] | None:
        filepath = self._path_for(key)
        if not filepath.exists():
            return None

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable state file {filepath.name}: {e}")
            return None

        if not isinstance(data, dict) or data.get("key") != key:
            return None
        return data.get("value")

    def put(self, key: str, value: dict[str, Any]) -> None:
        filepath = self._path_for(key)

        # One temp file per writer so concurrent puts never share a path
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=self.state_dir, suffix=".tmp", delete=False
        ) as f:
            json.dump({"key": key, "value": value}, f, indent=2, ensure_ascii=False)
        Path(f.name).replace(filepath)

    def delete(self, key: str) -> bool:
        filepath = self._path_for(key)
        if filepath.exists():
            filepath.unlink()
            return True
        return False


class SqlStateStore:
    """Store backed by the `stored_state` table."""

    def __init__(self, engine: Engine | None = None, create_tables: bool = True):
        self.engine = engine or get_engine()
        if create_tables:
            init_db(self.engine)

    def get(self, key: str) -> dict[str, Any] | None:
        with session_scope(self.engine) as session:
            row = session.get(StoredState, key)
            return copy.deepcopy(row.value) if row is not None else None

    def put(self, key: str, value: dict[str, Any]) -> None:
        with session_scope(self.engine) as session:
            row = session.get(StoredState, key)
            if row is None:
                session.add(StoredState(key=key, value=copy.deepcopy(value)))
            else:
                row.value = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        with session_scope(self.engine) as session:
            row = session.get(StoredState, key)
            if row is None:
                return False
            session.delete(row)
            return True


def build_state_store(settings: Settings | None = None) -> StateStore:
    """Create the store selected by STATE_BACKEND."""
    settings = settings or get_settings()

    if settings.state_backend == "memory":
        return InMemoryStateStore()
    if settings.state_backend == "sql":
        return SqlStateStore()
    return JsonFileStateStore(settings.state_dir)
