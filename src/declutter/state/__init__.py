"""State persistence helpers for Declutter."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .errors import MissingStateError, PersistenceError, StateError

DEFAULT_STATE_DIR = Path("~/.declutter")
LEARNING_FILENAME = "learning.json"
TEMPLATES_FILENAME = "templates.json"
ANALYTICS_FILENAME = "analytics.json"


class StateRepository:
    """Manage the persistence of learning data, user templates and analytics."""

    def __init__(self, base_dir: Path | None = None) -> None:
        """Initialize the repository.

        Args:
            base_dir: Directory that stores state files; defaults to ``~/.declutter``.
        """
        self._base_dir = (base_dir or DEFAULT_STATE_DIR).expanduser()

    @property
    def base_dir(self) -> Path:
        """Return the directory holding state files.

        Returns:
            Path: Directory used for state artifacts.
        """
        return self._base_dir

    def initialize(self) -> Path:
        """Create the state directory if needed.

        Returns:
            Path: Directory containing the state artifacts.

        Raises:
            PersistenceError: If the directory cannot be created.
        """
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(
                f"Cannot create state directory {self._base_dir}: {exc}"
            ) from exc
        return self._base_dir

    def load_learning(self) -> dict[str, Any]:
        """Load the learning document.

        Raises:
            MissingStateError: If no learning data has been saved.
            PersistenceError: If stored data cannot be read or parsed.
        """
        data = self._read_json(LEARNING_FILENAME)
        if not isinstance(data, dict):
            raise PersistenceError("Learning data must be a JSON object.")
        return data

    def save_learning(self, data: dict[str, Any]) -> None:
        """Persist the learning document."""
        self._write_json(LEARNING_FILENAME, data)

    def load_templates(self) -> list[dict[str, Any]]:
        """Load user-authored templates.

        Returns:
            list[dict[str, Any]]: Raw template payloads; empty when none were saved.

        Raises:
            PersistenceError: If stored data cannot be read or parsed.
        """
        try:
            data = self._read_json(TEMPLATES_FILENAME)
        except MissingStateError:
            return []
        if not isinstance(data, list):
            raise PersistenceError("Template data must be a JSON array.")
        return data

    def save_templates(self, templates: list[dict[str, Any]]) -> None:
        """Persist user-authored templates."""
        self._write_json(TEMPLATES_FILENAME, templates)

    def load_analytics(self) -> dict[str, Any]:
        """Load analytics counters, returning an empty mapping when absent."""
        try:
            data = self._read_json(ANALYTICS_FILENAME)
        except MissingStateError:
            return {}
        if not isinstance(data, dict):
            raise PersistenceError("Analytics data must be a JSON object.")
        return data

    def save_analytics(self, data: dict[str, Any]) -> None:
        """Persist analytics counters."""
        self._write_json(ANALYTICS_FILENAME, data)

    def _read_json(self, filename: str) -> Any:
        path = self._base_dir / filename
        if not path.exists():
            raise MissingStateError(f"No state found at {path}")
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Invalid state data in {path}: {exc}") from exc
        except OSError as exc:
            raise PersistenceError(f"Cannot read {path}: {exc}") from exc

    def _write_json(self, filename: str, payload: Any) -> None:
        directory = self.initialize()
        path = directory / filename
        try:
            path.write_text(json.dumps(payload, indent=2, sort_keys=False), encoding="utf-8")
        except (OSError, TypeError) as exc:
            raise PersistenceError(f"Cannot write {path}: {exc}") from exc


__all__ = [
    "ANALYTICS_FILENAME",
    "DEFAULT_STATE_DIR",
    "LEARNING_FILENAME",
    "MissingStateError",
    "PersistenceError",
    "StateError",
    "StateRepository",
    "TEMPLATES_FILENAME",
]
