"""Settings management for DropDesk."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping

from .exceptions import SettingsError
from .models import DropDeskSettings
from .resolver import resolve_with_precedence, validate_settings

LOGGER = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path("~/.dropdesk")
DATA_DIR_ENV = "DROPDESK_HOME"
SETTINGS_FILENAME = "settings.json"


def resolve_data_dir(data_dir: Path | None = None, *, env: Mapping[str, str] | None = None) -> Path:
    """Return the directory holding the history and settings documents.

    Args:
        data_dir: Explicit directory, takes precedence when provided.
        env: Environment mapping consulted for ``DROPDESK_HOME``.

    Returns:
        Path: Expanded data directory path.
    """
    if data_dir is not None:
        return Path(data_dir).expanduser()
    environ = env if env is not None else os.environ
    override = environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return DEFAULT_DATA_DIR.expanduser()


class SettingsStore:
    """Read and persist settings, always layered over the defaults.

    Every call re-reads ``settings.json``; nothing is cached between calls.
    """

    def __init__(self, data_dir: Path | None = None) -> None:
        self._data_dir = resolve_data_dir(data_dir)

    @property
    def settings_path(self) -> Path:
        """Return the resolved settings document path."""
        return self._data_dir / SETTINGS_FILENAME

    def get(self) -> dict[str, Any]:
        """Return ``defaults ⊕ stored``.

        A missing or unparsable document reads as no stored values.
        """
        return resolve_with_precedence(defaults=DropDeskSettings(), stored=self._read_file())

    def load(self) -> DropDeskSettings:
        """Return a typed view of :meth:`get`.

        Falls back to the defaults when stored values fail validation so a
        hand-edited document never breaks callers.
        """
        document = self.get()
        try:
            return validate_settings(document)
        except SettingsError as exc:
            LOGGER.warning("Ignoring invalid settings in %s: %s", self.settings_path, exc)
            return DropDeskSettings()

    def max_history_items(self) -> int:
        """Return the configured history capacity."""
        return self.load().max_history_items

    def save(self, partial: Mapping[str, Any]) -> dict[str, Any]:
        """Merge ``partial`` over the current settings and persist the result.

        The full merged document is written, so keys accumulate and are only
        ever overwritten, never dropped.

        Args:
            partial: Keys to add or overwrite.

        Returns:
            dict[str, Any]: The document as persisted.

        Raises:
            SettingsError: If the merged values are invalid or cannot be written.
        """
        merged = resolve_with_precedence(
            defaults=DropDeskSettings(), stored=self._read_file(), overrides=partial
        )
        document = validate_settings(merged).to_document()
        self._write_file(document)
        LOGGER.debug("Saved settings keys: %s", ", ".join(sorted(dict(partial))))
        return document

    def reset(self) -> dict[str, Any]:
        """Overwrite the settings document with the defaults."""
        document = DropDeskSettings().to_document()
        self._write_file(document)
        return document

    # Internal helpers -------------------------------------------------

    def _read_file(self) -> dict[str, Any]:
        path = self.settings_path
        if not path.exists():
            return {}

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            LOGGER.warning("Unreadable settings file %s: %s", path, exc)
            return {}

        if not isinstance(raw, dict):
            LOGGER.warning("Settings file %s does not hold a JSON object; ignoring it.", path)
            return {}

        return raw

    def _write_file(self, data: Mapping[str, Any]) -> None:
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            self.settings_path.write_text(json.dumps(dict(data), indent=2), encoding="utf-8")
        except OSError as exc:
            raise SettingsError(f"Failed to write settings to {self.settings_path}: {exc}") from exc


__all__ = [
    "SettingsStore",
    "DropDeskSettings",
    "DEFAULT_DATA_DIR",
    "DATA_DIR_ENV",
    "resolve_data_dir",
    "resolve_with_precedence",
    "validate_settings",
    "SettingsError",
]
