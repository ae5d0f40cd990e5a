"""History persistence for DropDesk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from dropdesk.config import SettingsStore, resolve_data_dir

from .errors import ExportError, HistoryError
from .models import ExportDocument, FileDescriptor, utcnow

LOGGER = logging.getLogger(__name__)

HISTORY_FILENAME = "history.json"


class HistoryStore:
    """Manage the newest-first, size-bounded history document.

    Each operation reads ``history.json``, applies its change in memory and
    writes the whole document back. No copy is kept between calls.
    """

    def __init__(self, data_dir: Path | None = None, settings: SettingsStore | None = None) -> None:
        """Initialize the store.

        Args:
            data_dir: Directory holding ``history.json``.
            settings: Settings store consulted for the capacity limit.
        """
        self._data_dir = resolve_data_dir(data_dir)
        self._settings = settings or SettingsStore(self._data_dir)

    @property
    def history_path(self) -> Path:
        """Return the path of the history document."""
        return self._data_dir / HISTORY_FILENAME

    def list(self) -> list[FileDescriptor]:
        """Return the persisted records, newest first.

        A missing or damaged document reads as an empty history; individual
        records that fail validation are skipped.

        Returns:
            list[FileDescriptor]: Records in stored order.
        """
        path = self.history_path
        if not path.exists():
            return []

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            LOGGER.warning("Unreadable history file %s: %s", path, exc)
            return []

        if not isinstance(data, list):
            LOGGER.warning("History file %s does not hold a JSON array; ignoring it.", path)
            return []

        records: list[FileDescriptor] = []
        for position, item in enumerate(data):
            try:
                records.append(FileDescriptor.model_validate(item))
            except ValidationError as exc:
                LOGGER.warning("Skipping invalid history record %d in %s: %s", position, path, exc)
        return records

    def get(self, record_id: str) -> FileDescriptor | None:
        """Return the record with ``record_id`` if present."""
        return next((record for record in self.list() if record.id == record_id), None)

    def upsert(self, descriptor: FileDescriptor) -> FileDescriptor:
        """Insert ``descriptor`` or refresh the record with the same path.

        A matching record is overwritten field by field, keeping its ``id``,
        and moved to the front. The history is then trimmed to the capacity
        configured in the settings, dropping the oldest records.

        Args:
            descriptor: Fully built record to store.

        Returns:
            FileDescriptor: The record as persisted.

        Raises:
            HistoryError: If the document cannot be written.
        """
        history = self.list()
        index = next(
            (
                position
                for position, record in enumerate(history)
                if record.original_path == descriptor.original_path
            ),
            None,
        )

        if index is not None:
            existing = history.pop(index)
            merged: dict[str, Any] = existing.to_document()
            merged.update(descriptor.to_document())
            merged["id"] = existing.id
            stored = FileDescriptor.model_validate(merged)
            LOGGER.debug("Refreshed history record %s for %s", stored.id, stored.original_path)
        else:
            stored = descriptor
            LOGGER.debug("Added history record %s for %s", stored.id, stored.original_path)

        history.insert(0, stored)

        limit = self._settings.max_history_items()
        if len(history) > limit:
            evicted = history[limit:]
            del history[limit:]
            LOGGER.info("Evicted %d history record(s) over the limit of %d", len(evicted), limit)

        self._write(history)
        return stored

    def delete_by_id(self, record_id: str) -> bool:
        """Remove the record with ``record_id``.

        Missing ids are not an error; the remaining records are written back
        either way.

        Returns:
            bool: ``True`` when a record was removed.

        Raises:
            HistoryError: If the document cannot be written.
        """
        history = self.list()
        remaining = [record for record in history if record.id != record_id]
        self._write(remaining)
        return len(remaining) != len(history)

    def clear(self) -> None:
        """Persist an empty history.

        Raises:
            HistoryError: If the document cannot be written.
        """
        self._write([])

    def export(self, destination: Path | str) -> ExportDocument:
        """Write a snapshot of the history to ``destination``.

        The store itself is left untouched.

        Args:
            destination: File path chosen by the caller.

        Returns:
            ExportDocument: The snapshot that was written.

        Raises:
            ExportError: If the snapshot cannot be written.
        """
        files = self.list()
        document = ExportDocument(export_date=utcnow(), total_files=len(files), files=files)
        target = Path(destination).expanduser()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(json.dumps(document.to_document(), indent=2), encoding="utf-8")
        except OSError as exc:
            raise ExportError(f"Failed to export history to {target}: {exc}") from exc
        LOGGER.info("Exported %d history record(s) to %s", len(files), target)
        return document

    def _write(self, records: Iterable[FileDescriptor]) -> None:
        payload = [record.to_document() for record in records]
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            self.history_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            raise HistoryError(f"Failed to write history to {self.history_path}: {exc}") from exc


__all__ = [
    "HistoryStore",
    "HISTORY_FILENAME",
    "FileDescriptor",
    "ExportDocument",
    "HistoryError",
    "ExportError",
]
