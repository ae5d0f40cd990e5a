"""Route presentation-layer events to the stores."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from dropdesk.config import SettingsError, SettingsStore, resolve_data_dir
from dropdesk.history import HistoryError, HistoryStore
from dropdesk.ingestion.models import PresentationResult
from dropdesk.ingestion.pipeline import IngestionPipeline

from .models import (
    ClearRequested,
    DeleteRequested,
    Event,
    ExportRequested,
    FoldersPresented,
    HistoryRequested,
    OperationResult,
    PathsPresented,
    SaveToLocation,
    SettingsRequested,
    SettingsUpdate,
)

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class AppState:
    """Everything an event handler needs, passed explicitly.

    Attributes:
        data_dir: Directory holding the history and settings documents.
        settings: Settings store.
        history: History store.
        pipeline: Pipeline recording presented paths.
    """

    data_dir: Path
    settings: SettingsStore
    history: HistoryStore
    pipeline: IngestionPipeline

    @classmethod
    def create(cls, data_dir: Path | None = None) -> "AppState":
        """Wire the stores for ``data_dir``."""
        resolved = resolve_data_dir(data_dir)
        settings = SettingsStore(resolved)
        history = HistoryStore(resolved, settings)
        return cls(
            data_dir=resolved,
            settings=settings,
            history=history,
            pipeline=IngestionPipeline(history),
        )


class EventDispatcher:
    """Turn events into store operations and failures into results.

    :meth:`dispatch` never raises; every outcome is an
    :class:`OperationResult` the caller can show to the user.
    """

    def __init__(self, state: AppState) -> None:
        self.state = state
        self._handlers: dict[type, Callable[..., OperationResult]] = {
            PathsPresented: self._paths_presented,
            FoldersPresented: self._folders_presented,
            HistoryRequested: self._history_requested,
            DeleteRequested: self._delete_requested,
            ClearRequested: self._clear_requested,
            ExportRequested: self._export_requested,
            SaveToLocation: self._save_to_location,
            SettingsRequested: self._settings_requested,
            SettingsUpdate: self._settings_update,
        }

    def dispatch(self, event: Event) -> OperationResult:
        """Handle ``event`` and report the outcome."""
        handler = self._handlers.get(type(event))
        if handler is None:
            return OperationResult.failed(f"Unsupported event {type(event).__name__}.")
        try:
            return handler(event)
        except (HistoryError, SettingsError, OSError, ValueError) as exc:
            LOGGER.error("%s failed: %s", type(event).__name__, exc)
            return OperationResult.failed(f"{type(event).__name__} failed.", exc)

    def _paths_presented(self, event: PathsPresented) -> OperationResult:
        result = self.state.pipeline.run(event.paths)
        return self._presentation_result(result)

    def _folders_presented(self, event: FoldersPresented) -> OperationResult:
        result = self.state.pipeline.run_folders(event.paths)
        return self._presentation_result(result)

    def _presentation_result(self, result: PresentationResult) -> OperationResult:
        payload = result.model_dump(mode="json", by_alias=True)
        count = len(result.recorded)
        message = f"Recorded {count} item(s)."
        if result.errors:
            message += f" {len(result.errors)} path(s) could not be recorded."
        if not result.succeeded:
            return OperationResult(
                success=False,
                message=message,
                error="; ".join(error.message for error in result.errors),
                data=payload,
            )
        return OperationResult(success=True, message=message, data=payload)

    def _history_requested(self, event: HistoryRequested) -> OperationResult:
        records = self.state.history.list()
        return OperationResult.ok(
            f"{len(records)} item(s) in history.",
            files=[record.to_document() for record in records],
        )

    def _delete_requested(self, event: DeleteRequested) -> OperationResult:
        removed = self.state.history.delete_by_id(event.record_id)
        if removed:
            return OperationResult.ok(f"Removed {event.record_id}.", removed=True)
        return OperationResult.ok(f"No history entry with id {event.record_id}.", removed=False)

    def _clear_requested(self, event: ClearRequested) -> OperationResult:
        self.state.history.clear()
        return OperationResult.ok("History cleared.")

    def _export_requested(self, event: ExportRequested) -> OperationResult:
        document = self.state.history.export(event.destination)
        return OperationResult.ok(
            f"Exported {document.total_files} item(s) to {event.destination}.",
            path=str(event.destination),
            totalFiles=document.total_files,
        )

    def _save_to_location(self, event: SaveToLocation) -> OperationResult:
        destination = Path(event.destination).expanduser()
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(event.source, destination)
        LOGGER.info("Copied %s to %s", event.source, destination)
        return OperationResult.ok(f"Saved to {destination}.", path=str(destination))

    def _settings_requested(self, event: SettingsRequested) -> OperationResult:
        return OperationResult.ok("Current settings.", settings=self.state.settings.get())

    def _settings_update(self, event: SettingsUpdate) -> OperationResult:
        merged = self.state.settings.save(event.values)
        return OperationResult.ok("Settings saved.", settings=merged)


__all__ = ["AppState", "EventDispatcher"]
