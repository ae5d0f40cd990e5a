"""Events consumed from the presentation layer and the results returned to it."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, Field


@dataclass(slots=True, frozen=True)
class PathsPresented:
    """One or more paths were dropped or browsed; each may be a file or folder."""

    paths: tuple[Path, ...]


@dataclass(slots=True, frozen=True)
class FoldersPresented:
    """Paths the presentation layer already identified as folders."""

    paths: tuple[Path, ...]


@dataclass(slots=True, frozen=True)
class HistoryRequested:
    """The current history snapshot was requested."""


@dataclass(slots=True, frozen=True)
class DeleteRequested:
    """Remove one record by id."""

    record_id: str


@dataclass(slots=True, frozen=True)
class ClearRequested:
    """Remove every record."""


@dataclass(slots=True, frozen=True)
class ExportRequested:
    """Write a history snapshot to ``destination``."""

    destination: Path


@dataclass(slots=True, frozen=True)
class SaveToLocation:
    """Copy a recorded file to a location chosen by the user."""

    source: Path
    destination: Path


@dataclass(slots=True, frozen=True)
class SettingsRequested:
    """The effective settings were requested."""


@dataclass(slots=True, frozen=True)
class SettingsUpdate:
    """Merge ``values`` into the persisted settings."""

    values: Mapping[str, Any] = field(default_factory=dict)


Event = Union[
    PathsPresented,
    FoldersPresented,
    HistoryRequested,
    DeleteRequested,
    ClearRequested,
    ExportRequested,
    SaveToLocation,
    SettingsRequested,
    SettingsUpdate,
]


class OperationResult(BaseModel):
    """Success flag plus message returned for every dispatched event.

    Attributes:
        success: Whether the operation completed.
        message: Human-readable summary for the user.
        error: Underlying error message when the operation failed.
        data: Operation-specific JSON payload.
    """

    success: bool
    message: str = ""
    error: Optional[str] = None
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def ok(cls, message: str = "", **data: Any) -> "OperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def failed(cls, message: str, exc: BaseException | None = None) -> "OperationResult":
        return cls(success=False, message=message, error=str(exc) if exc else message)


__all__ = [
    "PathsPresented",
    "FoldersPresented",
    "HistoryRequested",
    "DeleteRequested",
    "ClearRequested",
    "ExportRequested",
    "SaveToLocation",
    "SettingsRequested",
    "SettingsUpdate",
    "Event",
    "OperationResult",
]
