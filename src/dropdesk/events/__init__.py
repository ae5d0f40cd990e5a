"""Event channel between the presentation layer and the stores."""

from .dispatcher import AppState, EventDispatcher
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

__all__ = [
    "AppState",
    "EventDispatcher",
    "Event",
    "OperationResult",
    "PathsPresented",
    "FoldersPresented",
    "HistoryRequested",
    "DeleteRequested",
    "ClearRequested",
    "ExportRequested",
    "SaveToLocation",
    "SettingsRequested",
    "SettingsUpdate",
]
