"""Inbox directory watching for DropDesk."""

from .service import WatchBatchResult, WatchService

__all__ = ["WatchService", "WatchBatchResult"]
