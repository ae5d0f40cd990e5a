"""Inbox watch service that records items dropped into a directory."""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from dropdesk.events import EventDispatcher, OperationResult, PathsPresented

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class WatchBatchResult:
    """Outcome of one batch of inbox arrivals.

    Attributes:
        batch_id: Sequential identifier within this service instance.
        inbox: Directory being watched.
        triggered_paths: Paths presented in the batch.
        result: Result returned by the dispatcher.
    """

    batch_id: int
    inbox: Path
    triggered_paths: list[Path]
    result: OperationResult

    @property
    def json_payload(self) -> dict:
        return {
            "context": {
                "batch_id": self.batch_id,
                "inbox": self.inbox.as_posix(),
                "triggered_paths": [path.as_posix() for path in self.triggered_paths],
            },
            "result": self.result.model_dump(mode="json"),
        }


class WatchService:
    """Present every item that appears in an inbox directory."""

    def __init__(
        self,
        dispatcher: EventDispatcher,
        inbox: Path,
        *,
        debounce_seconds: float = 1.0,
        max_batch_items: int = 50,
        include_hidden: bool = False,
    ) -> None:
        """Initialize the watch service.

        Args:
            dispatcher: Dispatcher receiving ``PathsPresented`` events.
            inbox: Directory whose direct children are recorded.
            debounce_seconds: Quiet period before a batch is flushed.
            max_batch_items: Flush immediately once this many paths are pending.
            include_hidden: Whether dot-files are recorded.
        """
        self._dispatcher = dispatcher
        self._inbox = inbox.expanduser().resolve()
        self._debounce_seconds = max(0.1, debounce_seconds)
        self._max_batch_items = max(1, max_batch_items)
        self._include_hidden = include_hidden
        self._observer: Optional[Observer] = None
        self._queue: queue.Queue[Path | None] = queue.Queue()
        self._stop_event = threading.Event()
        self._batch_counter = 0

    @property
    def inbox(self) -> Path:
        return self._inbox

    @property
    def is_running(self) -> bool:
        """Return whether the filesystem observer is active."""
        return self._observer is not None and self._observer.is_alive()

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #

    def process_once(self) -> Optional[WatchBatchResult]:
        """Present the current contents of the inbox as a single batch.

        Returns:
            Optional[WatchBatchResult]: Batch result, or ``None`` when the inbox is empty.
        """
        if not self._inbox.is_dir():
            raise NotADirectoryError(f"Inbox {self._inbox} is not a directory.")
        candidates = sorted(path for path in self._inbox.iterdir() if self._accepts(path))
        return self._run_batch(candidates)

    def watch(self, callback: Callable[[WatchBatchResult], None]) -> None:
        """Block, presenting arrivals in debounced batches until :meth:`stop`.

        Args:
            callback: Callable invoked with each completed batch.
        """
        if self._observer is not None:
            raise RuntimeError("WatchService is already running.")

        self._stop_event.clear()
        self._queue = queue.Queue()
        self._observer = Observer()
        self._observer.schedule(
            _InboxEventHandler(self._inbox, self._queue), str(self._inbox), recursive=False
        )
        self._observer.start()
        LOGGER.info("Watching %s", self._inbox)
        try:
            self._run_loop(callback)
        finally:
            self.stop()

    def stop(self) -> None:
        """Terminate the observer and unblock the processing loop."""
        self._stop_event.set()
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None
        self._queue.put(None)

    # ------------------------------------------------------------------ #
    # Internal helpers                                                   #
    # ------------------------------------------------------------------ #

    def _run_loop(self, callback: Callable[[WatchBatchResult], None]) -> None:
        pending: set[Path] = set()
        flush_deadline: Optional[float] = None

        while not self._stop_event.is_set():
            timeout: Optional[float] = None
            if flush_deadline is not None:
                timeout = max(0.0, flush_deadline - time.monotonic())

            try:
                path = self._queue.get(timeout=timeout)
            except queue.Empty:
                self._flush(pending, callback)
                pending.clear()
                flush_deadline = None
                continue

            if path is None:
                break
            if not self._accepts(path):
                continue

            pending.add(path)
            flush_deadline = time.monotonic() + self._debounce_seconds
            if len(pending) >= self._max_batch_items:
                self._flush(pending, callback)
                pending.clear()
                flush_deadline = None

        if pending:
            self._flush(pending, callback)

    def _flush(self, pending: set[Path], callback: Callable[[WatchBatchResult], None]) -> None:
        batch = self._run_batch(sorted(pending))
        if batch is not None:
            callback(batch)

    def _run_batch(self, paths: Iterable[Path]) -> Optional[WatchBatchResult]:
        candidates = [path for path in paths if path.exists()]
        if not candidates:
            return None

        result = self._dispatcher.dispatch(PathsPresented(tuple(candidates)))
        batch = WatchBatchResult(
            batch_id=self._next_batch_id(),
            inbox=self._inbox,
            triggered_paths=candidates,
            result=result,
        )
        LOGGER.info("Watch batch %d: %s", batch.batch_id, result.message)
        return batch

    def _accepts(self, path: Path) -> bool:
        if path.parent != self._inbox:
            return False
        return self._include_hidden or not path.name.startswith(".")

    def _next_batch_id(self) -> int:
        self._batch_counter += 1
        return self._batch_counter


class _InboxEventHandler(FileSystemEventHandler):
    """Forward inbox arrivals into the service queue."""

    def __init__(self, inbox: Path, queue_handle: queue.Queue[Path | None]) -> None:
        self._inbox = inbox
        self._queue = queue_handle

    def on_created(self, event: FileSystemEvent) -> None:
        self._queue.put(Path(str(event.src_path)))

    def on_moved(self, event: FileSystemEvent) -> None:  # pragma: no cover - watchdog-specific
        self._queue.put(Path(str(event.dest_path)))

    def on_closed(self, event: FileSystemEvent) -> None:  # pragma: no cover - inotify only
        self._queue.put(Path(str(event.src_path)))


__all__ = ["WatchService", "WatchBatchResult"]
