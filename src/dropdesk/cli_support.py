"""Shared helpers for the DropDesk CLI."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from dropdesk.config.models import DropDeskSettings
from dropdesk.history.models import FileDescriptor

LOG_FILENAME = "dropdesk.log"
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(
    data_dir: Path,
    settings: DropDeskSettings,
    *,
    verbose: bool = False,
    console: Console | None = None,
) -> Path:
    """Attach a rotating file handler, and a console handler when verbose.

    Handlers from earlier calls are closed first so repeated invocations in
    one process do not stack them.

    Args:
        data_dir: Directory that receives ``dropdesk.log``.
        settings: Settings providing level and rotation limits.
        verbose: Whether to also log DEBUG output to stderr.
        console: Console used by the stderr handler.

    Returns:
        Path: Location of the log file.
    """
    logger = logging.getLogger("dropdesk")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    data_dir.mkdir(parents=True, exist_ok=True)
    log_path = data_dir / LOG_FILENAME
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=settings.log_max_size_mb * 1024 * 1024,
        backupCount=settings.log_backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    file_level = logging.getLevelName(settings.log_level.upper())
    file_handler.setLevel(file_level if isinstance(file_level, int) else logging.WARNING)
    logger.addHandler(file_handler)

    if verbose:
        stream_handler = RichHandler(
            console=console or Console(stderr=True), show_path=False, rich_tracebacks=False
        )
        stream_handler.setLevel(logging.DEBUG)
        logger.addHandler(stream_handler)

    logger.setLevel(min(handler.level for handler in logger.handlers))
    return log_path


def format_size(record: FileDescriptor) -> str:
    """Return a short human-readable size for a record."""
    if record.is_folder:
        return "-"
    if record.size_mb >= 1:
        return f"{record.size_mb:.2f} MB"
    return f"{record.size_kb} KB"


def build_history_table(records: Iterable[FileDescriptor], *, title: str = "History") -> Table:
    """Render records as a rich table, newest first."""
    table = Table(title=title)
    table.add_column("ID", overflow="fold")
    table.add_column("Name", overflow="fold")
    table.add_column("Type")
    table.add_column("Size", justify="right")
    table.add_column("Added")
    table.add_column("Path", overflow="fold")
    for record in records:
        table.add_row(
            record.id,
            record.file_name,
            record.type.value,
            format_size(record),
            record.added_to_history.strftime("%Y-%m-%d %H:%M:%S"),
            record.original_path,
        )
    return table


__all__ = ["configure_logging", "format_size", "build_history_table", "LOG_FILENAME"]
