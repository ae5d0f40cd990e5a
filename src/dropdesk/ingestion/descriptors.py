"""Build history descriptors from filesystem metadata."""

from __future__ import annotations

import os
import stat as stat_module
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from dropdesk.history.models import FileDescriptor

from .detectors import FileType, TypeDetector, normalize_extension
from .errors import DescriptorError

KIB = 1024
MIB = 1024 * 1024


def size_fields(size_bytes: int) -> tuple[int, float]:
    """Return ``(size_kb, size_mb)`` for a byte count.

    Kibibytes are rounded to an integer and mebibytes to two decimals, both
    rounding halves away from zero.
    """
    size_kb = int(size_bytes / KIB + 0.5)
    size_mb = int(size_bytes / MIB * 100 + 0.5) / 100
    return size_kb, size_mb


def _timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _created_at(result: os.stat_result) -> datetime:
    # st_birthtime is missing on most Linux filesystems; ctime is the closest stand-in.
    return _timestamp(getattr(result, "st_birthtime", result.st_ctime))


class DescriptorBuilder:
    """Create :class:`FileDescriptor` records for presented paths."""

    def __init__(
        self,
        detector: TypeDetector | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.detector = detector or TypeDetector()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def build(self, path: Path | str) -> FileDescriptor:
        """Stat ``path`` once and describe it as a file or a folder.

        Raises:
            DescriptorError: If the path cannot be stat'ed.
        """
        candidate = Path(path).expanduser()
        result = self._stat(candidate)
        if stat_module.S_ISDIR(result.st_mode):
            return self._folder(self._resolve(candidate), result)
        return self._file(candidate, result)

    def build_file(self, path: Path | str) -> FileDescriptor:
        """Describe a file, classifying it from its extension.

        Raises:
            DescriptorError: If the path cannot be stat'ed.
        """
        candidate = Path(path).expanduser()
        return self._file(candidate, self._stat(candidate))

    def build_folder(self, path: Path | str) -> FileDescriptor:
        """Describe a folder using its resolved absolute path.

        Raises:
            DescriptorError: If the path cannot be stat'ed.
        """
        resolved = self._resolve(Path(path).expanduser())
        return self._folder(resolved, self._stat(resolved))

    def _stat(self, path: Path) -> os.stat_result:
        try:
            return path.stat()
        except OSError as exc:
            raise DescriptorError(str(path), exc.strerror or str(exc)) from exc
        except ValueError as exc:
            # Paths with embedded NUL bytes never reach the OS.
            raise DescriptorError(str(path), str(exc)) from exc

    def _resolve(self, path: Path) -> Path:
        try:
            return path.resolve()
        except (OSError, ValueError) as exc:
            raise DescriptorError(str(path), str(exc)) from exc

    def _file(self, path: Path, result: os.stat_result) -> FileDescriptor:
        size_kb, size_mb = size_fields(result.st_size)
        return FileDescriptor(
            id=str(uuid.uuid4()),
            file_name=path.name,
            original_path=os.path.abspath(path),
            extension=normalize_extension(path.suffix),
            size_kb=size_kb,
            size_mb=size_mb,
            created_at=_created_at(result),
            modified_at=_timestamp(result.st_mtime),
            added_to_history=self._clock(),
            type=self.detector.detect(path),
        )

    def _folder(self, path: Path, result: os.stat_result) -> FileDescriptor:
        return FileDescriptor(
            id=str(uuid.uuid4()),
            file_name=path.name,
            original_path=str(path),
            extension="",
            size_kb=0,
            size_mb=0,
            created_at=_created_at(result),
            modified_at=_timestamp(result.st_mtime),
            added_to_history=self._clock(),
            type=FileType.FOLDER,
        )


__all__ = ["DescriptorBuilder", "size_fields"]
