"""File type classification utilities."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping


class FileType(str, Enum):
    """Categories the presentation layer maps to icons."""

    IMAGE = "image"
    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    ARCHIVE = "archive"
    CODE = "code"
    VIDEO = "video"
    AUDIO = "audio"
    FOLDER = "folder"
    OTHER = "other"


def _table(entries: Mapping[FileType, tuple[str, ...]]) -> Mapping[str, FileType]:
    flat: dict[str, FileType] = {}
    for file_type, extensions in entries.items():
        for extension in extensions:
            flat[f".{extension}"] = file_type
    return MappingProxyType(flat)


EXTENSION_TYPES: Mapping[str, FileType] = _table(
    {
        FileType.IMAGE: ("jpg", "jpeg", "png", "gif", "bmp", "svg", "webp"),
        FileType.DOCUMENT: ("pdf", "doc", "docx", "txt", "rtf"),
        FileType.SPREADSHEET: ("xls", "xlsx", "csv"),
        FileType.PRESENTATION: ("ppt", "pptx"),
        FileType.ARCHIVE: ("zip", "rar", "7z", "tar"),
        FileType.CODE: ("js", "html", "css", "json", "py", "java", "cpp", "c"),
        FileType.VIDEO: ("mp4", "avi", "mov", "mkv"),
        FileType.AUDIO: ("mp3", "wav", "flac", "aac"),
    }
)


def normalize_extension(extension: str) -> str:
    """Return ``extension`` lowercased with a single leading dot.

    An empty string stays empty.
    """
    cleaned = extension.strip().lower()
    if not cleaned:
        return ""
    return cleaned if cleaned.startswith(".") else f".{cleaned}"


def classify_extension(extension: str) -> FileType:
    """Map an extension to its category, ``other`` when unlisted.

    Args:
        extension: Extension with or without the leading dot, any case.

    Returns:
        FileType: Matching category.
    """
    return EXTENSION_TYPES.get(normalize_extension(extension), FileType.OTHER)


class TypeDetector:
    """Identify the category of a presented path."""

    def detect(self, path: Path, *, is_dir: bool = False) -> FileType:
        """Return the category for ``path``; directories are always folders."""
        if is_dir:
            return FileType.FOLDER
        return classify_extension(path.suffix)


__all__ = [
    "FileType",
    "EXTENSION_TYPES",
    "TypeDetector",
    "classify_extension",
    "normalize_extension",
]
