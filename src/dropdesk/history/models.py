"""History data models for captured files and folders."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List

from pydantic import ConfigDict, Field, field_serializer

from dropdesk.config.models import DropDeskBaseModel
from dropdesk.ingestion.detectors import FileType


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with millisecond precision.

    Naive values are assumed to already be in UTC.

    Args:
        value: Timestamp to format.

    Returns:
        str: Text such as ``2024-01-02T00:00:01.000Z``.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class FileDescriptor(DropDeskBaseModel):
    """One captured file or folder in the history.

    Attributes:
        id: Opaque identifier assigned at creation.
        file_name: Base name of the path at capture time.
        original_path: Path as presented; the deduplication key.
        extension: Lowercase extension with leading dot, empty for folders.
        size_kb: Size in kibibytes rounded to an integer.
        size_mb: Size in mebibytes rounded to two decimals.
        created_at: Filesystem creation time.
        modified_at: Filesystem modification time.
        added_to_history: Time of the latest capture.
        type: Category used by the presentation layer for iconography.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    file_name: str
    original_path: str
    extension: str = ""
    size_kb: int = Field(default=0, alias="sizeKB")
    size_mb: float = Field(default=0, alias="sizeMB")
    created_at: datetime
    modified_at: datetime
    added_to_history: datetime = Field(default_factory=utcnow)
    type: FileType = FileType.OTHER

    @field_serializer("created_at", "modified_at", "added_to_history")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    @property
    def is_folder(self) -> bool:
        return self.type is FileType.FOLDER

    def to_document(self) -> dict:
        """Return the on-disk representation of the record."""
        return self.model_dump(mode="json", by_alias=True)


class ExportDocument(DropDeskBaseModel):
    """Snapshot of the history written by an export.

    Attributes:
        export_date: Time the snapshot was taken.
        total_files: Number of records in ``files``.
        files: Records in stored order, newest first.
    """

    export_date: datetime = Field(default_factory=utcnow)
    total_files: int = 0
    files: List[FileDescriptor] = Field(default_factory=list)

    @field_serializer("export_date")
    def _serialize_export_date(self, value: datetime) -> str:
        return format_timestamp(value)

    def to_document(self) -> dict:
        """Return the on-disk representation of the export."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["FileDescriptor", "ExportDocument", "format_timestamp", "utcnow"]
