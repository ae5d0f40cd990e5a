"""Tests for descriptor construction from filesystem metadata."""

from __future__ import annotations

import os
import uuid
from datetime import datetime, timezone
from pathlib import Path

import pytest

from dropdesk.ingestion.descriptors import DescriptorBuilder, size_fields
from dropdesk.ingestion.detectors import FileType
from dropdesk.ingestion.errors import DescriptorError

_NOW = datetime(2024, 1, 2, 0, 0, 1, tzinfo=timezone.utc)


def _builder() -> DescriptorBuilder:
    return DescriptorBuilder(clock=lambda: _NOW)


def test_build_file_populates_sizes_type_and_timestamps(tmp_path: Path) -> None:
    report = tmp_path / "Report.PDF"
    report.write_bytes(b"x" * 2048)
    mtime = datetime(2024, 1, 1, tzinfo=timezone.utc).timestamp()
    os.utime(report, (mtime, mtime))

    descriptor = _builder().build_file(report)

    assert descriptor.file_name == "Report.PDF"
    assert descriptor.original_path == str(report)
    assert descriptor.extension == ".pdf"
    assert descriptor.size_kb == 2
    assert descriptor.size_mb == 0
    assert descriptor.type is FileType.DOCUMENT
    assert descriptor.modified_at == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert descriptor.added_to_history == _NOW
    uuid.UUID(descriptor.id)


def test_build_routes_directories_to_folder_descriptors(tmp_path: Path) -> None:
    photos = tmp_path / "photos.zip"
    photos.mkdir()

    descriptor = _builder().build(photos)

    assert descriptor.type is FileType.FOLDER
    assert descriptor.extension == ""
    assert descriptor.size_kb == 0
    assert descriptor.size_mb == 0
    assert descriptor.original_path == str(photos.resolve())


def test_build_folder_resolves_relative_paths(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "photos").mkdir()
    monkeypatch.chdir(tmp_path)

    descriptor = _builder().build_folder(Path("photos") / ".." / "photos")

    assert descriptor.original_path == str((tmp_path / "photos").resolve())
    assert descriptor.file_name == "photos"


def test_each_build_generates_a_fresh_id(tmp_path: Path) -> None:
    note = tmp_path / "note.txt"
    note.write_text("hello", encoding="utf-8")
    builder = _builder()

    assert builder.build(note).id != builder.build(note).id


def test_missing_path_raises_descriptor_error(tmp_path: Path) -> None:
    missing = tmp_path / "gone.txt"

    with pytest.raises(DescriptorError) as excinfo:
        _builder().build(missing)

    assert excinfo.value.path == str(missing)
    assert str(missing) in str(excinfo.value)


@pytest.mark.parametrize(
    ("size_bytes", "expected"),
    [
        (0, (0, 0)),
        (511, (0, 0)),
        (512, (1, 0)),
        (2048, (2, 0)),
        (1024 * 1024, (1024, 1.0)),
        (1572864, (1536, 1.5)),
        (5 * 1024 * 1024 + 5243, (5125, 5.01)),
    ],
)
def test_size_fields_rounding(size_bytes: int, expected: tuple[int, float]) -> None:
    assert size_fields(size_bytes) == expected


@pytest.mark.parametrize("method", ["build", "build_file", "build_folder"])
def test_path_with_nul_byte_raises_descriptor_error(tmp_path: Path, method: str) -> None:
    bad = tmp_path / "bad\x00name.txt"

    with pytest.raises(DescriptorError):
        getattr(_builder(), method)(bad)
