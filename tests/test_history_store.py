"""History store tests."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

from dropdesk.config import SettingsStore
from dropdesk.history import HISTORY_FILENAME, FileDescriptor, HistoryStore
from dropdesk.history.models import format_timestamp
from dropdesk.ingestion.descriptors import DescriptorBuilder
from dropdesk.ingestion.detectors import FileType

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _descriptor(path: str, *, added: datetime = _EPOCH, **fields) -> FileDescriptor:
    """Return a hand-built descriptor for ``path``.

    Args:
        path: Value used as the original path.
        added: Capture timestamp.
        **fields: Additional field overrides.

    Returns:
        FileDescriptor: Descriptor ready to upsert.
    """
    values = {
        "file_name": Path(path).name,
        "original_path": path,
        "extension": Path(path).suffix,
        "created_at": _EPOCH,
        "modified_at": _EPOCH,
        "added_to_history": added,
        "type": FileType.DOCUMENT,
    }
    values.update(fields)
    return FileDescriptor(**values)


def _store(tmp_path: Path, **settings) -> HistoryStore:
    settings_store = SettingsStore(tmp_path)
    if settings:
        settings_store.save(settings)
    return HistoryStore(tmp_path, settings_store)


def test_list_is_empty_for_a_fresh_store(tmp_path: Path) -> None:
    assert _store(tmp_path).list() == []


def test_list_treats_a_corrupt_document_as_empty(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.history_path.write_text("not json", encoding="utf-8")

    assert store.list() == []

    store.upsert(_descriptor("/a/report.pdf"))
    assert [record.original_path for record in store.list()] == ["/a/report.pdf"]


def test_list_skips_invalid_records_and_keeps_the_rest(tmp_path: Path) -> None:
    store = _store(tmp_path)
    valid = _descriptor("/a/report.pdf").to_document()
    store.history_path.write_text(json.dumps([{"fileName": "x"}, valid]), encoding="utf-8")

    assert [record.original_path for record in store.list()] == ["/a/report.pdf"]

    store.upsert(_descriptor("/a/notes.txt"))
    assert [record.original_path for record in store.list()] == ["/a/notes.txt", "/a/report.pdf"]


def test_upsert_orders_newest_first_and_promotes_updates(tmp_path: Path) -> None:
    """Re-presenting a path updates it in place and moves it to the front."""
    store = _store(tmp_path)
    report = _descriptor("/a/report.pdf", size_kb=2)
    photos = _descriptor(
        "/a/photos", added=_EPOCH + timedelta(seconds=1), extension="", type=FileType.FOLDER
    )

    store.upsert(report)
    store.upsert(photos)
    assert [record.file_name for record in store.list()] == ["photos", "report.pdf"]

    refreshed = _descriptor("/a/report.pdf", added=_EPOCH + timedelta(seconds=2), size_kb=3)
    stored = store.upsert(refreshed)

    records = store.list()
    assert [record.file_name for record in records] == ["report.pdf", "photos"]
    assert len([record for record in records if record.original_path == "/a/report.pdf"]) == 1
    assert records[0].id == report.id
    assert stored.id == report.id
    assert records[0].size_kb == 3
    assert records[0].added_to_history >= report.added_to_history


def test_upsert_keeps_extra_fields_from_the_existing_record(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.upsert(_descriptor("/a/report.pdf", pinned=True))

    store.upsert(_descriptor("/a/report.pdf"))

    document = json.loads(store.history_path.read_text(encoding="utf-8"))
    assert document[0]["pinned"] is True


def test_upsert_evicts_oldest_records_over_capacity(tmp_path: Path) -> None:
    store = _store(tmp_path, maxHistoryItems=2)

    for name in ("X", "Y", "Z"):
        store.upsert(_descriptor(f"/data/{name}"))

    assert [record.file_name for record in store.list()] == ["Z", "Y"]


def test_capacity_is_read_fresh_on_every_upsert(tmp_path: Path) -> None:
    settings = SettingsStore(tmp_path)
    store = HistoryStore(tmp_path, settings)
    for index in range(5):
        store.upsert(_descriptor(f"/data/{index}"))

    settings.save({"maxHistoryItems": 3})
    store.upsert(_descriptor("/data/new"))

    assert [record.file_name for record in store.list()] == ["new", "4", "3"]


def test_default_capacity_is_one_hundred(tmp_path: Path) -> None:
    store = _store(tmp_path)

    for index in range(105):
        store.upsert(_descriptor(f"/data/{index}"))

    records = store.list()
    assert len(records) == 100
    assert records[0].file_name == "104"
    assert records[-1].file_name == "5"


def test_delete_by_id_removes_only_the_match(tmp_path: Path) -> None:
    store = _store(tmp_path)
    first = store.upsert(_descriptor("/a/one.txt"))
    second = store.upsert(_descriptor("/a/two.txt"))

    assert store.delete_by_id(first.id) is True

    assert [record.id for record in store.list()] == [second.id]


def test_delete_by_unknown_id_is_a_no_op(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.upsert(_descriptor("/a/one.txt"))
    before = store.list()

    assert store.delete_by_id("missing") is False

    assert store.list() == before


def test_clear_persists_an_empty_history(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.upsert(_descriptor("/a/one.txt"))

    store.clear()

    assert store.list() == []
    assert json.loads((tmp_path / HISTORY_FILENAME).read_text(encoding="utf-8")) == []


def test_export_writes_snapshot_in_stored_order(tmp_path: Path) -> None:
    store = _store(tmp_path)
    for name in ("a.txt", "b.txt", "c.txt"):
        store.upsert(_descriptor(f"/docs/{name}"))
    destination = tmp_path / "exports" / "history-export.json"

    document = store.export(destination)

    exported = json.loads(destination.read_text(encoding="utf-8"))
    assert exported["totalFiles"] == len(exported["files"]) == 3
    assert exported["files"] == [record.to_document() for record in store.list()]
    assert exported["exportDate"].endswith("Z")
    assert document.total_files == 3
    assert len(store.list()) == 3


def test_get_returns_record_by_id(tmp_path: Path) -> None:
    store = _store(tmp_path)
    stored = store.upsert(_descriptor("/a/one.txt"))

    assert store.get(stored.id) == stored
    assert store.get("missing") is None


def test_document_uses_camel_case_keys(tmp_path: Path) -> None:
    report = tmp_path / "report.pdf"
    report.write_bytes(b"x" * 2048)
    store = _store(tmp_path / "data")

    store.upsert(DescriptorBuilder().build(report))

    document = json.loads(store.history_path.read_text(encoding="utf-8"))
    assert set(document[0]) == {
        "id",
        "fileName",
        "originalPath",
        "extension",
        "sizeKB",
        "sizeMB",
        "createdAt",
        "modifiedAt",
        "addedToHistory",
        "type",
    }
    assert document[0]["fileName"] == "report.pdf"
    assert document[0]["sizeKB"] == 2
    assert document[0]["type"] == "document"


def test_format_timestamp_uses_milliseconds_and_z_suffix() -> None:
    value = datetime(2024, 1, 2, 0, 0, 1, 123456, tzinfo=timezone.utc)

    assert format_timestamp(value) == "2024-01-02T00:00:01.123Z"
    assert format_timestamp(datetime(2024, 1, 2)) == "2024-01-02T00:00:00.000Z"
