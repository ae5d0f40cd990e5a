"""CLI integration tests for `dropdesk watch`."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from dropdesk.cli import cli


def _args(tmp_path: Path, *args: str) -> list[str]:
    return ["--data-dir", str(tmp_path / "data"), *args]


def test_cli_watch_once_records_inbox(tmp_path: Path) -> None:
    """Ensure `dropdesk watch --once` records current inbox items.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    inbox = tmp_path / "inbox"
    inbox.mkdir()
    (inbox / "memo.txt").write_text("watch me", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, _args(tmp_path, "watch", str(inbox), "--once"))

    assert result.exit_code == 0
    assert "Recorded 1 item(s)." in result.output
    history = json.loads((tmp_path / "data" / "history.json").read_text(encoding="utf-8"))
    assert [item["fileName"] for item in history] == ["memo.txt"]


def test_cli_watch_once_json(tmp_path: Path) -> None:
    """`dropdesk watch --once --json` should emit structured batch data.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    inbox = tmp_path / "json"
    inbox.mkdir()
    (inbox / "report.txt").write_text("content", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, _args(tmp_path, "watch", str(inbox), "--once", "--json"))

    assert result.exit_code == 0
    payload = json.loads(result.output)
    batch = payload["batches"][0]
    assert batch["context"]["inbox"].endswith("json")
    assert batch["result"]["data"]["files"][0]["fileName"] == "report.txt"


def test_cli_watch_once_empty_inbox(tmp_path: Path) -> None:
    inbox = tmp_path / "empty"
    inbox.mkdir()

    runner = CliRunner()
    result = runner.invoke(cli, _args(tmp_path, "watch", str(inbox), "--once", "--json"))

    assert result.exit_code == 0
    assert json.loads(result.output) == {"batches": []}
