"""Command line interface for DropDesk."""

from __future__ import annotations

import difflib
import json
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax

from dropdesk import __version__
from dropdesk.cli_support import build_history_table, configure_logging
from dropdesk.config import SettingsError
from dropdesk.events import (
    AppState,
    ClearRequested,
    DeleteRequested,
    EventDispatcher,
    ExportRequested,
    OperationResult,
    PathsPresented,
    SaveToLocation,
    SettingsUpdate,
)
from dropdesk.watch import WatchBatchResult, WatchService

console = Console()


def _raise_for_result(result: OperationResult) -> None:
    """Surface a failed operation as a CLI error.

    Args:
        result: Result returned by the dispatcher.

    Raises:
        click.ClickException: If the operation did not succeed.
    """
    if not result.success:
        raise click.ClickException(result.error or result.message)


def _dispatcher(ctx: click.Context) -> EventDispatcher:
    return ctx.find_object(EventDispatcher)


def _emit_batch(batch: WatchBatchResult, *, json_output: bool) -> None:
    if json_output:
        console.print_json(data=batch.json_payload)
        return
    _emit_presentation(batch.result)


def _emit_presentation(result: OperationResult) -> None:
    for key in ("files", "folders"):
        for item in result.data.get(key, []):
            console.print(
                f"[green]Recorded[/green] {item['fileName']} "
                f"[dim]({item['type']}, {item['originalPath']})[/dim]"
            )
    for error in result.data.get("errors", []):
        console.print(f"[red]Skipped[/red] {error['path']}: {error['message']}")
    console.print(result.message)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="dropdesk")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding history.json and settings.json (defaults to ~/.dropdesk).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None, verbose: bool) -> None:
    """DropDesk keeps a history of the files and folders you drop on it."""
    state = AppState.create(data_dir)
    try:
        configure_logging(state.data_dir, state.settings.load(), verbose=verbose)
    except OSError as exc:
        raise click.ClickException(f"Cannot use data directory {state.data_dir}: {exc}") from exc
    ctx.obj = EventDispatcher(state)


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--json", "json_output", is_flag=True, help="Emit the result as JSON.")
@click.pass_context
def add(ctx: click.Context, paths: tuple[Path, ...], json_output: bool) -> None:
    """Record PATHS (files or folders) in the history."""
    result = _dispatcher(ctx).dispatch(PathsPresented(paths))
    if json_output:
        console.print_json(data=result.model_dump(mode="json"))
    else:
        _emit_presentation(result)
    if not result.success:
        raise SystemExit(1)


@cli.command("list")
@click.option("--limit", type=click.IntRange(min=1), help="Show at most this many entries.")
@click.option("--json", "json_output", is_flag=True, help="Emit the history as JSON.")
@click.pass_context
def list_history(ctx: click.Context, limit: int | None, json_output: bool) -> None:
    """Show the history, newest first."""
    records = _dispatcher(ctx).state.history.list()
    if limit is not None:
        records = records[:limit]

    if json_output:
        console.print_json(data=[record.to_document() for record in records])
        return

    if not records:
        console.print("[yellow]History is empty.[/yellow]")
        return
    console.print(build_history_table(records))


@cli.command()
@click.argument("record_id")
@click.pass_context
def remove(ctx: click.Context, record_id: str) -> None:
    """Remove the entry with RECORD_ID from the history."""
    result = _dispatcher(ctx).dispatch(DeleteRequested(record_id))
    _raise_for_result(result)
    style = "green" if result.data.get("removed") else "yellow"
    console.print(f"[{style}]{result.message}[/{style}]")


@cli.command()
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_context
def clear(ctx: click.Context, yes: bool) -> None:
    """Remove every entry from the history."""
    if not yes:
        click.confirm("Clear the entire history?", abort=True)
    result = _dispatcher(ctx).dispatch(ClearRequested())
    _raise_for_result(result)
    console.print(f"[green]{result.message}[/green]")


@cli.command()
@click.argument("destination", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def export(ctx: click.Context, destination: Path) -> None:
    """Write a JSON snapshot of the history to DESTINATION."""
    result = _dispatcher(ctx).dispatch(ExportRequested(destination))
    _raise_for_result(result)
    console.print(f"[green]{result.message}[/green]")


@cli.command()
@click.argument("record_id")
@click.argument("destination", type=click.Path(path_type=Path))
@click.pass_context
def save(ctx: click.Context, record_id: str, destination: Path) -> None:
    """Copy the file recorded as RECORD_ID to DESTINATION."""
    dispatcher = _dispatcher(ctx)
    record = dispatcher.state.history.get(record_id)
    if record is None:
        raise click.ClickException(f"No history entry with id {record_id}.")
    if record.is_folder:
        raise click.ClickException(f"{record.file_name} is a folder; only files can be saved.")

    target = destination.expanduser()
    if target.is_dir():
        target = target / record.file_name

    result = dispatcher.dispatch(SaveToLocation(Path(record.original_path), target))
    _raise_for_result(result)
    console.print(f"[green]{result.message}[/green]")


@cli.command()
@click.argument("inbox", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--once", is_flag=True, help="Record the current inbox contents and exit.")
@click.option(
    "--debounce", type=float, default=1.0, show_default=True, help="Quiet period in seconds."
)
@click.option("--hidden", "include_hidden", is_flag=True, help="Also record dot-files.")
@click.option("--json", "json_output", is_flag=True, help="Emit batches as JSON.")
@click.pass_context
def watch(
    ctx: click.Context,
    inbox: Path,
    once: bool,
    debounce: float,
    include_hidden: bool,
    json_output: bool,
) -> None:
    """Record files and folders that appear in INBOX."""
    service = WatchService(
        _dispatcher(ctx),
        inbox,
        debounce_seconds=debounce,
        include_hidden=include_hidden,
    )

    if once:
        batch = service.process_once()
        if batch is None:
            if json_output:
                console.print_json(data={"batches": []})
            else:
                console.print(f"[yellow]Nothing to record in {service.inbox}.[/yellow]")
            return
        if json_output:
            console.print_json(data={"batches": [batch.json_payload]})
        else:
            _emit_batch(batch, json_output=False)
        return

    if not json_output:
        console.print(f"[cyan]Watching {service.inbox}; press Ctrl+C to stop.[/cyan]")
    try:
        service.watch(lambda batch: _emit_batch(batch, json_output=json_output))
    except KeyboardInterrupt:
        service.stop()
        if not json_output:
            console.print("[yellow]Stopped watching.[/yellow]")


@cli.group()
def settings() -> None:
    """View and change DropDesk settings."""


@settings.command("view")
@click.pass_context
def settings_view(ctx: click.Context) -> None:
    """Display the effective settings (defaults plus stored values)."""
    document = _dispatcher(ctx).state.settings.get()
    console.print(Syntax(json.dumps(document, indent=2), "json", word_wrap=True))


@settings.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY (parsed as a YAML literal).")
@click.pass_context
def settings_set(ctx: click.Context, key: str, value: str) -> None:
    """Persist a single settings KEY."""
    dispatcher = _dispatcher(ctx)
    store = dispatcher.state.settings
    key = key.strip()
    if not key:
        raise click.ClickException("KEY must name a setting such as 'theme'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    before = json.dumps(store.get(), indent=2).splitlines()
    result = dispatcher.dispatch(SettingsUpdate({key: parsed_value}))
    _raise_for_result(result)
    after = json.dumps(result.data["settings"], indent=2).splitlines()

    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="settings.json (before)",
            tofile="settings.json (after)",
            lineterm="",
        )
    )
    if not diff:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {key}.[/green]")


@settings.command("reset")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_context
def settings_reset(ctx: click.Context, yes: bool) -> None:
    """Restore the default settings, dropping stored values."""
    if not yes:
        click.confirm("Reset all settings to their defaults?", abort=True)
    store = _dispatcher(ctx).state.settings
    try:
        store.reset()
    except SettingsError as exc:
        raise click.ClickException(str(exc)) from exc
    console.print("[green]Settings reset to defaults.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
