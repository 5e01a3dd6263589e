"""CLI entry point for inspecting and normalizing snapshot files."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from config.settings import get_settings
from snapshot.errors import SnapshotError
from snapshot.keys import key_to_test_name
from snapshot.serializer import remove_extra_line_breaks
from snapshot.store import SnapshotStore


console = Console()


def setup_logging(level: str) -> None:
    """Route log records through rich at the configured level."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version="1.0.0")
def cli() -> None:
    """Snapshot tool - inspect, verify and normalize snapshot files."""
    setup_logging(get_settings().log_level)


@cli.command()
@click.argument("snapshot_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def show(snapshot_file: Path) -> None:
    """Print every snapshot stored in a file."""
    store = SnapshotStore()
    try:
        loaded = store.load(snapshot_file)
    except SnapshotError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    if not loaded.data:
        console.print("[yellow]No snapshots stored.[/yellow]")
        return

    for key, value in loaded.data.items():
        console.print(Panel(Text(remove_extra_line_breaks(value)), title=escape(key), title_align="left"))

    console.print(f"\n[dim]{len(loaded.data)} snapshots in {snapshot_file}[/dim]")


@cli.command()
@click.argument(
    "snapshot_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def check(snapshot_files: tuple[Path, ...]) -> None:
    """Verify snapshot files are readable and in canonical form."""
    store = SnapshotStore()
    table = Table(show_header=True, header_style="bold")
    table.add_column("File", style="dim")
    table.add_column("Snapshots", justify="right")
    table.add_column("Tests", justify="right")
    table.add_column("Status", justify="center")

    failed = False
    for path in snapshot_files:
        try:
            loaded = store.load(path, strict=True)
        except SnapshotError as e:
            failed = True
            table.add_row(str(path), "-", "-", f"[red]ERROR: {escape(str(e))}[/red]")
            continue

        tests = {_test_name_or_key(key) for key in loaded.data}
        if loaded.dirty:
            failed = True
            status = "[yellow]NOT CANONICAL[/yellow]"
        else:
            status = "[green]OK[/green]"
        table.add_row(str(path), str(len(loaded.data)), str(len(tests)), status)

    console.print(table)
    if failed:
        sys.exit(1)


@cli.command()
@click.argument(
    "snapshot_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def normalize(snapshot_files: tuple[Path, ...]) -> None:
    """Rewrite snapshot files in canonical form."""
    store = SnapshotStore()
    rewritten = 0
    for path in snapshot_files:
        try:
            loaded = store.load(path)
            if loaded.dirty:
                store.save(loaded.data, path)
                rewritten += 1
                console.print(f"  [green]✓[/green] {path}")
        except SnapshotError as e:
            console.print(f"  [red]✗ {path}: {escape(str(e))}[/red]")
            sys.exit(1)

    console.print(f"\n[dim]Rewrote {rewritten} of {len(snapshot_files)} files[/dim]")


def _test_name_or_key(key: str) -> str:
    try:
        return key_to_test_name(key)
    except SnapshotError:
        return key


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
