"""Rendering of snapshot mismatches and run summaries."""

from __future__ import annotations

import difflib

from rich.console import Console
from rich.table import Table

from models.schemas import MatchResult, SnapshotSummary


DEFAULT_CONTEXT_LINES = 5


def format_mismatch(result: MatchResult, expand: bool = False) -> str:
    """Unified diff from the stored snapshot to the received value."""
    if result.passed:
        return ""
    if result.expected is None:
        return f"No stored snapshot for `{result.key}`. Received:\n{result.actual}"

    expected_lines = result.expected.split("\n")
    actual_lines = result.actual.split("\n")
    context = max(len(expected_lines), len(actual_lines)) if expand else DEFAULT_CONTEXT_LINES
    diff = difflib.unified_diff(
        expected_lines,
        actual_lines,
        fromfile="Snapshot",
        tofile="Received",
        n=context,
        lineterm="",
    )
    return f"Snapshot `{result.key}` mismatched\n" + "\n".join(diff)


def print_summary(summary: SnapshotSummary, console: Console | None = None) -> None:
    """Print run totals as a table."""
    console = console or Console()

    table = Table(show_header=True, header_style="bold", title="Snapshots")
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")

    table.add_row("Total", str(summary.total))
    table.add_row("Matched", f"[green]{summary.matched}[/green]")
    table.add_row("Added", f"[green]{summary.added}[/green]")
    table.add_row("Updated", f"[green]{summary.updated}[/green]")
    table.add_row("Failed", f"[red]{summary.unmatched}[/red]")
    table.add_row("Obsolete", f"[yellow]{summary.unchecked}[/yellow]")
    table.add_row("Files removed", str(summary.files_removed))

    console.print(table)

    for entry in summary.unchecked_keys_by_file:
        console.print(f"[yellow]Obsolete snapshots in {entry.file_path}:[/yellow]")
        for key in entry.keys:
            console.print(f"  • {key}")

    if summary.failure:
        console.print("[red]✗ Snapshot check failed[/red]")
    else:
        console.print("[green]✓ Snapshots OK[/green]")
