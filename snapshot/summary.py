"""End-of-file snapshot packing and run-wide aggregation."""

from __future__ import annotations

import logging

from models.schemas import (
    FileSnapshotResult,
    SnapshotSummary,
    UncheckedKeysByFile,
    UpdateMode,
)
from snapshot.state import SnapshotState


logger = logging.getLogger(__name__)


def pack_snapshot_state(file_path: str, state: SnapshotState) -> FileSnapshotResult:
    """
    Finish one test file: prune stale snapshots, save, and report outcomes.

    Pruning only takes effect under ``all``; in other modes the stale keys
    stay on disk and are reported as unchecked.
    """
    unchecked_count = state.get_unchecked_count()
    unchecked_keys = state.get_unchecked_keys()
    if unchecked_count:
        state.remove_unchecked_keys()

    status = state.save()
    if status.saved:
        logger.debug(f"Wrote snapshots for {file_path} to {state.snapshot_path}")

    return FileSnapshotResult(
        filepath=file_path,
        added=state.added,
        matched=state.matched,
        unmatched=state.unmatched,
        updated=state.updated,
        file_deleted=status.deleted,
        unchecked=0 if status.deleted else unchecked_count,
        unchecked_keys=unchecked_keys,
    )


def new_summary(update_snapshot: UpdateMode) -> SnapshotSummary:
    """Empty summary for a run using ``update_snapshot``."""
    return SnapshotSummary(did_update=update_snapshot == "all")


def add_result(summary: SnapshotSummary, result: FileSnapshotResult) -> SnapshotSummary:
    """Fold one file's result into the run summary (in place)."""
    summary.added += result.added
    summary.matched += result.matched
    summary.unmatched += result.unmatched
    summary.updated += result.updated

    if result.file_deleted:
        summary.files_removed += 1
        summary.files_removed_list.append(result.filepath)
    if result.added:
        summary.files_added += 1
    if result.unmatched:
        summary.files_unmatched += 1
    if result.updated:
        summary.files_updated += 1

    summary.unchecked += result.unchecked
    if result.unchecked_keys:
        summary.unchecked_keys_by_file.append(
            UncheckedKeysByFile(file_path=result.filepath, keys=list(result.unchecked_keys))
        )

    summary.total += result.added + result.matched + result.unmatched + result.updated
    return summary


def finalize(summary: SnapshotSummary) -> SnapshotSummary:
    """Decide whether the run's snapshot outcomes fail it."""
    summary.failure = not summary.did_update and bool(
        summary.unchecked or summary.unmatched or summary.files_removed
    )
    return summary
