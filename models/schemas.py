"""Pydantic schemas for snapshot options, results and summaries."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


UpdateMode = Literal["new", "all", "none"]

SnapshotData = dict[str, str]


# =============================================================================
# Serializer Schemas
# =============================================================================


class SerializerConfig(BaseModel):
    """Formatting options handed to a serializer."""

    print_basic_prototype: bool = Field(
        default=False,
        description="Print the type tag of plain dicts and lists",
    )
    indent: int = Field(default=2, ge=0, description="Spaces per nesting level")
    escape_string: bool = Field(
        default=False,
        description="Escape double quotes and backslashes inside strings",
    )
    max_depth: int | None = Field(
        default=None,
        ge=0,
        description="Nesting depth past which containers collapse to their type name",
    )


# =============================================================================
# Engine Schemas
# =============================================================================


class SnapshotStateOptions(BaseModel):
    """Options for one snapshot engine instance."""

    update_snapshot: UpdateMode = Field(default="new", description="Update policy")
    expand: bool = Field(default=False, description="Show full diff context")
    snapshot_format: SerializerConfig = Field(
        default_factory=SerializerConfig,
        description="Serializer formatting configuration",
    )


class LoadResult(BaseModel):
    """Mapping read from a snapshot file."""

    data: SnapshotData = Field(default_factory=dict, description="Key to snapshot mapping")
    dirty: bool = Field(
        default=False,
        description="True when the file differs from its canonical rendering",
    )


class MatchResult(BaseModel):
    """Outcome of one snapshot comparison."""

    passed: bool = Field(description="Whether the assertion passes")
    key: str = Field(description="Snapshot key")
    count: int = Field(ge=1, description="Occurrence of this assertion within its test")
    actual: str = Field(default="", description="Received value, without stored-form padding")
    expected: str | None = Field(
        default="",
        description="Stored value, without stored-form padding; None when no snapshot exists",
    )


class SaveStatus(BaseModel):
    """What save() did to the snapshot file."""

    saved: bool = Field(default=False)
    deleted: bool = Field(default=False)


# =============================================================================
# Summary Schemas
# =============================================================================


class FileSnapshotResult(BaseModel):
    """Snapshot bookkeeping for one test file at end of run."""

    filepath: str = Field(description="Test file path")
    added: int = Field(default=0)
    matched: int = Field(default=0)
    unmatched: int = Field(default=0)
    updated: int = Field(default=0)
    file_deleted: bool = Field(default=False)
    unchecked: int = Field(default=0, description="Stale snapshots left in the file")
    unchecked_keys: list[str] = Field(default_factory=list)


class UncheckedKeysByFile(BaseModel):
    """Stale keys reported for one file."""

    file_path: str
    keys: list[str] = Field(default_factory=list)


class SnapshotSummary(BaseModel):
    """Snapshot outcomes aggregated over a whole test run."""

    added: int = 0
    did_update: bool = False
    failure: bool = False
    files_added: int = 0
    files_removed: int = 0
    files_removed_list: list[str] = Field(default_factory=list)
    files_unmatched: int = 0
    files_updated: int = 0
    matched: int = 0
    total: int = 0
    unchecked: int = 0
    unchecked_keys_by_file: list[UncheckedKeysByFile] = Field(default_factory=list)
    unmatched: int = 0
    updated: int = 0
