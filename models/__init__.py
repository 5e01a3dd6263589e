"""Models module containing Pydantic schemas for snapshot data structures."""

from models.schemas import (
    FileSnapshotResult,
    LoadResult,
    MatchResult,
    SaveStatus,
    SerializerConfig,
    SnapshotData,
    SnapshotStateOptions,
    SnapshotSummary,
    UncheckedKeysByFile,
    UpdateMode,
)

__all__ = [
    "FileSnapshotResult",
    "LoadResult",
    "MatchResult",
    "SaveStatus",
    "SerializerConfig",
    "SnapshotData",
    "SnapshotStateOptions",
    "SnapshotSummary",
    "UncheckedKeysByFile",
    "UpdateMode",
]
