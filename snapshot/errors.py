"""Exceptions raised by the snapshot store and engine."""

from __future__ import annotations

from pathlib import Path


class SnapshotError(Exception):
    """Base exception for snapshot errors."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None


class SnapshotIOError(SnapshotError):
    """Reading, writing or removing a snapshot file failed."""


class SnapshotFormatError(SnapshotError):
    """A snapshot file could not be parsed."""


class SnapshotVersionError(SnapshotFormatError):
    """A snapshot file has a missing or unsupported header."""


class SnapshotKeyError(SnapshotError, ValueError):
    """A snapshot key or occurrence count is invalid."""
