"""Snapshot engine: key codec, serializers, file store and per-file state."""

from snapshot.errors import (
    SnapshotError,
    SnapshotFormatError,
    SnapshotIOError,
    SnapshotKeyError,
    SnapshotVersionError,
)
from snapshot.keys import key_to_test_name, test_name_to_key
from snapshot.serializer import AmberSerializer, PrettySerializer, Serializer, get_serializer
from snapshot.state import SnapshotState, create_snapshot_state
from snapshot.store import SnapshotStore, snapshot_path_for

__all__ = [
    "AmberSerializer",
    "PrettySerializer",
    "Serializer",
    "SnapshotError",
    "SnapshotFormatError",
    "SnapshotIOError",
    "SnapshotKeyError",
    "SnapshotState",
    "SnapshotStore",
    "SnapshotVersionError",
    "create_snapshot_state",
    "get_serializer",
    "key_to_test_name",
    "snapshot_path_for",
    "test_name_to_key",
]
