"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ.setdefault("LOG_LEVEL", "WARNING")

from models.schemas import SerializerConfig, SnapshotData, SnapshotStateOptions, UpdateMode  # noqa: E402
from snapshot.serializer import Serializer  # noqa: E402
from snapshot.state import SnapshotState  # noqa: E402
from snapshot.store import SnapshotStore  # noqa: E402


class StrSerializer:
    """Serializer rendering values with str(), for exact expectations."""

    def serialize(self, value: Any, config: SerializerConfig) -> str:
        return str(value)


def make_state(
    path: Path,
    mode: UpdateMode = "new",
    serializer: Serializer | None = None,
    expand: bool = False,
) -> SnapshotState:
    """Factory for creating SnapshotState test fixtures."""
    return SnapshotState(
        path,
        SnapshotStateOptions(update_snapshot=mode, expand=expand),
        serializer=serializer,
    )


def write_snapshots(path: Path, data: SnapshotData) -> Path:
    """Persist ``data`` in canonical form at ``path``."""
    SnapshotStore().save(data, path)
    return path


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    """Snapshot file location for a fake test file."""
    return tmp_path / "__snapshots__" / "test_example.py.snap"


@pytest.fixture
def store() -> SnapshotStore:
    return SnapshotStore()


@pytest.fixture
def state_factory(snapshot_path: Path) -> Callable[..., SnapshotState]:
    """Create engines bound to the fixture snapshot path."""

    def factory(mode: UpdateMode = "new", **kwargs: Any) -> SnapshotState:
        return make_state(snapshot_path, mode, **kwargs)

    return factory


@pytest.fixture
def seed_snapshots(snapshot_path: Path) -> Callable[[SnapshotData], Path]:
    """Write a snapshot file at the fixture path."""

    def seed(data: SnapshotData) -> Path:
        return write_snapshots(snapshot_path, data)

    return seed


@pytest.fixture
def str_serializer() -> StrSerializer:
    return StrSerializer()


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    from config.settings import get_settings

    get_settings.cache_clear()
