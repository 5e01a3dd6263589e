"""Snapshot key derivation from test names and occurrence counts."""

from __future__ import annotations

import re

from snapshot.errors import SnapshotKeyError


_COUNT_SUFFIX = re.compile(r" \d+$")


def test_name_to_key(test_name: str, count: int) -> str:
    """Build the key of the ``count``-th snapshot taken in ``test_name``."""
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise SnapshotKeyError(f"Snapshot count must be a positive integer, got {count!r}")
    return f"{test_name} {count}"


def key_to_test_name(key: str) -> str:
    """Recover the test name from a key, dropping the occurrence suffix."""
    if not _COUNT_SUFFIX.search(key):
        raise SnapshotKeyError("Snapshot keys must end with a number.")
    return _COUNT_SUFFIX.sub("", key)


# Not collected by pytest despite the test_ prefix.
test_name_to_key.__test__ = False  # type: ignore[attr-defined]
