"""Per-file snapshot bookkeeping: comparison, update policy and staleness."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from config.settings import Settings, get_settings
from models.schemas import (
    MatchResult,
    SaveStatus,
    SerializerConfig,
    SnapshotData,
    SnapshotStateOptions,
    UpdateMode,
)
from snapshot.errors import SnapshotKeyError
from snapshot.keys import key_to_test_name, test_name_to_key
from snapshot.serializer import (
    PrettySerializer,
    Serializer,
    add_extra_line_breaks,
    get_serializer,
    remove_extra_line_breaks,
    serialize,
)
from snapshot.store import SnapshotStore, snapshot_path_for


logger = logging.getLogger(__name__)

# Whitespace trimmed before comparing stored and received text. Unlike
# str.strip(), U+FEFF counts and \x1c-\x1f and \x85 do not.
WHITESPACE = (
    "\t\n\v\f\r \u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006"
    "\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)


class SnapshotState:
    """
    Snapshot state of one test file.

    Created when the file starts, fed one ``match``/``fail`` call per snapshot
    assertion, flushed once with ``save`` when the file finishes. Never shared
    between files.
    """

    def __init__(
        self,
        snapshot_path: str | Path,
        options: SnapshotStateOptions | None = None,
        *,
        serializer: Serializer | None = None,
        store: SnapshotStore | None = None,
    ) -> None:
        options = options or SnapshotStateOptions()
        self._snapshot_path = Path(snapshot_path)
        self._store = store or SnapshotStore()
        self._serializer = serializer or PrettySerializer()
        self._update_snapshot: UpdateMode = options.update_snapshot
        self._snapshot_format = options.snapshot_format
        self._lock = threading.Lock()

        loaded = self._store.load(
            self._snapshot_path,
            strict=self._update_snapshot == "none",
        )
        self._initial_data: SnapshotData = dict(loaded.data)
        self._snapshot_data: SnapshotData = dict(loaded.data)
        self._dirty = loaded.dirty
        self._unchecked_keys: set[str] = set(self._snapshot_data)
        self._counters: dict[str, int] = {}

        self.expand = options.expand
        self.added = 0
        self.matched = 0
        self.unmatched = 0
        self.updated = 0

        logger.debug(
            f"Snapshot state for {self._snapshot_path}: {len(self._snapshot_data)} stored, "
            f"mode={self._update_snapshot}, dirty={self._dirty}"
        )

    @property
    def snapshot_path(self) -> Path:
        return self._snapshot_path

    @property
    def update_snapshot(self) -> UpdateMode:
        return self._update_snapshot

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def data(self) -> SnapshotData:
        """Copy of the working mapping."""
        return dict(self._snapshot_data)

    def _next_count(self, test_name: str) -> int:
        count = self._counters.get(test_name, 0) + 1
        self._counters[test_name] = count
        return count

    def mark_snapshots_as_checked_for_test(self, test_name: str) -> None:
        """Acknowledge every stored snapshot of ``test_name`` without comparing it."""
        with self._lock:
            for key in list(self._unchecked_keys):
                try:
                    owner = key_to_test_name(key)
                except SnapshotKeyError:
                    # Explicit keys carry no test name.
                    continue
                if owner == test_name:
                    self._unchecked_keys.discard(key)

    def _add_snapshot(self, key: str, received_serialized: str) -> None:
        self._dirty = True
        self._snapshot_data[key] = received_serialized

    def clear(self) -> None:
        """Restore the loaded mapping and reset counters and tallies."""
        with self._lock:
            self._snapshot_data = dict(self._initial_data)
            self._counters = {}
            self.added = 0
            self.matched = 0
            self.unmatched = 0
            self.updated = 0

    def save(self) -> SaveStatus:
        """
        Flush the working mapping.

        Writes the file when something changed or stale keys remain. When the
        mapping ended up empty and a file exists, the file is removed under
        ``all`` only, yet ``deleted`` is reported in every mode.
        """
        with self._lock:
            has_snapshots = bool(self._snapshot_data)
            status = SaveStatus()

            if (self._dirty or self._unchecked_keys) and has_snapshots:
                self._store.save(self._snapshot_data, self._snapshot_path)
                status.saved = True
            elif not has_snapshots and self._store.exists(self._snapshot_path):
                if self._update_snapshot == "all":
                    self._store.remove(self._snapshot_path)
                status.deleted = True

            return status

    def get_unchecked_count(self) -> int:
        with self._lock:
            return len(self._unchecked_keys)

    def get_unchecked_keys(self) -> list[str]:
        with self._lock:
            return sorted(self._unchecked_keys)

    def remove_unchecked_keys(self) -> None:
        """Under ``all``, drop stored snapshots no test asserted against."""
        with self._lock:
            if self._update_snapshot != "all" or not self._unchecked_keys:
                return
            stale = list(self._unchecked_keys)
            self._unchecked_keys.clear()
            self._dirty = True
            for key in stale:
                self._snapshot_data.pop(key, None)
            logger.info(f"Pruned {len(stale)} obsolete snapshots from {self._snapshot_path}")

    def match(
        self,
        test_name: str,
        received: Any,
        *,
        key: str | None = None,
        inline_snapshot: str | None = None,
        is_inline: bool = False,
    ) -> MatchResult:
        """
        Compare ``received`` against the stored snapshot and apply the update policy.

        A mismatch written under ``all`` and a new snapshot recorded under
        ``new``/``all`` both count as passing assertions.
        """
        with self._lock:
            count = self._next_count(test_name)
            if not key:
                key = test_name_to_key(test_name, count)

            # An inline assertion must not claim an external snapshot stored
            # under the same key, so "all" can still prune it.
            if not (is_inline and key in self._snapshot_data):
                self._unchecked_keys.discard(key)

            received_serialized = add_extra_line_breaks(
                serialize(received, self._serializer, self._snapshot_format)
            )
            expected = inline_snapshot if is_inline else self._snapshot_data.get(key)
            passed = expected is not None and (
                expected.strip(WHITESPACE) == received_serialized.strip(WHITESPACE)
            )
            has_snapshot = expected is not None
            snapshot_is_persisted = is_inline or self._store.exists(self._snapshot_path)

            if passed and not is_inline:
                # Stored text may carry stale escaping; keep the fresh rendering.
                self._snapshot_data[key] = received_serialized

            should_write = (has_snapshot and self._update_snapshot == "all") or (
                (not has_snapshot or not snapshot_is_persisted)
                and self._update_snapshot in ("new", "all")
            )

            if should_write:
                if self._update_snapshot == "all":
                    if not passed:
                        if has_snapshot:
                            self.updated += 1
                        else:
                            self.added += 1
                        self._add_snapshot(key, received_serialized)
                    else:
                        self.matched += 1
                else:
                    self._add_snapshot(key, received_serialized)
                    self.added += 1
                return MatchResult(passed=True, key=key, count=count)

            if not passed:
                self.unmatched += 1
                return MatchResult(
                    passed=False,
                    key=key,
                    count=count,
                    actual=remove_extra_line_breaks(received_serialized),
                    expected=remove_extra_line_breaks(expected) if expected is not None else None,
                )

            self.matched += 1
            return MatchResult(passed=True, key=key, count=count)

    def fail(self, test_name: str, received: Any = None, key: str | None = None) -> str:
        """Record an assertion whose value could not be produced."""
        with self._lock:
            count = self._next_count(test_name)
            if not key:
                key = test_name_to_key(test_name, count)
            self._unchecked_keys.discard(key)
            self.unmatched += 1
            return key


def create_snapshot_state(
    test_path: str | Path,
    settings: Settings | None = None,
    *,
    serializer: Serializer | None = None,
    store: SnapshotStore | None = None,
) -> SnapshotState:
    """Build the snapshot state for a test file from settings."""
    settings = settings or get_settings()
    snapshot_path = snapshot_path_for(
        test_path,
        snapshot_dir=settings.snapshot_dir,
        extension=settings.snapshot_extension,
    )
    options = SnapshotStateOptions(
        update_snapshot=settings.update_snapshot,
        expand=settings.expand,
        snapshot_format=SerializerConfig(print_basic_prototype=settings.print_basic_prototype),
    )
    return SnapshotState(
        snapshot_path,
        options,
        serializer=serializer or get_serializer(settings.serializer),
        store=store,
    )
