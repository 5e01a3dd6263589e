"""Snapshot file persistence.

A snapshot file holds one test file's snapshots as backtick-quoted entries
below a version header::

    # Snapshot v1

    snapshot[`adds numbers 1`] = `3`;

    snapshot[`renders user 1`] = `
    {
      "name": "Ada",
    }
    `;

Entries are written in natural key order and separated by one blank line, so
a file written by the store is byte-for-byte reproducible from its mapping.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from models.schemas import LoadResult, SnapshotData
from snapshot.errors import SnapshotFormatError, SnapshotIOError, SnapshotVersionError
from snapshot.serializer import normalize_newlines


logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1"
SNAPSHOT_HEADER = f"# Snapshot v{SNAPSHOT_VERSION}"

_HEADER_PATTERN = re.compile(r"^# Snapshot v(\d+)\s*$")
_ENTRY_OPEN = "snapshot["
_ENTRY_ASSIGN = "] = "
_DIGITS = re.compile(r"(\d+)")


def natural_sort_key(key: str) -> tuple[list[str | int], str]:
    """Sort key comparing digit runs numerically ("test 2" before "test 10")."""
    parts: list[str | int] = [
        int(part) if index % 2 else part
        for index, part in enumerate(_DIGITS.split(key))
    ]
    return parts, key


def escape_backtick_string(text: str) -> str:
    return "`" + text.replace("\\", "\\\\").replace("`", "\\`") + "`"


def validate_header(content: str) -> str | None:
    """Return a problem description when the version header is unusable."""
    first_line = content.split("\n", 1)[0].rstrip("\r")
    match = _HEADER_PATTERN.match(first_line)
    if not match:
        return f"Snapshot file is missing the '{SNAPSHOT_HEADER}' header."
    if match.group(1) != SNAPSHOT_VERSION:
        return (
            f"Snapshot file version v{match.group(1)} is not supported; "
            f"expected v{SNAPSHOT_VERSION}."
        )
    return None


def render_snapshot_text(data: SnapshotData) -> str:
    """Canonical file text for a mapping."""
    entries = [
        f"snapshot[{escape_backtick_string(key)}] = "
        f"{escape_backtick_string(normalize_newlines(data[key]))};"
        for key in sorted(data, key=natural_sort_key)
    ]
    return f"{SNAPSHOT_HEADER}\n\n" + "\n\n".join(entries) + "\n"


def parse_snapshot_text(content: str, path: str | Path | None = None) -> SnapshotData:
    """Parse file text into a mapping. Comment lines start with '#'."""
    data: SnapshotData = {}
    pos = 0

    while True:
        pos = _skip_blank_and_comments(content, pos)
        if pos >= len(content):
            return data

        if not content.startswith(_ENTRY_OPEN, pos):
            raise SnapshotFormatError(
                f"Expected '{_ENTRY_OPEN}' at offset {pos}, found {content[pos:pos + 20]!r}",
                path,
            )
        key, pos = _read_backtick_string(content, pos + len(_ENTRY_OPEN), path)

        if not content.startswith(_ENTRY_ASSIGN, pos):
            raise SnapshotFormatError(f"Expected '{_ENTRY_ASSIGN}' after key {key!r}", path)
        value, pos = _read_backtick_string(content, pos + len(_ENTRY_ASSIGN), path)

        if not content.startswith(";", pos):
            raise SnapshotFormatError(f"Expected ';' after value of {key!r}", path)
        pos += 1

        data[key] = value


def _skip_blank_and_comments(content: str, pos: int) -> int:
    while pos < len(content):
        char = content[pos]
        if char in " \t\r\n":
            pos += 1
        elif char == "#":
            newline = content.find("\n", pos)
            pos = len(content) if newline == -1 else newline + 1
        else:
            break
    return pos


def _read_backtick_string(content: str, pos: int, path: str | Path | None) -> tuple[str, int]:
    if pos >= len(content) or content[pos] != "`":
        raise SnapshotFormatError(f"Expected '`' at offset {pos}", path)

    chars: list[str] = []
    pos += 1
    while pos < len(content):
        char = content[pos]
        if char == "\\" and pos + 1 < len(content):
            chars.append(content[pos + 1])
            pos += 2
            continue
        if char == "`":
            return "".join(chars), pos + 1
        chars.append(char)
        pos += 1

    raise SnapshotFormatError("Unterminated '`' string", path)


def snapshot_path_for(
    test_path: str | Path,
    snapshot_dir: str = "__snapshots__",
    extension: str = ".snap",
) -> Path:
    """Location of the snapshot file belonging to a test file."""
    test_path = Path(test_path)
    return test_path.parent / snapshot_dir / f"{test_path.name}{extension}"


class SnapshotStore:
    """Loads, writes and deletes snapshot files."""

    def load(self, path: str | Path, *, strict: bool = False) -> LoadResult:
        """
        Read a snapshot file.

        A missing file is an empty, clean mapping. ``dirty`` is set when the
        file text is not what ``render`` would produce for the parsed mapping,
        which catches hand edits, reordering and outdated headers.

        Raises:
            SnapshotVersionError: header missing or unsupported and ``strict``
            SnapshotFormatError: body cannot be parsed
            SnapshotIOError: file exists but cannot be read
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8", newline="") as f:
                content = f.read()
        except FileNotFoundError:
            return LoadResult()
        except UnicodeDecodeError as e:
            raise SnapshotFormatError(f"Snapshot file {path} is not valid UTF-8: {e}", path) from e
        except OSError as e:
            raise SnapshotIOError(f"Failed to read snapshot file {path}: {e}", path) from e

        if not content.strip():
            return LoadResult()

        problem = validate_header(content)
        if problem and strict:
            raise SnapshotVersionError(problem, path)

        data = parse_snapshot_text(content, path)
        dirty = content != self.render(data)
        logger.debug(f"Loaded {len(data)} snapshots from {path} (dirty={dirty})")
        return LoadResult(data=data, dirty=dirty)

    def render(self, data: SnapshotData) -> str:
        return render_snapshot_text(data)

    def save(self, data: SnapshotData, path: str | Path) -> None:
        """Write ``data`` in canonical form, creating parent directories.

        The text goes to a temporary file beside ``path`` that then replaces
        it, so a failed write leaves the previous file intact.
        """
        path = Path(path)
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
                f.write(self.render(data))
            os.replace(tmp_path, path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise SnapshotIOError(f"Failed to write snapshot file {path}: {e}", path) from e
        logger.debug(f"Saved {len(data)} snapshots to {path}")

    def exists(self, path: str | Path) -> bool:
        return Path(path).exists()

    def remove(self, path: str | Path) -> None:
        """Delete the snapshot file; a missing file is not an error."""
        path = Path(path)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise SnapshotIOError(f"Failed to remove snapshot file {path}: {e}", path) from e
        logger.info(f"Removed obsolete snapshot file {path}")
