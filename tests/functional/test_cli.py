"""Functional tests for the snapshot CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from main import cli
from snapshot.store import SnapshotStore


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def canonical_file(tmp_path: Path) -> Path:
    path = tmp_path / "test_a.py.snap"
    SnapshotStore().save({"renders user 1": '\n{\n  "name": "Ada",\n}\n', "adds 1": "3"}, path)
    return path


@pytest.fixture
def edited_file(tmp_path: Path) -> Path:
    path = tmp_path / "test_b.py.snap"
    path.write_text("# Snapshot v1\nsnapshot[`b 1`] = `2`;\nsnapshot[`a 1`] = `1`;\n", encoding="utf-8")
    return path


class TestShowCommand:
    """Test the show command."""

    def test_lists_snapshots(self, runner: CliRunner, canonical_file: Path) -> None:
        """Test: Every stored value is printed."""
        result = runner.invoke(cli, ["show", str(canonical_file)])
        assert result.exit_code == 0
        assert "Ada" in result.output
        assert "2 snapshots" in result.output

    def test_empty_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test: An empty file reports no snapshots."""
        path = tmp_path / "empty.snap"
        path.write_text("", encoding="utf-8")
        result = runner.invoke(cli, ["show", str(path)])
        assert result.exit_code == 0
        assert "No snapshots stored" in result.output

    def test_malformed_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test: Parse errors exit non-zero."""
        path = tmp_path / "bad.snap"
        path.write_text("# Snapshot v1\n\nsnapshot[`a 1`] = `1`\n", encoding="utf-8")
        result = runner.invoke(cli, ["show", str(path)])
        assert result.exit_code == 1


class TestCheckCommand:
    """Test the check command."""

    def test_canonical_file_passes(self, runner: CliRunner, canonical_file: Path) -> None:
        """Test: Canonical files exit zero."""
        result = runner.invoke(cli, ["check", str(canonical_file)])
        assert result.exit_code == 0

    def test_edited_file_fails(self, runner: CliRunner, canonical_file: Path, edited_file: Path) -> None:
        """Test: Any non-canonical file exits non-zero."""
        result = runner.invoke(cli, ["check", str(canonical_file), str(edited_file)])
        assert result.exit_code == 1

    def test_headerless_file_fails(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test: Files without a version header are rejected."""
        path = tmp_path / "old.snap"
        path.write_text("snapshot[`a 1`] = `1`;\n", encoding="utf-8")
        result = runner.invoke(cli, ["check", str(path)])
        assert result.exit_code == 1

    def test_requires_files(self, runner: CliRunner) -> None:
        """Test: At least one file is required."""
        result = runner.invoke(cli, ["check"])
        assert result.exit_code == 2


class TestNormalizeCommand:
    """Test the normalize command."""

    def test_rewrites_edited_file(self, runner: CliRunner, canonical_file: Path, edited_file: Path) -> None:
        """Test: Non-canonical files are rewritten, canonical ones untouched."""
        before = canonical_file.read_text(encoding="utf-8")
        result = runner.invoke(cli, ["normalize", str(canonical_file), str(edited_file)])
        assert result.exit_code == 0
        assert "Rewrote 1 of 2 files" in result.output
        assert canonical_file.read_text(encoding="utf-8") == before

        reloaded = SnapshotStore().load(edited_file)
        assert reloaded.dirty is False
        assert reloaded.data == {"a 1": "1", "b 1": "2"}

        assert runner.invoke(cli, ["check", str(edited_file)]).exit_code == 0
