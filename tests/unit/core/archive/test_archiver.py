from __future__ import annotations

"""
Unit tests for Archival by Age.
"""

import os
import time
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from subjectfolders.core.archive.archiver import archive_files, iter_archive_candidates
from subjectfolders.domain.errors import SetupError

DAY = 24 * 3600


def _touch(path: Path, age_days: float, size: int = 10) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    stamp = time.time() - age_days * DAY
    os.utime(path, (stamp, stamp))
    return path


@pytest.fixture
def roots(tmp_path: Path):
    source = tmp_path / "data"
    archive = tmp_path / "archive"
    source.mkdir()
    archive.mkdir()
    _touch(source / "Finance" / "old.xlsx", 400, size=100)
    _touch(source / "Finance" / "tiny.txt", 400, size=1)
    _touch(source / "HR" / "fresh.docx", 5, size=100)
    return source, archive


def test_candidates_filter_on_age_and_size(roots) -> None:
    """TC-01: Only files past the age limit and at least min_size are selected."""
    source, _ = roots
    found = list(iter_archive_candidates(str(source), max_age=timedelta(days=365), min_size=50))
    assert [os.path.basename(p) for p in found] == ["old.xlsx"]


def test_archive_moves_and_keeps_relative_paths(roots) -> None:
    source, archive = roots

    result = archive_files(str(source), str(archive), 365)

    assert len(result.candidates) == 2
    assert (archive / "Finance" / "old.xlsx").is_file()
    assert (archive / "Finance" / "tiny.txt").is_file()
    assert not (source / "Finance" / "old.xlsx").exists()
    assert (source / "HR" / "fresh.docx").is_file()
    assert result.errors == []


def test_dry_run_moves_nothing(roots) -> None:
    source, archive = roots

    result = archive_files(str(source), str(archive), 365, dry_run=True)

    assert len(result.candidates) == 2
    assert result.moved == []
    assert (source / "Finance" / "old.xlsx").is_file()


def test_archive_root_inside_source_is_skipped(tmp_path: Path) -> None:
    source = tmp_path / "data"
    _touch(source / "Archive" / "already.txt", 800)
    _touch(source / "old.txt", 800)

    result = archive_files(str(source), str(source / "Archive"), 365, dry_run=True)

    assert [os.path.basename(p) for p in result.candidates] == ["old.txt"]


def test_fixed_clock(roots) -> None:
    """TC-02: The clock decides what counts as old."""
    source, archive = roots
    result = archive_files(
        str(source), str(archive), 365, dry_run=True, clock=lambda: datetime(1990, 1, 1)
    )
    assert result.candidates == []


@pytest.mark.parametrize("make_args", [
    lambda s, a: (str(s / "missing"), str(a), 30),
    lambda s, a: (str(s), "", 30),
    lambda s, a: (str(s), str(a), -1),
    lambda s, a: (str(s), str(s), 30),
])
def test_setup_errors(roots, make_args) -> None:
    source, archive = roots
    with pytest.raises(SetupError):
        archive_files(*make_args(source, archive))
