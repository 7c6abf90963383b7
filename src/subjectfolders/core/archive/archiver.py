from __future__ import annotations

"""
Archival by Age.

Moves files that have not been modified for a configured number of days
(and are at least a minimum size) from the source root into the archive
root, keeping their relative paths. Per-file failures are recorded and
the scan continues.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Iterator, List, Optional

from subjectfolders.domain.errors import SetupError
from subjectfolders.domain.tree_models import RunError

logger = logging.getLogger(__name__)


@dataclass
class ArchiveResult:
    """
    Outcome of one archive scan.

    Attributes:
        candidates: Files selected for archival (source paths).
        moved: Destination paths of files actually moved.
        errors: Files that could not be moved.
        dry_run: Whether moving was skipped.
    """
    candidates: List[str] = field(default_factory=list)
    moved: List[str] = field(default_factory=list)
    errors: List[RunError] = field(default_factory=list)
    dry_run: bool = False


def iter_archive_candidates(
        source_root: str,
        max_age: timedelta,
        min_size: int = 0,
        now: Optional[datetime] = None,
        skip_dirs: Optional[List[str]] = None,
) -> Iterator[str]:
    """
    Yield files under source_root older than max_age and at least min_size bytes.

    Directories are walked in sorted order; skip_dirs (absolute paths) are
    not entered.
    """
    cutoff = (now or datetime.now()) - max_age
    skipped = {os.path.normcase(os.path.abspath(p)) for p in (skip_dirs or [])}

    for root, dirs, files in os.walk(source_root):
        dirs[:] = sorted(
            d for d in dirs if os.path.normcase(os.path.join(root, d)) not in skipped
        )
        for name in sorted(files):
            path = os.path.join(root, name)
            try:
                st = os.stat(path)
            except OSError as e:
                logger.warning(f"Cannot stat {path}: {e}")
                continue
            if st.st_size < min_size:
                continue
            if datetime.fromtimestamp(st.st_mtime) < cutoff:
                yield path


def archive_files(
        source_root: str,
        archive_root: str,
        max_age_days: int,
        min_size_bytes: int = 0,
        *,
        dry_run: bool = False,
        clock: Callable[[], datetime] = datetime.now,
        log: Optional[logging.Logger] = None,
) -> ArchiveResult:
    """
    Move aged files from source_root into archive_root.

    Raises:
        SetupError: A root is missing, the age is negative, or both roots are the same.
    """
    log = log or logger
    if not source_root or not os.path.isdir(source_root):
        raise SetupError(f"Archive source root not found: {source_root}")
    if not archive_root:
        raise SetupError("Archive root is not configured.")
    if max_age_days < 0:
        raise SetupError(f"MaxAgeDays must not be negative, got {max_age_days}.")

    source_root = os.path.abspath(source_root)
    archive_root = os.path.abspath(archive_root)
    if os.path.normcase(archive_root) == os.path.normcase(source_root):
        raise SetupError("Archive root must differ from the source root.")

    result = ArchiveResult(dry_run=dry_run)
    log.info(f"Archiving files older than {max_age_days} days from {source_root} to {archive_root}")

    for path in iter_archive_candidates(
            source_root,
            timedelta(days=max_age_days),
            min_size_bytes,
            now=clock(),
            skip_dirs=[archive_root],
    ):
        result.candidates.append(path)
        if dry_run:
            continue
        destination = os.path.join(archive_root, os.path.relpath(path, source_root))
        try:
            os.makedirs(os.path.dirname(destination), exist_ok=True)
            shutil.move(path, destination)
        except OSError as e:
            result.errors.append(RunError(path=path, operation="archive", message=str(e)))
            log.error(f"archive failed for {path}: {e}")
            continue
        result.moved.append(destination)
        log.debug(f"Archived {path} -> {destination}")

    log.info(f"Archive finished: {len(result.candidates)} candidates, {len(result.moved)} moved")
    return result
