from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization and the filesystem collaborator used by the
reconciliation and provisioning stages. All directory enumeration is
sorted so that every walk over the same disk state visits entries in the
same order.
"""

import os
import shutil
from datetime import datetime
from typing import List, Optional

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str, base_dir: Optional[str] = None) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Relative paths are anchored at base_dir when given.

    Args:
        path: Raw input path string.
        fallback: Value used when the input is empty.
        base_dir: Anchor for relative paths (defaults to the CWD).

    Returns:
        str: Normalized absolute path, or the fallback when empty.
    """
    p = (path or "").strip()
    if not p:
        return fallback
    p = os.path.expandvars(os.path.expanduser(p))
    if base_dir and not os.path.isabs(p):
        p = os.path.join(base_dir, p)
    return os.path.abspath(p)

# -----------------------------------------------------------------------------
# FILESYSTEM COLLABORATOR
# -----------------------------------------------------------------------------

class LocalFileSystem:
    """
    Directory operations against the local disk.

    Errors are raised as OSError; callers decide whether a failure is local
    to one directory or fatal.
    """

    def exists(self, path: str) -> bool:
        return os.path.isdir(path)

    def list_subdirs(self, path: str) -> List[str]:
        """Return the names of the immediate subdirectories, sorted."""
        with os.scandir(path) as it:
            names = [e.name for e in it if e.is_dir(follow_symlinks=False)]
        return sorted(names)

    def make_dir(self, path: str) -> bool:
        """
        Create a single directory; the parent must already exist.

        Returns:
            bool: True when created, False when the directory already existed.
        """
        try:
            os.mkdir(path)
        except FileExistsError:
            if not os.path.isdir(path):
                raise
            return False
        return True

    def creation_time(self, path: str) -> datetime:
        """
        Best available creation timestamp of a directory.

        Uses st_birthtime where the platform records it, st_ctime on
        Windows, and otherwise the earlier of st_ctime and st_mtime.
        """
        st = os.stat(path)
        birth = getattr(st, "st_birthtime", None)
        if birth is not None:
            return datetime.fromtimestamp(birth)
        if os.name == "nt":
            return datetime.fromtimestamp(st.st_ctime)
        return datetime.fromtimestamp(min(st.st_ctime, st.st_mtime))

    def copy_tree(self, source: str, destination: str) -> None:
        """Copy the contents of source into destination, overwriting files."""
        shutil.copytree(source, destination, dirs_exist_ok=True)

    def copy_file(self, source: str, destination: str) -> None:
        shutil.copy2(source, destination)

    def write_text(self, path: str, text: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

    def enumerate_dirs(self, path: str, depth: int) -> List[str]:
        """
        List subdirectories up to the given depth as relative '/' paths.

        Unreadable subdirectories are skipped.
        """
        out: List[str] = []
        self._enumerate(path, "", depth, out)
        return out

    def _enumerate(self, path: str, rel: str, depth: int, out: List[str]) -> None:
        if depth <= 0:
            return
        try:
            names = self.list_subdirs(path)
        except OSError:
            return
        for name in names:
            child_rel = f"{rel}/{name}" if rel else name
            out.append(child_rel)
            self._enumerate(os.path.join(path, name), child_rel, depth - 1, out)
