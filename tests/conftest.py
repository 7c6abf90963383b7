from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for data roots, templates, specifications and INI files.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from subjectfolders.domain.config import get_default_config, write_ini  # noqa: E402
from subjectfolders.domain.run_models import ProvisionOutcome  # noqa: E402


# -----------------------------------------------------------------------------
# Test Doubles
# -----------------------------------------------------------------------------
class CountingProvisioner:
    """Leaf provisioner double recording every invocation."""

    def __init__(self) -> None:
        self.calls: List[str] = []
        self.done: set = set()

    def is_provisioned(self, directory: str) -> bool:
        return directory in self.done

    def provision_leaf(self, directory: str) -> ProvisionOutcome:
        self.calls.append(directory)
        self.done.add(directory)
        return ProvisionOutcome(path=directory)

    def count(self, directory: str) -> int:
        return self.calls.count(directory)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def counting_provisioner() -> CountingProvisioner:
    return CountingProvisioner()


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    """Empty directory playing the role of the shared data root."""
    root = tmp_path / "data"
    root.mkdir()
    return root


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """
    Subject folder template.

    Structure:
    /template
      README.txt
      /Projects
      /Working
        notes.txt
    """
    tpl = tmp_path / "template"
    tpl.mkdir()
    (tpl / "README.txt").write_text("Subject folder", encoding="utf-8")
    (tpl / "Projects").mkdir()
    (tpl / "Working").mkdir()
    (tpl / "Working" / "notes.txt").write_text("notes", encoding="utf-8")
    return tpl


@pytest.fixture
def write_spec(tmp_path: Path) -> Callable[[Sequence[Sequence[str]]], Path]:
    """Return a helper writing CSV specification rows to spec.csv."""
    def _write(rows: Sequence[Sequence[str]], header: bool = True) -> Path:
        path = tmp_path / "spec.csv"
        lines = []
        if header:
            lines.append("Level1,Level2,Level3,Level4,Level5")
        for row in rows:
            cells = list(row) + [""] * (5 - len(row))
            lines.append(",".join(cells))
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def write_config(
        tmp_path: Path,
        data_root: Path,
        template_dir: Path,
) -> Callable[..., Path]:
    """Return a helper writing an INI configuration for the shared fixtures."""
    def _write(
            spec_file: Path,
            ignore: Optional[List[str]] = None,
            extra: Optional[Dict[str, Dict[str, str]]] = None,
    ) -> Path:
        raw = get_default_config()
        raw["Paths"].update({
            "dataroot": str(data_root),
            "specfile": str(spec_file),
            "templatedir": str(template_dir),
            "htmloutput": str(tmp_path / "index.html"),
        })
        raw["Permissions"]["enabled"] = "false"
        raw["Ignore"] = {f"rule{i}": r for i, r in enumerate(ignore or [])}
        for section, values in (extra or {}).items():
            raw.setdefault(section, {}).update(values)
        path = tmp_path / "subjectfolders.ini"
        write_ini(str(path), raw)
        return path
    return _write
