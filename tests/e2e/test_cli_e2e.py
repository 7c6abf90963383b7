from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess: exit codes, stream output and the folders and
index written to disk.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "subjectfolders" / "main.py"


def run_cli(args: List[str], cwd: Optional[Path] = None) -> subprocess.CompletedProcess[str]:
    """
    Execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH so the package resolves
    without being installed.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    env.pop("SUBJECTFOLDERS_CONFIG", None)

    return subprocess.run(
        [sys.executable, str(ENTRY_POINT)] + args,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


def test_cli_version() -> None:
    result = run_cli(["--version"])
    assert result.returncode == 0
    assert "SubjectFolders" in result.stdout


def test_cli_without_config_fails() -> None:
    """TC-01: A missing configuration is a setup error (exit code 1)."""
    result = run_cli([])
    assert result.returncode == 1
    assert "No configuration file" in result.stderr


def test_cli_reconcile_json(data_root: Path, write_spec, write_config) -> None:
    """TC-02: A reconcile run creates folders and reports warnings without failing."""
    (data_root / "RandomFolder").mkdir()
    config = write_config(write_spec([["Finance", "Policy"], ["HR"]]))

    result = run_cli(["--config", str(config), "reconcile", "--json", "--no-notify"])

    assert result.returncode == 0, result.stderr
    data = json.loads(result.stdout)
    assert data["ok"] is True
    assert data["summary"]["created"] == 3
    assert data["differences"] == [
        {"path": str(data_root / "RandomFolder"), "kind": "OnlyOnDisk"},
    ]
    assert (data_root / "Finance" / "Policy" / "README.txt").is_file()
    assert Path(data["index_path"]).is_file()


def test_cli_human_summary_dry_run(data_root: Path, write_spec, write_config) -> None:
    config = write_config(write_spec([["Finance"]]))

    result = run_cli(["-c", str(config), "reconcile", "--dry-run"])

    assert result.returncode == 0, result.stderr
    assert "(dry run)" in result.stdout
    assert "Folders missing from disk: 1" in result.stdout
    assert not (data_root / "Finance").exists()


def test_cli_create_project(data_root: Path, write_spec, write_config) -> None:
    """TC-03: create-project with --name needs no window and lands under Projects."""
    subject = data_root / "HR"
    (subject / "Projects").mkdir(parents=True)
    config = write_config(write_spec([["HR"]]))

    ok = run_cli(["-c", str(config), "create-project", "--parent", str(subject), "--name", "Budget"])
    bad = run_cli(["-c", str(config), "create-project", "--parent", str(subject), "--name", "a|b"])

    assert ok.returncode == 0, ok.stderr
    assert (subject / "Projects" / "Budget").is_dir()
    assert bad.returncode == 1
    assert "invalid characters" in bad.stderr
