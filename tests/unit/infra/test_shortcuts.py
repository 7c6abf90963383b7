from __future__ import annotations

"""
Unit tests for the Launcher Shortcut Writer.
"""

import os
import subprocess
from pathlib import Path

import pytest

from subjectfolders.infra.shortcuts import ShortcutWriter

ARGS = '-m subjectfolders create-project --parent "{path}" --config "{config}"'


def test_arguments_expand_placeholders() -> None:
    writer = ShortcutWriter("New Project", "python", ARGS, config_path="/etc/sf.ini", windows=False)
    assert writer.build_arguments("/data/HR") == (
        "-m subjectfolders create-project --parent /data/HR --config /etc/sf.ini"
    )


def test_posix_values_are_shell_quoted() -> None:
    writer = ShortcutWriter("New Project", "python", "--parent {path}", windows=False)
    assert writer.build_arguments("/data/Cost $HOME") == "--parent '/data/Cost $HOME'"


def test_windows_values_double_percent() -> None:
    writer = ShortcutWriter("New Project", "python.exe", ARGS, config_path="C:\\sf.ini", windows=True)
    assert writer.build_arguments("D:\\Data\\100% Done") == (
        '-m subjectfolders create-project --parent "D:\\Data\\100%% Done" --config "C:\\sf.ini"'
    )


def test_windows_flavour(tmp_path: Path) -> None:
    """TC-01: Windows launchers are CRLF batch files."""
    writer = ShortcutWriter("New Project", "C:\\Python\\python.exe", ARGS, windows=True)

    path = writer.create(str(tmp_path))

    assert path.endswith("New Project.cmd")
    raw = Path(path).read_bytes()
    assert raw.startswith(b"@echo off\r\n")
    assert b'"C:\\Python\\python.exe" -m subjectfolders' in raw


@pytest.mark.skipif(os.name == "nt", reason="POSIX executable bit")
def test_posix_flavour_is_executable(tmp_path: Path) -> None:
    """TC-02: POSIX launchers are executable shell scripts, rewritten in place."""
    writer = ShortcutWriter("New Project", "/usr/bin/python3", ARGS, windows=False)

    writer.create(str(tmp_path))
    path = writer.create(str(tmp_path))

    text = Path(path).read_text(encoding="utf-8")
    assert text.startswith("#!/bin/sh\nexec /usr/bin/python3 -m subjectfolders")
    assert os.access(path, os.X_OK)
    assert os.listdir(tmp_path) == ["New Project.sh"]


@pytest.mark.skipif(os.name == "nt", reason="POSIX shell launcher")
def test_launcher_passes_special_folder_names_verbatim(tmp_path: Path) -> None:
    """TC-03: '$', backticks and quotes in a folder name reach the target unexpanded."""
    leaf = tmp_path / "Cost $HOME `echo X` it's"
    leaf.mkdir()
    writer = ShortcutWriter("New Project", "/bin/echo", "--parent {path}", windows=False)

    path = writer.create(str(leaf))
    result = subprocess.run(["/bin/sh", path], capture_output=True, text=True, check=True)

    assert result.stdout == f"--parent {leaf}\n"
