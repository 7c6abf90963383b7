from __future__ import annotations

"""
Unit tests for Project Folder Creation.
"""

from pathlib import Path

import pytest

from subjectfolders.core.projects.creator import (
    create_project,
    is_valid_project_name,
    project_name_problems,
    project_parent,
)
from subjectfolders.domain.errors import CreationError


@pytest.mark.parametrize("name", ["Budget 2025", "Q3-review_v2", "a" * 64])
def test_valid_names(name: str) -> None:
    assert is_valid_project_name(name)


@pytest.mark.parametrize("name, fragment", [
    ("", "empty"),
    ("   ", "empty"),
    ("a" * 65, "longer"),
    ("Plan: 2025", "invalid characters"),
    ("Report?", "invalid characters"),
    ("tab\there", "control"),
    ("Draft.", "end with"),
    ("Draft ", "end with"),
    (" Draft", "start with"),
    ("CON", "reserved"),
    ("lpt1.txt", "reserved"),
])
def test_invalid_names(name: str, fragment: str) -> None:
    problems = project_name_problems(name)
    assert problems
    assert any(fragment in p for p in problems)


def test_project_parent_prefers_projects_child(tmp_path: Path) -> None:
    """TC-01: Projects go into the 'Projects' child when one exists (any case)."""
    subject = tmp_path / "Audit"
    subject.mkdir()
    assert project_parent(str(subject)) == str(subject)

    (subject / "projects").mkdir()
    assert project_parent(str(subject)) == str(subject / "projects")


def test_create_project_with_template(tmp_path: Path, template_dir: Path) -> None:
    subject = tmp_path / "Audit"
    (subject / "Projects").mkdir(parents=True)

    path = create_project(str(subject), "Budget 2025", template_dir=str(template_dir))

    assert path == str(subject / "Projects" / "Budget 2025")
    assert (subject / "Projects" / "Budget 2025" / "README.txt").is_file()


def test_create_project_rejects_bad_input(tmp_path: Path) -> None:
    """TC-02: Invalid names, duplicates and missing subject folders are rejected."""
    subject = tmp_path / "Audit"
    subject.mkdir()

    with pytest.raises(ValueError):
        create_project(str(subject), "bad|name")

    create_project(str(subject), "Plan")
    with pytest.raises(FileExistsError):
        create_project(str(subject), "Plan")

    with pytest.raises(CreationError):
        create_project(str(tmp_path / "Missing"), "Plan")
