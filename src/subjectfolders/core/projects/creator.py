from __future__ import annotations

"""
Project Folder Creation.

Backs the launcher placed in every subject folder: validates a project
name and creates the project directory under the subject folder's
'Projects' child (or directly inside the subject folder when it has none),
seeded from the optional project template.
"""

import logging
import os
from typing import List, Optional

from subjectfolders.core.provision.provisioner import find_child
from subjectfolders.domain.constants import (
    INVALID_NAME_CHARS,
    PROJECT_NAME_MAX_LENGTH,
    PROJECTS_DIR_NAME,
    RESERVED_DEVICE_NAMES,
)
from subjectfolders.domain.errors import CreationError
from subjectfolders.infra.fs import LocalFileSystem

logger = logging.getLogger(__name__)


def project_name_problems(name: str) -> List[str]:
    """
    List every reason a project name is rejected.

    Returns:
        List[str]: Human-readable problems; empty when the name is valid.
    """
    problems: List[str] = []
    if not name or not name.strip():
        return ["Project name is empty."]
    if len(name) > PROJECT_NAME_MAX_LENGTH:
        problems.append(f"Project name is longer than {PROJECT_NAME_MAX_LENGTH} characters.")
    bad = sorted({c for c in name if c in INVALID_NAME_CHARS})
    if bad:
        problems.append(f"Project name contains invalid characters: {' '.join(bad)}")
    if any(ord(c) < 32 for c in name):
        problems.append("Project name contains control characters.")
    if name != name.rstrip(" ."):
        problems.append("Project name must not end with a space or a dot.")
    if name != name.lstrip():
        problems.append("Project name must not start with a space.")
    if name.split(".")[0].upper() in RESERVED_DEVICE_NAMES:
        problems.append(f"'{name}' is a reserved device name.")
    return problems


def is_valid_project_name(name: str) -> bool:
    return not project_name_problems(name)


def project_parent(subject_dir: str, fs: Optional[LocalFileSystem] = None) -> str:
    """Directory new projects are created in for a subject folder."""
    fs = fs or LocalFileSystem()
    projects = find_child(fs.list_subdirs(subject_dir), PROJECTS_DIR_NAME)
    return os.path.join(subject_dir, projects) if projects else subject_dir


def create_project(
        subject_dir: str,
        name: str,
        template_dir: str = "",
        fs: Optional[LocalFileSystem] = None,
        log: Optional[logging.Logger] = None,
) -> str:
    """
    Create a project folder for a subject folder.

    Args:
        subject_dir: Existing subject folder.
        name: Project name.
        template_dir: Optional directory copied into the new project.
        fs: Filesystem collaborator.
        log: Logger.

    Returns:
        str: Path of the created project folder.

    Raises:
        ValueError: The name is invalid.
        FileExistsError: A project with this name already exists.
        CreationError: The folder could not be created or seeded.
    """
    fs = fs or LocalFileSystem()
    log = log or logger

    problems = project_name_problems(name)
    if problems:
        raise ValueError(" ".join(problems))
    if not fs.exists(subject_dir):
        raise CreationError(subject_dir, FileNotFoundError("Subject folder does not exist."))

    try:
        parent = project_parent(subject_dir, fs)
    except OSError as e:
        raise CreationError(subject_dir, e) from e
    target = os.path.join(parent, name)
    if os.path.exists(target):
        raise FileExistsError(f"Project already exists: {target}")

    try:
        fs.make_dir(target)
        if template_dir:
            fs.copy_tree(template_dir, target)
    except OSError as e:
        raise CreationError(target, e) from e

    log.info(f"Project created: {target}")
    return target
