from __future__ import annotations

"""
Error Taxonomy.

SetupError aborts a run before reconciliation starts. CreationError and
ProvisioningError are local to one directory and are recorded, logged and
swallowed so the tree walk continues. RenderError is fatal for the index
stage only.
"""

from typing import Optional


class SubjectFoldersError(Exception):
    """Base class for all application errors."""


class SetupError(SubjectFoldersError):
    """Missing required file or directory, or malformed configuration."""


class LocalError(SubjectFoldersError):
    """An error bound to a single directory and operation."""

    def __init__(self, path: str, operation: str, cause: Optional[BaseException] = None):
        self.path = path
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{operation} failed for '{path}'{detail}")


class CreationError(LocalError):
    """A declared directory could not be created."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        super().__init__(path, "create", cause)


class ProvisioningError(LocalError):
    """Template copy, shortcut creation or permission grant failed for a leaf."""


class RenderError(SubjectFoldersError):
    """The HTML index could not be rendered or written."""
