from __future__ import annotations

"""
Leaf Provisioner.

Brings a confirmed subject folder into compliance: template contents,
launcher shortcut (also copied into a 'Projects' child when present) and
a broad-access permission entry on each immediate child directory.

Steps run in sequence and are best-effort: a failing step is recorded and
logged, later steps still run, and nothing is rolled back. Every step is
idempotent, so an interrupted run is completed by the next one.
"""

import logging
import os
from typing import Callable, Iterable, List, Optional, Sequence

from subjectfolders.domain.constants import PROJECTS_DIR_NAME, PROVISIONED_MARKER
from subjectfolders.domain.errors import ProvisioningError
from subjectfolders.domain.run_models import ProvisionOutcome
from subjectfolders.domain.tree_models import RunError
from subjectfolders.infra.fs import LocalFileSystem
from subjectfolders.infra.permissions import PermissionBackend, PermissionEntry, grant_missing
from subjectfolders.infra.shortcuts import ShortcutWriter

logger = logging.getLogger(__name__)


class LeafProvisioner:
    """
    Provisions subject (leaf) folders.

    Args:
        template_dir: Directory whose contents are copied into every leaf.
        shortcut_writer: Launcher writer; None skips the shortcut steps.
        permission_backend: Backend for the child permission step; None skips it.
        desired_entries: Entries every immediate child must carry.
        fs: Filesystem collaborator.
        marker_name: File recording a completed provisioning.
        log: Logger for progress and local errors.
    """

    def __init__(
            self,
            template_dir: str,
            shortcut_writer: Optional[ShortcutWriter] = None,
            permission_backend: Optional[PermissionBackend] = None,
            desired_entries: Sequence[PermissionEntry] = (),
            fs: Optional[LocalFileSystem] = None,
            marker_name: str = PROVISIONED_MARKER,
            log: Optional[logging.Logger] = None,
    ):
        self.template_dir = template_dir
        self.shortcut_writer = shortcut_writer
        self.permission_backend = permission_backend
        self.desired_entries = list(desired_entries)
        self.fs = fs or LocalFileSystem()
        self.marker_name = marker_name
        self.log = log or logger

    def is_provisioned(self, directory: str) -> bool:
        return os.path.isfile(os.path.join(directory, self.marker_name))

    def provision_leaf(self, directory: str) -> ProvisionOutcome:
        """
        Provision one subject folder.

        Args:
            directory: Existing leaf directory.

        Returns:
            ProvisionOutcome: Shortcut path, granted children and step errors.
        """
        outcome = ProvisionOutcome(path=directory)
        self.log.info(f"Provisioning subject folder: {directory}")

        self._step(outcome, "copy_template", lambda: self.fs.copy_tree(self.template_dir, directory))

        if self.shortcut_writer is not None:
            self._step(outcome, "shortcut", lambda: self._write_shortcut(outcome, directory))

        if self.permission_backend is not None and self.desired_entries:
            self._step(outcome, "permissions", lambda: self._grant_children(outcome, directory))

        if outcome.ok:
            self._step(outcome, "marker", lambda: self.fs.write_text(
                os.path.join(directory, self.marker_name), "provisioned\n"
            ))
        else:
            self.log.warning(f"Partially provisioned ({len(outcome.errors)} failed steps): {directory}")

        return outcome

    # -------------------------------------------------------------------------
    # STEPS
    # -------------------------------------------------------------------------

    def _write_shortcut(self, outcome: ProvisionOutcome, directory: str) -> None:
        assert self.shortcut_writer is not None
        shortcut = self.shortcut_writer.create(directory)
        outcome.shortcut_path = shortcut

        projects = find_child(self.fs.list_subdirs(directory), PROJECTS_DIR_NAME)
        if projects:
            target = os.path.join(directory, projects, os.path.basename(shortcut))
            self.fs.copy_file(shortcut, target)

    def _grant_children(self, outcome: ProvisionOutcome, directory: str) -> None:
        assert self.permission_backend is not None
        failures: List[str] = []
        for name in self.fs.list_subdirs(directory):
            child = os.path.join(directory, name)
            try:
                added = grant_missing(self.permission_backend, child, self.desired_entries)
            except (OSError, ValueError) as e:
                failures.append(f"{name}: {e}")
                continue
            if added:
                outcome.granted.append(child)
        if failures:
            raise OSError("; ".join(failures))

    def _step(self, outcome: ProvisionOutcome, operation: str, action: Callable[[], object]) -> None:
        try:
            action()
        except (OSError, ValueError) as e:
            err = ProvisioningError(outcome.path, operation, e)
            outcome.errors.append(RunError(path=outcome.path, operation=operation, message=str(e)))
            self.log.error(str(err))


def find_child(names: Iterable[str], wanted: str) -> Optional[str]:
    """Return the first name equal to wanted, ignoring case."""
    folded = wanted.casefold()
    for name in names:
        if name.casefold() == folded:
            return name
    return None
