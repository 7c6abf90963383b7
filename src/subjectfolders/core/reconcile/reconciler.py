from __future__ import annotations

"""
Folder Tree Reconciler.

Walks the declared hierarchy and the directory tree on disk together,
depth-first and strictly sequentially. Directories present on disk but not
declared are reported as OnlyOnDisk and not entered; declared directories
missing from disk are created, or reported as OnlyInSpec when creation
fails. Every confirmed subject (leaf) folder is handed to the Leaf
Provisioner at most once per pass.

The declared tree is mutated in place: exists_on_disk, age, provisioned
and contents are filled in for the renderer.
"""

import logging
import os
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional, Protocol, Set, Tuple

from subjectfolders.core.reconcile.ignore import IgnoreMatcher
from subjectfolders.domain.constants import CONTENTS_PREVIEW_DEPTH, MAX_TREE_DEPTH
from subjectfolders.domain.errors import CreationError
from subjectfolders.domain.run_models import ProvisionOutcome, ReconcileReport
from subjectfolders.domain.tree_models import (
    DifferenceKind,
    DifferenceRecord,
    RunError,
    TreeNode,
)
from subjectfolders.infra.fs import LocalFileSystem

logger = logging.getLogger(__name__)


class LeafProvisionerLike(Protocol):
    def is_provisioned(self, directory: str) -> bool: ...

    def provision_leaf(self, directory: str) -> ProvisionOutcome: ...

# -----------------------------------------------------------------------------
# RECONCILER
# -----------------------------------------------------------------------------

class TreeReconciler:
    """
    Reconciles one declared hierarchy against one directory on disk.

    Args:
        fs: Filesystem collaborator.
        provisioner: Leaf Provisioner; None disables provisioning.
        ignore: Matcher for paths excluded from reconciliation.
        create_missing: Create declared directories that are missing.
        reprovision_existing: Provision every existing leaf, not only the
            ones lacking the provisioned marker.
        max_depth: Deepest level that is reconciled.
        contents_depth: Depth of the per-leaf contents preview.
        case_insensitive: Match disk names to declared names ignoring case
            (defaults to True on Windows).
        clock: Source of the current time used for ages.
        log: Logger for progress and local errors.
    """

    def __init__(
            self,
            fs: Optional[LocalFileSystem] = None,
            provisioner: Optional[LeafProvisionerLike] = None,
            ignore: Optional[IgnoreMatcher] = None,
            *,
            create_missing: bool = True,
            reprovision_existing: bool = False,
            max_depth: int = MAX_TREE_DEPTH,
            contents_depth: int = CONTENTS_PREVIEW_DEPTH,
            case_insensitive: Optional[bool] = None,
            clock: Callable[[], datetime] = datetime.now,
            log: Optional[logging.Logger] = None,
    ):
        self.fs = fs or LocalFileSystem()
        self.provisioner = provisioner
        self.ignore = ignore or IgnoreMatcher()
        self.create_missing = create_missing
        self.reprovision_existing = reprovision_existing
        self.max_depth = max_depth
        self.contents_depth = contents_depth
        self.case_insensitive = (os.name == "nt") if case_insensitive is None else case_insensitive
        self.clock = clock
        self.log = log or logger

        self._visited: Set[int] = set()
        self._report = ReconcileReport()

    def reconcile(self, disk_root: str, tree: TreeNode) -> ReconcileReport:
        """
        Run one reconciliation pass.

        Args:
            disk_root: Directory corresponding to the tree root.
            tree: Declared hierarchy; mutated in place.

        Returns:
            ReconcileReport: Differences, local errors, created and
            provisioned directories, in visiting order.
        """
        root_path = os.path.abspath(disk_root)
        self._visited = set()
        self._report = ReconcileReport()

        self.log.info(f"Reconciling folder tree at {root_path}")
        tree.exists_on_disk = True
        self._reconcile_node(root_path, tree, (), 0)

        report = self._report
        self.log.info(
            f"Reconciliation finished: {len(report.created)} created, "
            f"{len(report.provisioned)} provisioned, {len(report.differences)} differences, "
            f"{len(report.errors)} errors"
        )
        return report

    # -------------------------------------------------------------------------
    # TREE WALK
    # -------------------------------------------------------------------------

    def _reconcile_node(
            self,
            path: str,
            node: TreeNode,
            segments: Tuple[str, ...],
            depth: int,
    ) -> None:
        if id(node) in self._visited:
            raise RuntimeError(f"Folder node visited twice during one pass: {path}")
        self._visited.add(id(node))

        try:
            on_disk = self.fs.list_subdirs(path)
        except OSError as e:
            self._record_error(path, "list", e)
            return

        found: Set[str] = set()
        declared_names = {self._key(n): n for n in node.children}

        # 1. Directories present on disk
        for name in on_disk:
            child_segments = segments + (name,)
            child_path = os.path.join(path, name)
            if self.ignore.matches(child_segments):
                self.log.debug(f"Ignored: {child_path}")
                continue

            declared_name = declared_names.get(self._key(name))
            if declared_name is None or declared_name in found:
                self._record_difference(child_path, DifferenceKind.ONLY_ON_DISK)
                continue

            found.add(declared_name)
            declared = node.children[declared_name]
            self._confirm(child_path, declared)
            self._descend(child_path, declared, child_segments, depth + 1, created=False)

        # 2. Declared directories missing from disk
        for name, declared in node.children.items():
            if name in found:
                continue
            child_segments = segments + (name,)
            child_path = os.path.join(path, name)
            if self.ignore.matches(child_segments):
                self.log.debug(f"Ignored (declared): {child_path}")
                continue

            if not self.create_missing:
                self._record_difference(child_path, DifferenceKind.ONLY_IN_SPEC)
                continue

            try:
                created = self._create(child_path)
            except CreationError as e:
                self._record_difference(child_path, DifferenceKind.ONLY_IN_SPEC)
                self._record_error(child_path, e.operation, e.cause or e)
                continue

            self._confirm(child_path, declared)
            self._descend(child_path, declared, child_segments, depth + 1, created=created)

    def _descend(
            self,
            path: str,
            node: TreeNode,
            segments: Tuple[str, ...],
            depth: int,
            created: bool,
    ) -> None:
        """Recurse into a subject group, or provision a subject folder."""
        if node.children:
            if depth >= self.max_depth:
                self.log.warning(f"Depth limit {self.max_depth} reached at {path}; not descending.")
                return
            self._reconcile_node(path, node, segments, depth)
            return

        self._provision(path, node, created)
        node.contents = self.fs.enumerate_dirs(path, self.contents_depth)

    # -------------------------------------------------------------------------
    # SIDE EFFECTS
    # -------------------------------------------------------------------------

    def _key(self, name: str) -> str:
        return name.casefold() if self.case_insensitive else name

    def _create(self, path: str) -> bool:
        """Create a declared directory; False when it already existed."""
        try:
            created = self.fs.make_dir(path)
        except OSError as e:
            raise CreationError(path, e) from e
        if not created:
            self.log.debug(f"Already present: {path}")
            return False
        self._report.created.append(path)
        self.log.info(f"Created: {path}")
        return True

    def _confirm(self, path: str, node: TreeNode) -> None:
        """Mark a node as present and record its age."""
        node.exists_on_disk = True
        try:
            age = self.clock() - self.fs.creation_time(path)
        except OSError as e:
            self.log.warning(f"Cannot read creation time of {path}: {e}")
            node.age = None
            return
        node.age = max(age, timedelta(0))

    def _provision(self, path: str, node: TreeNode, created: bool) -> None:
        if self.provisioner is None or node.provisioned:
            return
        if not created and not self.reprovision_existing and self.provisioner.is_provisioned(path):
            return

        outcome = self.provisioner.provision_leaf(path)
        node.provisioned = True
        self._report.provisioned.append(path)
        self._report.errors.extend(outcome.errors)

    def _record_difference(self, path: str, kind: DifferenceKind) -> None:
        self._report.differences.append(DifferenceRecord(path=path, kind=kind))
        self.log.warning(f"{kind.value}: {path}")

    def _record_error(self, path: str, operation: str, error: BaseException) -> None:
        self._report.errors.append(RunError(path=path, operation=operation, message=str(error)))
        self.log.error(f"{operation} failed for {path}: {error}")

# -----------------------------------------------------------------------------
# FUNCTIONAL FACADE
# -----------------------------------------------------------------------------

def reconcile(
        disk_root: str,
        tree: TreeNode,
        ignore_rules: Iterable[str] = (),
        provisioner: Optional[LeafProvisionerLike] = None,
        **options,
) -> List[DifferenceRecord]:
    """
    Reconcile tree against disk_root and return the difference records.

    Keyword options are passed to TreeReconciler.
    """
    reconciler = TreeReconciler(provisioner=provisioner, ignore=IgnoreMatcher(ignore_rules), **options)
    return reconciler.reconcile(disk_root, tree).differences
