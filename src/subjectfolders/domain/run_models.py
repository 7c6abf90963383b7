from __future__ import annotations

"""
Run Domain Data Models.

Defines the result objects passed between the reconciliation engine and
the interface layer (CLI), together with their factory functions.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from subjectfolders.domain.tree_models import (
    DifferenceKind,
    DifferenceRecord,
    RunError,
    TreeNode,
)

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass
class ProvisionOutcome:
    """
    Result of provisioning one leaf directory.

    Attributes:
        path: Leaf directory that was provisioned.
        errors: Steps that failed; empty when every step succeeded.
        shortcut_path: Shortcut artifact written inside the leaf, if any.
        granted: Immediate children that received a new permission entry.
    """
    path: str
    errors: List[RunError] = field(default_factory=list)
    shortcut_path: Optional[str] = None
    granted: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class ReconcileReport:
    """Mutable accumulator filled by a single reconciliation pass."""
    differences: List[DifferenceRecord] = field(default_factory=list)
    errors: List[RunError] = field(default_factory=list)
    created: List[str] = field(default_factory=list)
    provisioned: List[str] = field(default_factory=list)

    def only_on_disk(self) -> List[str]:
        return [d.path for d in self.differences if d.kind is DifferenceKind.ONLY_ON_DISK]

    def only_in_spec(self) -> List[str]:
        return [d.path for d in self.differences if d.kind is DifferenceKind.ONLY_IN_SPEC]


@dataclass(frozen=True)
class RunResult:
    """
    Unified result of a complete reconcile-and-render run.

    Attributes:
        ok: False only when the run aborted during setup.
        error: Description of the setup failure.
        data_root: Absolute directory that was reconciled.
        dry_run: Whether directory creation and provisioning were skipped.
        tree: The reconciled hierarchy (None when setup failed).
        differences: OnlyOnDisk / OnlyInSpec records.
        errors: Local errors collected during the run.
        created: Directories created during the run.
        provisioned: Leaves provisioned during the run.
        index_path: Path of the written HTML index, if any.
        index_written: Whether the index stage completed.
        summary: Counters for reporting.
    """
    ok: bool
    error: str
    data_root: str
    dry_run: bool = False
    tree: Optional[TreeNode] = None

    differences: List[DifferenceRecord] = field(default_factory=list)
    errors: List[RunError] = field(default_factory=list)
    created: List[str] = field(default_factory=list)
    provisioned: List[str] = field(default_factory=list)

    index_path: str = ""
    index_written: bool = False

    summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_warnings(self) -> bool:
        return bool(self.differences or self.errors)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(error: str, data_root: str, dry_run: bool = False) -> RunResult:
    """Create a result for a run that aborted during setup."""
    return RunResult(ok=False, error=error, data_root=data_root, dry_run=dry_run)


def create_success_result(
        data_root: str,
        tree: TreeNode,
        report: ReconcileReport,
        *,
        dry_run: bool = False,
        index_path: str = "",
        index_written: bool = False,
        extra_errors: Optional[List[RunError]] = None,
) -> RunResult:
    """
    Create a result for a run that got past setup.

    Args:
        data_root: Reconciled root directory.
        tree: Reconciled hierarchy.
        report: Accumulated reconciliation output.
        dry_run: Whether the run was simulated.
        index_path: Destination of the HTML index.
        index_written: Whether the HTML index was written.
        extra_errors: Errors raised after reconciliation (render stage).

    Returns:
        RunResult: The populated result.
    """
    errors = list(report.errors) + list(extra_errors or [])
    summary = {
        "only_on_disk": len(report.only_on_disk()),
        "only_in_spec": len(report.only_in_spec()),
        "errors": len(errors),
        "created": len(report.created),
        "provisioned": len(report.provisioned),
        "dry_run": dry_run,
    }
    return RunResult(
        ok=True,
        error="",
        data_root=data_root,
        dry_run=dry_run,
        tree=tree,
        differences=list(report.differences),
        errors=errors,
        created=list(report.created),
        provisioned=list(report.provisioned),
        index_path=index_path,
        index_written=index_written,
        summary=summary,
    )
