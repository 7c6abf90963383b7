from __future__ import annotations

"""
Unit tests for the Domain Models.

Verifies:
1. TreeNode declaration order and leaf detection.
2. Result factories and summary counters.
"""

from subjectfolders.domain.run_models import (
    ProvisionOutcome,
    ReconcileReport,
    create_error_result,
    create_success_result,
)
from subjectfolders.domain.tree_models import (
    DifferenceKind,
    DifferenceRecord,
    RunError,
    TreeNode,
    new_root,
)


def test_child_declares_once_and_keeps_order() -> None:
    """TC-01: child() returns the same node on repeated calls, in first-declared order."""
    root = new_root()
    b = root.child("B")
    root.child("A")
    assert root.child("B") is b
    assert list(root.children) == ["B", "A"]
    assert root.exists_on_disk is True
    assert b.exists_on_disk is False


def test_walk_and_leaves() -> None:
    """TC-02: walk() is depth-first; leaves() yields only childless nodes."""
    root = new_root()
    root.child("Finance").child("Policy")
    root.child("Finance").child("Audit")
    root.child("HR")

    walked = [segments for segments, _ in root.walk()]
    assert walked == [("Finance",), ("Finance", "Policy"), ("Finance", "Audit"), ("HR",)]

    leaves = [segments for segments, _ in root.leaves()]
    assert leaves == [("Finance", "Policy"), ("Finance", "Audit"), ("HR",)]
    assert not root.children["Finance"].is_leaf


def test_difference_kind_values() -> None:
    """TC-03: Difference kinds serialize to their report labels."""
    assert DifferenceKind.ONLY_ON_DISK.value == "OnlyOnDisk"
    assert DifferenceKind.ONLY_IN_SPEC.value == "OnlyInSpec"


def test_provision_outcome_ok() -> None:
    outcome = ProvisionOutcome(path="/x")
    assert outcome.ok
    outcome.errors.append(RunError(path="/x", operation="shortcut", message="denied"))
    assert not outcome.ok


def test_success_result_summary() -> None:
    """TC-04: Summary counters reflect the report plus render errors."""
    report = ReconcileReport(
        differences=[
            DifferenceRecord("/d/Random", DifferenceKind.ONLY_ON_DISK),
            DifferenceRecord("/d/Missing", DifferenceKind.ONLY_IN_SPEC),
            DifferenceRecord("/d/Other", DifferenceKind.ONLY_ON_DISK),
        ],
        errors=[RunError("/d/Missing", "create", "denied")],
        created=["/d/New"],
        provisioned=["/d/New"],
    )
    result = create_success_result(
        "/d",
        new_root(),
        report,
        index_path="/d/index.html",
        extra_errors=[RunError("/d/index.html", "render", "locked")],
    )

    assert result.ok
    assert result.has_warnings
    assert report.only_on_disk() == ["/d/Random", "/d/Other"]
    assert report.only_in_spec() == ["/d/Missing"]
    assert result.summary == {
        "only_on_disk": 2,
        "only_in_spec": 1,
        "errors": 2,
        "created": 1,
        "provisioned": 1,
        "dry_run": False,
    }


def test_error_result() -> None:
    result = create_error_result("Data root directory not found", "/missing")
    assert not result.ok
    assert result.tree is None
    assert not result.has_warnings
