from __future__ import annotations

"""
Consolidated Run Warning.

Formats every difference record and local error of a run into the single
warning message shown, logged and optionally broadcast at the end of a run.
"""

from typing import Any, Dict, Iterable, List

from subjectfolders.domain.tree_models import DifferenceKind, DifferenceRecord, RunError

_HEADINGS = {
    DifferenceKind.ONLY_ON_DISK: "Folders on disk that are not in the specification:",
    DifferenceKind.ONLY_IN_SPEC: "Folders in the specification that are missing from disk:",
}


def build_warning_message(
        differences: Iterable[DifferenceRecord],
        errors: Iterable[RunError],
) -> str:
    """
    Build the end-of-run warning text.

    Returns:
        str: The message, or an empty string when there is nothing to report.
    """
    differences = list(differences)
    errors = list(errors)
    sections: List[str] = []

    for kind, heading in _HEADINGS.items():
        paths = [d.path for d in differences if d.kind is kind]
        if paths:
            sections.append("\n".join([heading] + [f"  {p}" for p in paths]))

    if errors:
        sections.append("\n".join(
            ["Errors:"] + [f"  [{e.operation}] {e.path}: {e.message}" for e in errors]
        ))

    return "\n\n".join(sections)


def warning_payload(
        differences: Iterable[DifferenceRecord],
        errors: Iterable[RunError],
) -> Dict[str, Any]:
    """Structured form of the warning, used for JSON output and webhooks."""
    return {
        "differences": [{"path": d.path, "kind": d.kind.value} for d in differences],
        "errors": [{"path": e.path, "operation": e.operation, "message": e.message} for e in errors],
    }
