from __future__ import annotations

"""
Specification Loader.

Reads the tabular folder specification (CSV, one row per path from the
root to a subject folder) into a TreeNode hierarchy. Children keep the
order in which they were first declared.
"""

import csv
import logging
import os
import re
from typing import Iterable, List, Optional, Sequence

from subjectfolders.domain.constants import MAX_TREE_DEPTH
from subjectfolders.domain.errors import SetupError
from subjectfolders.domain.tree_models import TreeNode, new_root

logger = logging.getLogger(__name__)

_HEADER_CELL_RX = re.compile(r"^(level|folder|tier)\s*_?\d+$", re.IGNORECASE)
_FORBIDDEN_SEGMENTS = {".", ".."}

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def load_spec_tree(
        spec_file: str,
        max_depth: int = MAX_TREE_DEPTH,
        root_name: str = "",
        log: Optional[logging.Logger] = None,
) -> TreeNode:
    """
    Parse a CSV specification file into a declared hierarchy.

    Args:
        spec_file: Path to the CSV file.
        max_depth: Maximum number of name fields honoured per row.
        root_name: Name given to the root node.
        log: Logger receiving row-level warnings (module logger by default).

    Returns:
        TreeNode: Root of the declared hierarchy (exists_on_disk=True).

    Raises:
        SetupError: If the file is missing or unreadable.
    """
    log = log or logger
    if not os.path.isfile(spec_file):
        raise SetupError(f"Specification file not found: {spec_file}")

    try:
        with open(spec_file, "r", encoding="utf-8-sig", newline="") as f:
            rows = list(csv.reader(f))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise SetupError(f"Cannot read specification file '{spec_file}': {e}") from e

    tree = build_tree(rows, max_depth=max_depth, root_name=root_name, log=log)
    log.info(f"Specification loaded from {spec_file}: {sum(1 for _ in tree.leaves())} subject folders")
    return tree


def build_tree(
        rows: Iterable[Sequence[str]],
        max_depth: int = MAX_TREE_DEPTH,
        root_name: str = "",
        log: Optional[logging.Logger] = None,
) -> TreeNode:
    """
    Build the declared hierarchy from already-split rows.

    A leading header row (cells such as 'Level1', 'Folder 2') is skipped.
    An empty field ends the path; anything after it on the same row is
    ignored with a warning, as are fields beyond max_depth.
    """
    log = log or logger
    root = new_root(root_name)

    for line_no, row in enumerate(rows, start=1):
        if line_no == 1 and _is_header(row):
            continue
        segments = _row_segments(row, max_depth, line_no, log)
        if not segments:
            continue

        node = root
        for name in segments:
            node = node.child(name)

    return root

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _is_header(row: Sequence[str]) -> bool:
    cells = [c.strip() for c in row if c and c.strip()]
    return bool(cells) and all(_HEADER_CELL_RX.match(c) for c in cells)


def _row_segments(
        row: Sequence[str],
        max_depth: int,
        line_no: int,
        log: logging.Logger,
) -> List[str]:
    cells = [(c or "").strip() for c in row]
    if not any(cells) or cells[0].startswith("#"):
        return []

    segments: List[str] = []
    for idx, cell in enumerate(cells):
        if not cell:
            if any(cells[idx + 1:]):
                log.warning(f"Spec line {line_no}: empty field before a name; path truncated.")
            break
        if cell in _FORBIDDEN_SEGMENTS:
            log.warning(f"Spec line {line_no}: invalid folder name '{cell}'; row skipped.")
            return []
        segments.append(cell)

    if len(segments) > max_depth:
        log.warning(f"Spec line {line_no}: deeper than {max_depth} levels; extra fields ignored.")
        segments = segments[:max_depth]

    return segments
