from __future__ import annotations

"""
Folder Hierarchy Data Models.

Provides the recursive node type describing the declared folder hierarchy
and the difference records emitted when that hierarchy is reconciled
against the directory tree on disk.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass
class TreeNode:
    """
    One declared directory level.

    Children are kept in declaration order, which is also the rendering
    order. A node without children is a subject (leaf) folder and the unit
    of template provisioning; a node with children is a subject group.

    Attributes:
        name: Path segment name.
        children: Declared children keyed by segment name.
        exists_on_disk: True once the directory is proven present.
        age: Time elapsed since the directory was created, if observed.
        provisioned: True once the leaf was provisioned during this run.
        contents: Shallow relative listing of the leaf's subdirectories.
    """
    name: str
    children: Dict[str, "TreeNode"] = field(default_factory=dict)
    exists_on_disk: bool = False
    age: Optional[timedelta] = None
    provisioned: bool = False
    contents: List[str] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def child(self, name: str) -> "TreeNode":
        """Return the named child, declaring it first if needed."""
        node = self.children.get(name)
        if node is None:
            node = TreeNode(name=name)
            self.children[name] = node
        return node

    def walk(self, prefix: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], "TreeNode"]]:
        """Yield (relative segments, node) pairs for every descendant, depth-first."""
        for name, node in self.children.items():
            segments = prefix + (name,)
            yield segments, node
            yield from node.walk(segments)

    def leaves(self) -> Iterator[Tuple[Tuple[str, ...], "TreeNode"]]:
        for segments, node in self.walk():
            if node.is_leaf:
                yield segments, node


def new_root(name: str = "") -> TreeNode:
    """Create the root node, which always exists on disk."""
    return TreeNode(name=name, exists_on_disk=True)

# -----------------------------------------------------------------------------
# RECONCILIATION OUTPUT
# -----------------------------------------------------------------------------

class DifferenceKind(str, Enum):
    ONLY_ON_DISK = "OnlyOnDisk"
    ONLY_IN_SPEC = "OnlyInSpec"


@dataclass(frozen=True)
class DifferenceRecord:
    """
    A disagreement between the declared tree and the disk.

    Attributes:
        path: Absolute filesystem path.
        kind: Which side the directory is missing from.
    """
    path: str
    kind: DifferenceKind


@dataclass(frozen=True)
class RunError:
    """
    A local, non-fatal failure recorded during a run.

    Attributes:
        path: Directory the operation targeted.
        operation: Short operation label (create, copy_template, shortcut, ...).
        message: Underlying error text.
    """
    path: str
    operation: str
    message: str
