from __future__ import annotations

"""
Folder Tree HTML Renderer.

Converts the reconciled TreeNode hierarchy into nested list markup for the
browsable index page. Only nodes proven present on disk are rendered.
Recursive calls append into one shared list of lines; no filesystem I/O
happens here.
"""

import html
import os
import re
from datetime import timedelta
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from subjectfolders.domain.constants import RECENT_THRESHOLD_DAYS
from subjectfolders.domain.tree_models import TreeNode

_CLASS_UNSAFE_RX = re.compile(r"[^a-z0-9_-]")

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_top_level(tree: TreeNode, lines: List[str], indent: str = "") -> None:
    """
    Append the shortcut list: one in-page link per existing top-level folder.

    Args:
        tree: Reconciled root node.
        lines: Accumulator for output lines.
        indent: Prefix for every emitted line.
    """
    lines.append(f'{indent}<ul class="shortcuts">')
    for child in visible_children(tree):
        name = html.escape(child.name)
        lines.append(f'{indent}  <li><a href="#{html.escape(child.name, quote=True)}">{name}</a></li>')
    lines.append(f"{indent}</ul>")


def render_full(
        root_path: str,
        tree: TreeNode,
        lines: List[str],
        *,
        recent_days: int = RECENT_THRESHOLD_DAYS,
        include_contents: bool = False,
        indent: str = "",
) -> None:
    """
    Append the fully nested listing of the reconciled tree.

    Each item carries a depth class ('depth-1', 'depth-2', ...), a class
    from the lowercased first word of the folder name, 'recent' when the
    folder is younger than recent_days, an anchor id at depth 1 and a
    file:// link to the folder.

    Args:
        root_path: Directory corresponding to the tree root.
        tree: Reconciled root node.
        lines: Accumulator for output lines.
        recent_days: Age threshold for the 'recent' marker.
        include_contents: Also emit each leaf's contents preview.
        indent: Prefix for every emitted line.
    """
    lines.append(f'{indent}<ul class="tree">')
    _render_children(
        tree,
        lines,
        root=Path(os.path.abspath(root_path)),
        segments=(),
        depth=1,
        threshold=timedelta(days=recent_days),
        include_contents=include_contents,
        indent=indent + "  ",
    )
    lines.append(f"{indent}</ul>")


def render_top_level_markup(tree: TreeNode) -> str:
    lines: List[str] = []
    render_top_level(tree, lines)
    return "\n".join(lines)


def render_full_markup(root_path: str, tree: TreeNode, **options) -> str:
    lines: List[str] = []
    render_full(root_path, tree, lines, **options)
    return "\n".join(lines)

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def visible_children(node: TreeNode) -> List[TreeNode]:
    """Children present on disk, in declaration order."""
    return [c for c in node.children.values() if c.exists_on_disk]


def name_class(name: str) -> str:
    """CSS class from the lowercased first whitespace-delimited token."""
    tokens = name.split()
    if not tokens:
        return ""
    return _CLASS_UNSAFE_RX.sub("", tokens[0].lower())


def is_recent(node: TreeNode, threshold: timedelta) -> bool:
    return node.age is not None and node.age < threshold


def file_uri(root: Path, segments: Sequence[str]) -> str:
    return root.joinpath(*segments).as_uri()


def _render_children(
        node: TreeNode,
        lines: List[str],
        *,
        root: Path,
        segments: Tuple[str, ...],
        depth: int,
        threshold: timedelta,
        include_contents: bool,
        indent: str,
) -> None:
    for child in visible_children(node):
        child_segments = segments + (child.name,)

        classes = [f"depth-{depth}"]
        secondary = name_class(child.name)
        if secondary:
            classes.append(secondary)
        if is_recent(child, threshold):
            classes.append("recent")

        attrs = f' class="{" ".join(classes)}"'
        if depth == 1:
            attrs += f' id="{html.escape(child.name, quote=True)}"'
        link = (
            f'<a href="{html.escape(file_uri(root, child_segments), quote=True)}">'
            f"{html.escape(child.name)}</a>"
        )

        has_children = bool(visible_children(child))
        show_contents = include_contents and child.is_leaf and bool(child.contents)

        if not has_children and not show_contents:
            lines.append(f"{indent}<li{attrs}>{link}</li>")
            continue

        lines.append(f"{indent}<li{attrs}>{link}")
        lines.append(f"{indent}  <ul>")
        if has_children:
            _render_children(
                child,
                lines,
                root=root,
                segments=child_segments,
                depth=depth + 1,
                threshold=threshold,
                include_contents=include_contents,
                indent=indent + "    ",
            )
        else:
            _render_contents(_contents_tree(child.contents), lines, root, child_segments, indent + "    ")
        lines.append(f"{indent}  </ul>")
        lines.append(f"{indent}</li>")


ContentsTree = Dict[str, "ContentsTree"]


def _contents_tree(paths: List[str]) -> ContentsTree:
    """Fold relative 'a/b' paths into a nested mapping, preserving order."""
    tree: ContentsTree = {}
    for rel in paths:
        level = tree
        for part in rel.split("/"):
            level = level.setdefault(part, {})
    return tree


def _render_contents(
        tree: ContentsTree,
        lines: List[str],
        root: Path,
        segments: Tuple[str, ...],
        indent: str,
) -> None:
    for name, sub in tree.items():
        sub_segments = segments + (name,)
        link = (
            f'<a href="{html.escape(file_uri(root, sub_segments), quote=True)}">'
            f"{html.escape(name)}</a>"
        )
        if not sub:
            lines.append(f'{indent}<li class="contents">{link}</li>')
            continue
        lines.append(f'{indent}<li class="contents">{link}')
        lines.append(f"{indent}  <ul>")
        _render_contents(sub, lines, root, sub_segments, indent + "    ")
        lines.append(f"{indent}  </ul>")
        lines.append(f"{indent}</li>")
