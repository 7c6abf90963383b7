from __future__ import annotations

"""
Ignore Rule Matching.

Ignore rules are relative paths from the data root. Matching is exact
path equality after normalization: either separator is accepted, and a
leading '.\\' (or './') and a trailing separator are tolerated. There are
no wildcards. On Windows rules match regardless of case.
"""

import os
import re
from typing import FrozenSet, Iterable, Optional, Sequence, Tuple, Union

_SEPARATOR_RX = re.compile(r"[\\/]+")


def normalize_rule(rule: str) -> Optional[Tuple[str, ...]]:
    """
    Convert a raw ignore rule into its path segments.

    Args:
        rule: Raw rule such as '.\\Finance\\Old\\'.

    Returns:
        Optional[Tuple[str, ...]]: Segments, or None for an empty rule.
    """
    text = (rule or "").strip().strip('"')
    parts = [p for p in _SEPARATOR_RX.split(text) if p]
    while parts and parts[0] == ".":
        parts.pop(0)
    if not parts:
        return None
    return tuple(parts)


class IgnoreMatcher:
    """Decides whether a directory is excluded from reconciliation."""

    def __init__(self, rules: Iterable[str] = (), case_insensitive: Optional[bool] = None):
        self.case_insensitive = (os.name == "nt") if case_insensitive is None else case_insensitive
        normalized = (normalize_rule(r) for r in rules)
        self._rules: FrozenSet[Tuple[str, ...]] = frozenset(self._fold(r) for r in normalized if r)

    def _fold(self, segments: Tuple[str, ...]) -> Tuple[str, ...]:
        if not self.case_insensitive:
            return segments
        return tuple(s.casefold() for s in segments)

    def __len__(self) -> int:
        return len(self._rules)

    def matches(self, relative: Union[str, Sequence[str]]) -> bool:
        """
        Check a directory path relative to the data root.

        Args:
            relative: Relative path string or its segments.
        """
        if isinstance(relative, str):
            segments = normalize_rule(relative)
        else:
            segments = tuple(relative) or None
        return segments is not None and self._fold(segments) in self._rules
