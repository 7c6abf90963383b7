from __future__ import annotations

"""
HTML Index Composer.

Splices generated fragments into a static HTML template at marker pairs
('<!-- NAME_START -->' ... '<!-- NAME_END -->'). Lines between a pair are
replaced; the marker lines themselves and every other line pass through
unchanged, so the output can serve as the next run's template.
"""

import logging
import os
import re
import stat
import tempfile
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from subjectfolders.domain.constants import (
    INDEX_MARKER,
    LISTING_MARKER,
    TIMESTAMP_FORMAT,
    TIMESTAMP_MARKER,
)
from subjectfolders.domain.errors import RenderError

logger = logging.getLogger(__name__)

_MARKER_RX = re.compile(r"^\s*<!--\s*(?P<name>[A-Za-z0-9_]+?)_(?P<edge>START|END)\s*-->\s*$")

DEFAULT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Subject Folders</title>
<style>
li.recent > a { font-weight: bold; }
li.depth-1 { margin-top: 0.6em; }
</style>
</head>
<body>
<h1>Subject Folders</h1>
<!-- INDEX_START -->
<!-- INDEX_END -->
<!-- LISTING_START -->
<!-- LISTING_END -->
<p>Updated:
<!-- TIMESTAMP_START -->
<!-- TIMESTAMP_END -->
</p>
</body>
</html>
"""

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def compose_index(template_lines: Iterable[str], fragments: Dict[str, str]) -> List[str]:
    """
    Replace the regions between marker pairs with generated fragments.

    Args:
        template_lines: Template lines without trailing newlines.
        fragments: Marker name (e.g. 'LISTING') to replacement text.

    Returns:
        List[str]: Output lines.

    Raises:
        RenderError: A START marker has no matching END marker.
    """
    out: List[str] = []
    open_marker: Optional[str] = None
    seen: List[str] = []

    for line in template_lines:
        match = _MARKER_RX.match(line)

        if open_marker is not None:
            if match and match.group("edge") == "END" and match.group("name") == open_marker:
                out.append(line)
                open_marker = None
            continue

        out.append(line)
        if match and match.group("edge") == "START" and match.group("name") in fragments:
            open_marker = match.group("name")
            seen.append(open_marker)
            fragment = fragments[open_marker]
            if fragment:
                out.extend(fragment.splitlines())

    if open_marker is not None:
        raise RenderError(f"Marker {open_marker}_START has no matching {open_marker}_END.")

    for name in fragments:
        if name not in seen:
            logger.warning(f"Template has no {name}_START/{name}_END marker pair.")

    return out


def build_fragments(index_html: str, listing_html: str, now: Optional[datetime] = None) -> Dict[str, str]:
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return {INDEX_MARKER: index_html, LISTING_MARKER: listing_html, TIMESTAMP_MARKER: stamp}


def output_mode(output_path: str) -> int:
    """Mode of the existing output, or 0o666 minus the umask for a new file."""
    try:
        return stat.S_IMODE(os.stat(output_path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_index(template_path: str, output_path: str, fragments: Dict[str, str]) -> str:
    """
    Compose the index from a template file and write it atomically.

    An empty template_path uses the built-in template. A replaced output
    keeps its file mode; a new one gets the default mode for new files.

    Returns:
        str: The output path.

    Raises:
        RenderError: The template cannot be read or the output cannot be written.
    """
    if template_path:
        try:
            with open(template_path, "r", encoding="utf-8") as f:
                template = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise RenderError(f"Cannot read HTML template '{template_path}': {e}") from e
    else:
        template = DEFAULT_TEMPLATE

    lines = compose_index(template.splitlines(), fragments)

    out_dir = os.path.dirname(os.path.abspath(output_path))
    tmp_path = ""
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".index-", suffix=".tmp", dir=out_dir)
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write("\n".join(lines) + "\n")
        os.chmod(tmp_path, output_mode(output_path))
        os.replace(tmp_path, output_path)
    except OSError as e:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise RenderError(f"Cannot write HTML index '{output_path}': {e}") from e

    logger.info(f"HTML index written to {output_path}")
    return output_path
