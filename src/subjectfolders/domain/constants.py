from __future__ import annotations

"""
Domain Constants.

Centralizes the fixed values shared by the reconciliation, provisioning,
rendering and reporting stages.
"""


APP_NAME = "SubjectFolders"
APP_VERSION = "1.0.0"

# Depth of the declared hierarchy in the reference deployment
MAX_TREE_DEPTH = 5

RECENT_THRESHOLD_DAYS = 30

# Depth of the per-leaf contents preview
CONTENTS_PREVIEW_DEPTH = 2

PROJECTS_DIR_NAME = "Projects"
PROVISIONED_MARKER = ".subjectfolders-provisioned"

DEFAULT_SHORTCUT_NAME = "New Project"
DEFAULT_SHORTCUT_ARGUMENTS = (
    "-m subjectfolders create-project --parent {path} --config {config}"
)

DEFAULT_PRINCIPAL = "Users"
DEFAULT_RIGHTS = "full"

# Marker pairs recognized in the HTML index template
INDEX_MARKER = "INDEX"
LISTING_MARKER = "LISTING"
TIMESTAMP_MARKER = "TIMESTAMP"

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

# Project naming rule
PROJECT_NAME_MAX_LENGTH = 64
INVALID_NAME_CHARS = '<>:"/\\|?*'
RESERVED_DEVICE_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)

DEFAULT_ARCHIVE_MAX_AGE_DAYS = 365
