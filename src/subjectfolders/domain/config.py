from __future__ import annotations

"""
Configuration Domain Management.

Reads the per-deployment INI file and exposes the immutable AppConfig
consumed by every stage. Raw values are strings; type coercion and
validation live in 'subjectfolders.core.pipeline.validator'.
"""

import configparser
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from subjectfolders.domain import constants as const
from subjectfolders.domain.errors import SetupError

logger = logging.getLogger(__name__)

RawConfig = Dict[str, Dict[str, str]]

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
SECTION_PATHS = "Paths"
SECTION_RECONCILE = "Reconcile"
SECTION_IGNORE = "Ignore"
SECTION_SHORTCUT = "Shortcut"
SECTION_PERMISSIONS = "Permissions"
SECTION_NOTIFY = "Notify"
SECTION_ARCHIVE = "Archive"

REQUIRED_PATH_KEYS = ("dataroot", "specfile", "templatedir")


def get_default_config() -> RawConfig:
    """
    Generate the default raw configuration.

    Keys are lowercase, matching configparser's option normalization.

    Returns:
        RawConfig: Section name to key/value mapping.
    """
    return {
        SECTION_PATHS: {
            "dataroot": "",
            "specfile": "",
            "templatedir": "",
            "htmltemplate": "",
            "htmloutput": "",
            "logfile": "",
            "projecttemplatedir": "",
        },
        SECTION_RECONCILE: {
            "maxdepth": str(const.MAX_TREE_DEPTH),
            "recentdays": str(const.RECENT_THRESHOLD_DAYS),
            "reprovisionexisting": "false",
            "createmissing": "true",
        },
        SECTION_IGNORE: {},
        SECTION_SHORTCUT: {
            "name": const.DEFAULT_SHORTCUT_NAME,
            "target": "",
            "arguments": const.DEFAULT_SHORTCUT_ARGUMENTS,
        },
        SECTION_PERMISSIONS: {
            "principal": const.DEFAULT_PRINCIPAL,
            "rights": const.DEFAULT_RIGHTS,
            "enabled": "true",
        },
        SECTION_NOTIFY: {
            "webhookurl": "",
            "broadcast": "false",
        },
        SECTION_ARCHIVE: {
            "sourceroot": "",
            "archiveroot": "",
            "maxagedays": str(const.DEFAULT_ARCHIVE_MAX_AGE_DAYS),
            "minsizebytes": "0",
        },
    }

# -----------------------------------------------------------------------------
# Configuration Model
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AppConfig:
    """
    Validated, typed configuration for one run.

    Path fields are absolute; relative values in the INI file are resolved
    against the directory that holds it.
    """
    config_path: str
    data_root: str
    spec_file: str
    template_dir: str
    html_template: str = ""
    html_output: str = ""
    log_file: str = ""
    project_template_dir: str = ""

    max_depth: int = const.MAX_TREE_DEPTH
    recent_days: int = const.RECENT_THRESHOLD_DAYS
    reprovision_existing: bool = False
    create_missing: bool = True

    ignore_rules: List[str] = field(default_factory=list)

    shortcut_name: str = const.DEFAULT_SHORTCUT_NAME
    shortcut_target: str = ""
    shortcut_arguments: str = const.DEFAULT_SHORTCUT_ARGUMENTS

    permission_principal: str = const.DEFAULT_PRINCIPAL
    permission_rights: str = const.DEFAULT_RIGHTS
    permissions_enabled: bool = True

    webhook_url: str = ""
    broadcast: bool = False

    archive_source_root: str = ""
    archive_root: str = ""
    archive_max_age_days: int = const.DEFAULT_ARCHIVE_MAX_AGE_DAYS
    archive_min_size_bytes: int = 0

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def read_ini(config_path: str) -> RawConfig:
    """
    Parse an INI file into a raw section mapping merged over defaults.

    Args:
        config_path: Location of the INI file.

    Returns:
        RawConfig: Defaults updated with the file's values.

    Raises:
        SetupError: If the file is missing or cannot be parsed.
    """
    if not config_path or not os.path.isfile(config_path):
        raise SetupError(f"Configuration file not found: {config_path}")

    parser = configparser.ConfigParser(interpolation=None)
    try:
        with open(config_path, "r", encoding="utf-8-sig") as f:
            parser.read_file(f)
    except (configparser.Error, UnicodeDecodeError) as e:
        raise SetupError(f"Malformed configuration file '{config_path}': {e}") from e
    except OSError as e:
        raise SetupError(f"Cannot read configuration file '{config_path}': {e}") from e

    raw = get_default_config()
    for section in parser.sections():
        target = _match_section(raw, section)
        target.update({k: v for k, v in parser.items(section)})

    logger.debug(f"Configuration read from {config_path}")
    return raw


def write_ini(config_path: str, raw: RawConfig) -> None:
    """
    Persist a raw configuration mapping as INI.

    Used by tests and by deployments bootstrapping a first config file.
    """
    parser = configparser.ConfigParser(interpolation=None)
    for section, values in raw.items():
        parser[section] = {k: str(v) for k, v in values.items()}
    parent = os.path.dirname(os.path.abspath(config_path))
    os.makedirs(parent, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        parser.write(f)


def _match_section(raw: RawConfig, section: str) -> Dict[str, str]:
    """Resolve a section name case-insensitively, creating unknown ones."""
    for known in raw:
        if known.lower() == section.lower():
            return raw[known]
    logger.debug(f"Unknown configuration section '{section}' kept as-is.")
    raw[section] = {}
    return raw[section]


def find_config(explicit: Optional[str]) -> str:
    """Resolve the configuration file from the CLI value or environment."""
    candidate = explicit or os.environ.get("SUBJECTFOLDERS_CONFIG", "")
    if not candidate:
        raise SetupError("No configuration file given (use --config or SUBJECTFOLDERS_CONFIG).")
    return os.path.abspath(candidate)
