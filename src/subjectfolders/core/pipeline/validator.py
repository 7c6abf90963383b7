from __future__ import annotations

"""
Configuration Validation Service.

Turns the raw INI mapping into a typed AppConfig. Loose values are coerced
with a warning (or rejected when strict); missing required keys and
out-of-range numbers raise SetupError.
"""

import logging
import os
import sys
from typing import Any, Dict, List, Tuple

from subjectfolders.domain import config as cfgmod
from subjectfolders.domain.config import AppConfig, RawConfig
from subjectfolders.domain.constants import MAX_TREE_DEPTH
from subjectfolders.domain.errors import SetupError
from subjectfolders.infra.fs import normalize_path

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        raw: RawConfig,
        config_path: str,
        *,
        strict: bool = False,
) -> Tuple[AppConfig, List[str]]:
    """
    Validate and normalize a raw configuration mapping.

    Args:
        raw: Section to key/value mapping, usually from read_ini().
        config_path: Absolute path of the INI file; anchors relative paths.
        strict: If True, raise on values that would otherwise be coerced.

    Returns:
        Tuple[AppConfig, List[str]]: The typed configuration and warnings.

    Raises:
        SetupError: Required keys missing or values out of range.
    """
    if not isinstance(raw, dict):
        raise SetupError(f"Invalid config type: expected dict, received {type(raw).__name__}.")

    warnings: List[str] = []
    defaults = cfgmod.get_default_config()
    merged: Dict[str, Dict[str, Any]] = {k: dict(v) for k, v in defaults.items()}
    for section, values in raw.items():
        merged.setdefault(section, {}).update(values or {})

    paths = merged[cfgmod.SECTION_PATHS]
    missing = [k for k in cfgmod.REQUIRED_PATH_KEYS if not str(paths.get(k) or "").strip()]
    if missing:
        raise SetupError(f"Missing required [{cfgmod.SECTION_PATHS}] keys: {', '.join(missing)}")

    base_dir = os.path.dirname(os.path.abspath(config_path))

    def path_of(key: str, fallback: str = "") -> str:
        return normalize_path(_as_str(paths.get(key), "", key, warnings, strict), fallback, base_dir)

    data_root = path_of("dataroot")

    rec = merged[cfgmod.SECTION_RECONCILE]
    max_depth = _as_int(rec.get("maxdepth"), MAX_TREE_DEPTH, "MaxDepth", warnings, strict)
    if not 1 <= max_depth <= MAX_TREE_DEPTH:
        raise SetupError(f"MaxDepth must be between 1 and {MAX_TREE_DEPTH}, got {max_depth}.")
    recent_days = _as_int(rec.get("recentdays"), 30, "RecentDays", warnings, strict)
    if recent_days < 0:
        raise SetupError(f"RecentDays must not be negative, got {recent_days}.")

    shortcut = merged[cfgmod.SECTION_SHORTCUT]
    perms = merged[cfgmod.SECTION_PERMISSIONS]
    notify = merged[cfgmod.SECTION_NOTIFY]
    archive = merged[cfgmod.SECTION_ARCHIVE]

    app_config = AppConfig(
        config_path=os.path.abspath(config_path),
        data_root=data_root,
        spec_file=path_of("specfile"),
        template_dir=path_of("templatedir"),
        html_template=path_of("htmltemplate"),
        html_output=path_of("htmloutput", os.path.join(data_root, "index.html")),
        log_file=path_of("logfile"),
        project_template_dir=path_of("projecttemplatedir"),
        max_depth=max_depth,
        recent_days=recent_days,
        reprovision_existing=_as_bool(
            rec.get("reprovisionexisting"), False, "ReprovisionExisting", warnings, strict
        ),
        create_missing=_as_bool(rec.get("createmissing"), True, "CreateMissing", warnings, strict),
        ignore_rules=_ignore_values(merged),
        shortcut_name=_as_str(shortcut.get("name"), "New Project", "Name", warnings, strict),
        shortcut_target=_as_str(shortcut.get("target"), sys.executable, "Target", warnings, strict),
        shortcut_arguments=_as_str(
            shortcut.get("arguments"), defaults[cfgmod.SECTION_SHORTCUT]["arguments"],
            "Arguments", warnings, strict,
        ),
        permission_principal=_as_str(perms.get("principal"), "Users", "Principal", warnings, strict),
        permission_rights=_as_str(perms.get("rights"), "full", "Rights", warnings, strict).lower(),
        permissions_enabled=_as_bool(perms.get("enabled"), True, "Enabled", warnings, strict),
        webhook_url=_as_str(notify.get("webhookurl"), "", "WebhookUrl", warnings, strict),
        broadcast=_as_bool(notify.get("broadcast"), False, "Broadcast", warnings, strict),
        archive_source_root=normalize_path(archive.get("sourceroot"), "", base_dir),
        archive_root=normalize_path(archive.get("archiveroot"), "", base_dir),
        archive_max_age_days=_as_int(archive.get("maxagedays"), 365, "MaxAgeDays", warnings, strict),
        archive_min_size_bytes=_as_int(archive.get("minsizebytes"), 0, "MinSizeBytes", warnings, strict),
    )

    for w in warnings:
        logger.warning(f"Configuration Warning: {w}")

    return app_config, warnings


def load_app_config(config_path: str, *, strict: bool = False) -> Tuple[AppConfig, List[str]]:
    """Read and validate the INI file at config_path."""
    return validate_config(cfgmod.read_ini(config_path), config_path, strict=strict)


def check_reconcile_setup(cfg: AppConfig) -> None:
    """
    Verify the files and directories a reconciliation run depends on.

    Raises:
        SetupError: A required file or directory is missing.
    """
    if not os.path.isdir(cfg.data_root):
        raise SetupError(f"Data root directory not found: {cfg.data_root}")
    if not os.path.isfile(cfg.spec_file):
        raise SetupError(f"Specification file not found: {cfg.spec_file}")
    if not os.path.isdir(cfg.template_dir):
        raise SetupError(f"Template directory not found: {cfg.template_dir}")
    if cfg.html_template and not os.path.isfile(cfg.html_template):
        raise SetupError(f"HTML template not found: {cfg.html_template}")


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _ignore_values(merged: Dict[str, Dict[str, Any]]) -> List[str]:
    """Collect the values of the [Ignore] section; key names are irrelevant."""
    section = merged.get(cfgmod.SECTION_IGNORE, {})
    return [str(v).strip() for v in section.values() if str(v or "").strip()]


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise SetupError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce INI truthy/falsy keywords into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        return fallback

    s = str(value).strip().lower()
    if s in ("true", "1", "yes", "on"):
        return True
    if s in ("false", "0", "no", "off"):
        return False

    msg = f"Invalid field '{field}': expected bool, received '{value}'."
    if strict:
        raise SetupError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Parse integer settings."""
    if isinstance(value, bool):
        value = str(value)
    if isinstance(value, int):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        return fallback
    try:
        return int(str(value).strip())
    except ValueError:
        msg = f"Invalid field '{field}': expected int, received '{value}'."
        if strict:
            raise SetupError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback
