from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema ('reconcile', 'create-project', 'archive')
and translates parsed namespaces into keyword options for the core
services.
"""

import argparse
from typing import Any, Dict, List, Optional

from subjectfolders.domain.constants import APP_NAME, APP_VERSION

COMMANDS = ("reconcile", "create-project", "archive")

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the SubjectFolders CLI.

    Without a sub-command the 'reconcile' command runs with its defaults.
    """
    p = argparse.ArgumentParser(
        prog="subjectfolders",
        description=(
            "Provision, verify and archive the shared subject-folder hierarchy "
            "declared in a CSV specification."
        ),
    )
    p.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")

    # --- Configuration and Diagnostics ---
    p.add_argument(
        "-c", "--config",
        dest="config",
        default=None,
        help="INI configuration file (defaults to $SUBJECTFOLDERS_CONFIG).",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Write the run log to this file (overrides [Paths] LogFile).",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Reject configuration values instead of coercing them.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.set_defaults(
        command="reconcile",
        dry_run=False,
        json_output=False,
        no_index=False,
        contents=False,
        no_notify=False,
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")

    # --- reconcile ---
    rec = sub.add_parser("reconcile", help="Reconcile the folder tree and rebuild the HTML index.")
    rec.add_argument(
        "--dry-run",
        action="store_true",
        help="Report differences without creating or provisioning folders.",
    )
    rec.add_argument(
        "--no-index",
        action="store_true",
        help="Skip rendering the HTML index.",
    )
    rec.add_argument(
        "--contents",
        action="store_true",
        help="Include each subject folder's contents preview in the index.",
    )
    rec.add_argument(
        "--no-notify",
        action="store_true",
        help="Do not send the warning to the webhook or console broadcast.",
    )
    rec.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the run result as JSON.",
    )

    # --- create-project ---
    proj = sub.add_parser("create-project", help="Create a project folder inside a subject folder.")
    proj.add_argument(
        "--parent",
        required=True,
        help="Subject folder the project belongs to.",
    )
    proj.add_argument(
        "--name",
        default=None,
        help="Project name; prompts in a window when omitted.",
    )

    # --- archive ---
    arc = sub.add_parser("archive", help="Move aged files into the archive root.")
    arc.add_argument(
        "--dry-run",
        action="store_true",
        help="List archive candidates without moving them.",
    )
    arc.add_argument(
        "--max-age-days",
        type=int,
        default=None,
        help="Override [Archive] MaxAgeDays.",
    )
    arc.add_argument(
        "--min-size",
        dest="min_size_bytes",
        type=int,
        default=None,
        help="Override [Archive] MinSizeBytes.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_run_options(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate 'reconcile' arguments into run_pipeline keyword options."""
    return {
        "dry_run": bool(args.dry_run),
        "write_html": not args.no_index,
        "include_contents": bool(args.contents),
        "notify": not args.no_notify,
    }


def args_to_archive_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate 'archive' arguments into archive_files overrides."""
    overrides: Dict[str, Any] = {"dry_run": bool(args.dry_run)}
    if getattr(args, "max_age_days", None) is not None:
        overrides["max_age_days"] = args.max_age_days
    if getattr(args, "min_size_bytes", None) is not None:
        overrides["min_size_bytes"] = args.min_size_bytes
    return overrides


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    args = build_parser().parse_args(argv)
    if args.command is None:
        args.command = "reconcile"
    return args
