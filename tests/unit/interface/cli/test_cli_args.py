from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. The default command and its option defaults.
2. Mapping of 'reconcile' flags to pipeline options.
3. Archive overrides and the create-project schema.
"""

import pytest

from subjectfolders.interface.cli.args import (
    args_to_archive_overrides,
    args_to_run_options,
    parse_args,
)


def test_default_command_is_reconcile() -> None:
    args = parse_args(["--config", "app.ini"])

    assert args.command == "reconcile"
    assert args.config == "app.ini"
    assert args_to_run_options(args) == {
        "dry_run": False,
        "write_html": True,
        "include_contents": False,
        "notify": True,
    }


def test_reconcile_flags_mapping() -> None:
    """Verify boolean flags are mapped correctly to pipeline options."""
    args = parse_args(["--debug", "reconcile", "--dry-run", "--no-index", "--contents", "--no-notify", "--json"])

    assert args.debug is True
    assert args.json_output is True
    assert args_to_run_options(args) == {
        "dry_run": True,
        "write_html": False,
        "include_contents": True,
        "notify": False,
    }


def test_archive_overrides() -> None:
    args = parse_args(["archive", "--dry-run", "--max-age-days", "90"])
    assert args_to_archive_overrides(args) == {"dry_run": True, "max_age_days": 90}

    args = parse_args(["archive", "--min-size", "1024"])
    assert args_to_archive_overrides(args) == {"dry_run": False, "min_size_bytes": 1024}


def test_create_project_requires_parent() -> None:
    args = parse_args(["create-project", "--parent", "/data/HR", "--name", "Budget"])
    assert (args.command, args.parent, args.name) == ("create-project", "/data/HR", "Budget")

    with pytest.raises(SystemExit):
        parse_args(["create-project"])
