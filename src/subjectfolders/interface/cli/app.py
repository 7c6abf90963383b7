from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration loading
and validation, command dispatch and result rendering. Exit codes: 0 on
success (folder differences are warnings, not failures) or when the user
cancels, 1 on setup errors, 130 when interrupted.
"""

import json
import sys
from typing import Any, Dict, List, Optional

from subjectfolders.core.archive.archiver import archive_files
from subjectfolders.core.pipeline.engine import run_pipeline
from subjectfolders.core.pipeline.validator import load_app_config
from subjectfolders.core.projects.creator import create_project
from subjectfolders.core.report.warnings import build_warning_message, warning_payload
from subjectfolders.domain.config import AppConfig, find_config
from subjectfolders.domain.errors import CreationError, SetupError
from subjectfolders.domain.run_models import RunResult
from subjectfolders.infra.logging import LoggingConfig, configure_logging, get_logger
from subjectfolders.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_SETUP_ERROR = 1
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    args = cli_args.parse_args(argv)

    # 2. Logging bootstrap (console only until the config names a log file)
    configure_logging(LoggingConfig.for_run(args.debug, args.log_file))

    # 3. Configuration
    try:
        config_path = find_config(args.config)
        cfg, _warnings = load_app_config(config_path, strict=bool(args.strict))
    except SetupError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_SETUP_ERROR

    log_file = args.log_file or cfg.log_file
    if log_file:
        configure_logging(LoggingConfig.for_run(args.debug, log_file), force=True)

    # 4. Command dispatch
    try:
        if args.command == "create-project":
            return _run_create_project(args, cfg)
        if args.command == "archive":
            return _run_archive(args, cfg)
        return _run_reconcile(args, cfg)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED

# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def _run_reconcile(args: Any, cfg: AppConfig) -> int:
    result = run_pipeline(cfg, **cli_args.args_to_run_options(args))

    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return EXIT_SETUP_ERROR

    if args.json_output:
        print(json.dumps(result_to_dict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)
    return EXIT_OK


def _run_create_project(args: Any, cfg: AppConfig) -> int:
    name = args.name
    if name is None:
        from subjectfolders.interface.gui.project_dialog import ask_project_name
        name = ask_project_name(args.parent)
        if name is None:
            return EXIT_OK

    try:
        path = create_project(args.parent, name, template_dir=cfg.project_template_dir)
    except (ValueError, FileExistsError, CreationError) as e:
        logger.error(f"Project not created: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_SETUP_ERROR

    print(f"Project created: {path}")
    return EXIT_OK


def _run_archive(args: Any, cfg: AppConfig) -> int:
    overrides = cli_args.args_to_archive_overrides(args)
    try:
        result = archive_files(
            cfg.archive_source_root,
            cfg.archive_root,
            overrides.get("max_age_days", cfg.archive_max_age_days),
            overrides.get("min_size_bytes", cfg.archive_min_size_bytes),
            dry_run=overrides["dry_run"],
        )
    except SetupError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_SETUP_ERROR

    if result.dry_run:
        print(f"Archive candidates: {len(result.candidates)}")
        for path in result.candidates:
            print(f"  - {path}")
    else:
        print(f"Files archived: {len(result.moved)} of {len(result.candidates)}")
    for err in result.errors:
        print(f"  ! {err.path}: {err.message}", file=sys.stderr)
    return EXIT_OK

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def result_to_dict(result: RunResult) -> Dict[str, Any]:
    """JSON-serializable view of a run result (the tree itself is omitted)."""
    data: Dict[str, Any] = {
        "ok": result.ok,
        "error": result.error,
        "data_root": result.data_root,
        "dry_run": result.dry_run,
        "created": list(result.created),
        "provisioned": list(result.provisioned),
        "index_path": result.index_path,
        "index_written": result.index_written,
        "summary": dict(result.summary),
    }
    data.update(warning_payload(result.differences, result.errors))
    return data


def _print_human_summary(result: RunResult) -> None:
    """Print the run result to standard output."""
    print(f"Data root: {result.data_root}" + (" (dry run)" if result.dry_run else ""))

    stats_keys = {
        "created": "Folders created",
        "provisioned": "Subject folders provisioned",
        "only_on_disk": "Folders not in specification",
        "only_in_spec": "Folders missing from disk",
        "errors": "Errors",
    }
    for key, label in stats_keys.items():
        if key in result.summary:
            print(f"{label}: {result.summary[key]}")

    if result.index_written:
        print(f"HTML index: {result.index_path}")

    message = build_warning_message(result.differences, result.errors)
    if message:
        print("\nWARNING\n" + message)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
