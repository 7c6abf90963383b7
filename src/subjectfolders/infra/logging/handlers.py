from __future__ import annotations

"""
Logging Handler Factories.

Every handler built here is tagged, so reconfiguration removes exactly the
handlers this application installed and leaves those of pytest or an
embedding process alone.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from subjectfolders.infra.logging.config import LoggingConfig

_HANDLER_TAG_ATTR: str = "_subjectfolders_handler"


def _tag_handler(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def create_console_handler(cfg: LoggingConfig) -> logging.Handler:
    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(cfg.level_number)
    sh.setFormatter(logging.Formatter(cfg.console_fmt))
    return _tag_handler(sh)


def create_run_log_handler(cfg: LoggingConfig) -> Optional[logging.Handler]:
    """
    Open the rotating run log named by cfg.log_file.

    A run log that cannot be opened must not stop a scheduled run, so the
    failure goes to stderr and None is returned.

    Returns:
        Optional[logging.Handler]: Configured handler or None if I/O fails.
    """
    log_file = cfg.log_file or ""
    try:
        parent = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(parent, exist_ok=True)
        fh = RotatingFileHandler(
            log_file,
            maxBytes=int(cfg.max_bytes),
            backupCount=int(cfg.backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open log file '{log_file}': {e}\n")
        return None
    fh.setLevel(cfg.level_number)
    fh.setFormatter(logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt))
    return _tag_handler(fh)
