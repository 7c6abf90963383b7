from __future__ import annotations

"""
Logging Configuration Models.

A run logs to stderr from the start and, once the INI file (or --log-file)
names one, to a rotating run log as well.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings for configure_logging().

    Attributes:
        level: Minimum severity name; unknown names fall back to INFO.
        console: Write records to stderr.
        log_file: Run log path, the [Paths] LogFile key or --log-file.
        max_bytes: Size at which the run log rotates.
        backup_count: Rotated run logs kept beside the current one.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 5

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def for_run(cls, debug: bool, log_file: Optional[str] = None) -> LoggingConfig:
        return cls(level="DEBUG" if debug else "INFO", console=True, log_file=log_file or None)

    @property
    def level_number(self) -> int:
        return _LEVEL_MAP.get((self.level or "").strip().upper(), logging.INFO)
