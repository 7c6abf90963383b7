from __future__ import annotations

"""
Launcher Shortcut Writer.

Writes a double-clickable launcher into a subject folder that starts the
project-creation tool for that folder. Windows gets a '.cmd' file, other
platforms an executable '.sh' script.

Placeholder values are quoted for the launcher's shell, so folder names
containing '$', backticks or '%' reach the launched tool unchanged.
"""

import os
import re
import shlex
import stat
from typing import Optional

_PLACEHOLDER_RX = re.compile(r'"\{(path|config)\}"|\{(path|config)\}')


def quote_for_cmd(value: str) -> str:
    """Quote a value for a batch file; '%' is doubled so it is not expanded."""
    return '"' + value.replace("%", "%%") + '"'


class ShortcutWriter:
    """
    Creates launcher artifacts.

    Args:
        name: Base file name of the launcher (without extension).
        target: Executable the launcher starts.
        arguments: Argument template; '{path}' is replaced by the subject
            folder and '{config}' by the configuration file of this run.
            Quotes written around a placeholder are dropped.
        config_path: Configuration file passed to the launched tool.
        windows: Force the Windows flavour (defaults to the current OS).
    """

    def __init__(
            self,
            name: str,
            target: str,
            arguments: str,
            config_path: str = "",
            windows: Optional[bool] = None,
    ):
        self.name = name
        self.target = target
        self.arguments = arguments
        self.config_path = config_path
        self.windows = (os.name == "nt") if windows is None else windows

    @property
    def file_name(self) -> str:
        return f"{self.name}{'.cmd' if self.windows else '.sh'}"

    def quote(self, value: str) -> str:
        return quote_for_cmd(value) if self.windows else shlex.quote(value)

    def build_arguments(self, directory: str) -> str:
        """Expand the argument template for one subject folder."""
        values = {"path": directory, "config": self.config_path}
        return _PLACEHOLDER_RX.sub(lambda m: self.quote(values[m.group(1) or m.group(2)]), self.arguments)

    def render(self, directory: str) -> str:
        args = self.build_arguments(directory)
        if self.windows:
            return f"@echo off\r\n{self.quote(self.target)} {args}\r\n"
        return f"#!/bin/sh\nexec {self.quote(self.target)} {args}\n"

    def create(self, directory: str) -> str:
        """
        Write the launcher into directory, replacing any previous one.

        Returns:
            str: Path of the written launcher.
        """
        path = os.path.join(directory, self.file_name)
        newline = "" if self.windows else None
        with open(path, "w", encoding="utf-8", newline=newline) as f:
            f.write(self.render(directory))
        if not self.windows:
            mode = stat.S_IMODE(os.stat(path).st_mode)
            os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path
