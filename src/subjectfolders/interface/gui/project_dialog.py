from __future__ import annotations

"""
Project Name Prompt.

Small modal window opened by the subject-folder launcher. Validates the
name as it is typed and returns it on confirmation, or None on cancel.
"""

import logging
from typing import Callable, List, Optional

import customtkinter as ctk

from subjectfolders.core.projects.creator import project_name_problems
from subjectfolders.domain.constants import APP_NAME

logger = logging.getLogger(__name__)


def ask_project_name(
        subject_dir: str,
        validator: Callable[[str], List[str]] = project_name_problems,
) -> Optional[str]:
    """
    Ask the user for a new project name.

    Args:
        subject_dir: Subject folder the project will be created in (shown to the user).
        validator: Returns the problems with a candidate name.

    Returns:
        Optional[str]: The accepted name, or None if the dialog was cancelled.
    """
    result: dict = {"name": None}

    root = ctk.CTk()
    root.title(f"{APP_NAME} - New Project")
    root.geometry("520x220")
    root.resizable(False, False)

    ctk.CTkLabel(
        root,
        text="New project",
        font=ctk.CTkFont(size=18, weight="bold"),
    ).pack(pady=(16, 4))
    ctk.CTkLabel(root, text=subject_dir, text_color="gray", wraplength=480).pack(padx=20)

    name_var = ctk.StringVar(value="")
    entry = ctk.CTkEntry(root, textvariable=name_var, width=420, placeholder_text="Project name")
    entry.pack(padx=20, pady=(12, 4))

    status_lbl = ctk.CTkLabel(root, text="", text_color="#E04F5F", font=("Any", 11))
    status_lbl.pack(pady=(0, 6))

    buttons = ctk.CTkFrame(root, fg_color="transparent")
    buttons.pack(pady=(4, 12))

    def _refresh(*_args: object) -> None:
        problems = validator(name_var.get())
        status_lbl.configure(text=problems[0] if problems else "")
        btn_ok.configure(state="disabled" if problems else "normal")

    def _accept(*_args: object) -> None:
        name = name_var.get()
        if validator(name):
            return
        result["name"] = name
        root.destroy()

    def _cancel(*_args: object) -> None:
        root.destroy()

    btn_ok = ctk.CTkButton(buttons, text="Create", width=120, command=_accept, state="disabled")
    btn_ok.pack(side="left", padx=8)
    ctk.CTkButton(buttons, text="Cancel", width=120, fg_color="gray", command=_cancel).pack(side="left", padx=8)

    name_var.trace_add("write", _refresh)
    root.bind("<Return>", _accept)
    root.bind("<Escape>", _cancel)
    root.protocol("WM_DELETE_WINDOW", _cancel)
    entry.focus_set()

    root.mainloop()

    if result["name"] is None:
        logger.info("Project creation cancelled.")
    return result["name"]
