from __future__ import annotations

"""
Directory Permission Backends.

Desired permission entries are declared as a list; the entries already
present on a directory are read back and only the missing ones are added.
Two backends are provided: 'icacls' on Windows and POSIX mode bits
elsewhere.
"""

import logging
import os
import re
import stat
import subprocess
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Protocol, Tuple

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PermissionEntry:
    """
    One access-control entry.

    Attributes:
        principal: User or group the entry applies to.
        rights: Access level: 'full', 'modify', 'write' or 'read'.
        inherit: Inherited by all descendants (files and subfolders).
        allow: Allow entry when True, deny entry otherwise.
    """
    principal: str
    rights: str = "full"
    inherit: bool = True
    allow: bool = True

    def key(self) -> Tuple[str, str, bool, bool]:
        return (self.principal.casefold(), self.rights.casefold(), self.inherit, self.allow)


class PermissionBackend(Protocol):
    def normalize(self, entry: PermissionEntry) -> PermissionEntry: ...

    def get_entries(self, path: str) -> List[PermissionEntry]: ...

    def add_entry(self, path: str, entry: PermissionEntry) -> None: ...


def missing_entries(
        desired: Iterable[PermissionEntry],
        current: Iterable[PermissionEntry],
) -> List[PermissionEntry]:
    """Return desired entries not already present, in declaration order."""
    present = {e.key() for e in current}
    out: List[PermissionEntry] = []
    for entry in desired:
        if entry.key() not in present:
            out.append(entry)
            present.add(entry.key())
    return out


def grant_missing(
        backend: PermissionBackend,
        path: str,
        desired: Iterable[PermissionEntry],
) -> List[PermissionEntry]:
    """
    Add to path every desired entry it does not carry yet.

    Returns:
        List[PermissionEntry]: The entries that were added.
    """
    wanted = [backend.normalize(e) for e in desired]
    to_add = missing_entries(wanted, backend.get_entries(path))
    for entry in to_add:
        backend.add_entry(path, entry)
        logger.debug(f"Granted {entry.rights} to {entry.principal} on {path}")
    return to_add

# -----------------------------------------------------------------------------
# WINDOWS (icacls)
# -----------------------------------------------------------------------------

_ICACLS_RIGHTS: Dict[str, str] = {"F": "full", "M": "modify", "W": "write", "RX": "read", "R": "read"}
_RIGHTS_ICACLS: Dict[str, str] = {"full": "F", "modify": "M", "write": "W", "read": "RX"}
_ACE_RX = re.compile(r"^(?P<principal>.+?):(?P<flags>(?:\([^)]*\))+)$")


class IcaclsBackend:
    """Reads and grants NTFS entries through the 'icacls' command."""

    def __init__(self, executable: str = "icacls"):
        self.executable = executable

    def normalize(self, entry: PermissionEntry) -> PermissionEntry:
        return replace(entry, rights=entry.rights.lower())

    def get_entries(self, path: str) -> List[PermissionEntry]:
        output = self._run([path])
        return parse_icacls_output(output, path)

    def add_entry(self, path: str, entry: PermissionEntry) -> None:
        if not entry.allow:
            raise ValueError("Deny entries are not granted automatically.")
        code = _RIGHTS_ICACLS.get(entry.rights)
        if code is None:
            raise ValueError(f"Unsupported rights '{entry.rights}'.")
        inherit = "(OI)(CI)" if entry.inherit else ""
        self._run([path, "/grant", f"{entry.principal}:{inherit}{code}"])

    def _run(self, args: List[str]) -> str:
        try:
            proc = subprocess.run(
                [self.executable] + args,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise OSError(f"icacls failed ({e.returncode}): {(e.stderr or e.stdout or '').strip()}") from e
        return proc.stdout


def parse_icacls_output(output: str, path: str) -> List[PermissionEntry]:
    """
    Parse the entry listing printed by 'icacls <path>'.

    The first line starts with the path itself; the trailing summary line
    ('Successfully processed ...') carries no entry and is skipped.
    """
    entries: List[PermissionEntry] = []
    for idx, line in enumerate(output.splitlines()):
        text = line.rstrip()
        if idx == 0 and text.lower().startswith(path.lower()):
            text = text[len(path):]
        text = text.strip()
        match = _ACE_RX.match(text)
        if not match:
            continue
        flags = re.findall(r"\(([^)]*)\)", match.group("flags"))
        rights = "special"
        for flag in flags:
            if flag in _ICACLS_RIGHTS:
                rights = _ICACLS_RIGHTS[flag]
        entries.append(PermissionEntry(
            principal=_short_principal(match.group("principal")),
            rights=rights,
            inherit="OI" in flags and "CI" in flags,
            allow="DENY" not in flags,
        ))
    return entries


def _short_principal(principal: str) -> str:
    """Strip well-known domain prefixes so 'BUILTIN\\Users' equals 'Users'."""
    for prefix in ("BUILTIN\\", "NT AUTHORITY\\"):
        if principal.upper().startswith(prefix):
            return principal[len(prefix):]
    return principal

# -----------------------------------------------------------------------------
# POSIX (mode bits)
# -----------------------------------------------------------------------------

_POSIX_CLASSES: Dict[str, int] = {
    "owner": 6, "user": 6,
    "group": 3, "users": 3,
    "other": 0, "others": 0, "everyone": 0,
}
_POSIX_CANONICAL = {6: "owner", 3: "group", 0: "other"}
_POSIX_RIGHTS: Dict[str, int] = {"full": 7, "modify": 7, "write": 3, "read": 5}


class PosixModeBackend:
    """
    Maps entries onto owner/group/other mode bits.

    'Users' maps to the group class and 'Everyone' to other. Mode bits have
    no inheritance, so every entry is reported as inheritable.
    """

    def normalize(self, entry: PermissionEntry) -> PermissionEntry:
        shift = _POSIX_CLASSES.get(entry.principal.lower())
        if shift is None:
            raise ValueError(f"Unknown POSIX principal '{entry.principal}'.")
        if entry.rights.lower() not in _POSIX_RIGHTS:
            raise ValueError(f"Unsupported rights '{entry.rights}'.")
        rights = "full" if entry.rights.lower() == "modify" else entry.rights.lower()
        return PermissionEntry(principal=_POSIX_CANONICAL[shift], rights=rights, inherit=True, allow=True)

    def get_entries(self, path: str) -> List[PermissionEntry]:
        mode = stat.S_IMODE(os.stat(path).st_mode)
        entries: List[PermissionEntry] = []
        for shift, name in _POSIX_CANONICAL.items():
            bits = (mode >> shift) & 0o7
            for rights, wanted in _POSIX_RIGHTS.items():
                if rights != "modify" and bits & wanted == wanted:
                    entries.append(PermissionEntry(principal=name, rights=rights))
        return entries

    def add_entry(self, path: str, entry: PermissionEntry) -> None:
        entry = self.normalize(entry)
        shift = _POSIX_CLASSES[entry.principal]
        mode = stat.S_IMODE(os.stat(path).st_mode)
        os.chmod(path, mode | (_POSIX_RIGHTS[entry.rights] << shift))


def default_backend() -> PermissionBackend:
    return IcaclsBackend() if os.name == "nt" else PosixModeBackend()
