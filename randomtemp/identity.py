"""Executable identity values and self-identity comparison.

Responsibilities:
- Describe the running proxy and candidate targets as path-like values.
- Compare identities by file stem so `tool` and `tool.exe` count as one program.
- Determine the running proxy's own location for frozen and script launches.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import sys


@dataclass(frozen=True, slots=True)
class ExecutableIdentity:
    """Path-like identity of the running proxy or of a candidate executable."""

    path: Path

    @classmethod
    def from_value(cls, value: str | Path) -> ExecutableIdentity:
        """Build an identity from a raw path or bare command name."""

        return cls(path=Path(value))

    @property
    def is_absolute(self) -> bool:
        """Whether the proxy would launch this path directly on the host platform."""

        return is_absolute_program(str(self.path))

    @property
    def name(self) -> str | None:
        return self.path.name or None

    @property
    def stem(self) -> str | None:
        """File name with its last suffix removed, or `None` for an empty name."""

        if not self.path.name:
            return None
        return self.path.stem

    @property
    def has_suffix(self) -> bool:
        return bool(self.path.suffix)

    def resolved_location(self) -> Path:
        """Return the fully resolved location used for same-file checks."""

        return self.path.resolve()


def is_absolute_program(value: str, platform: str | None = None) -> bool:
    """Return whether `value` is a fully qualified path for `platform` (`os.name`).

    Windows accepts drive-qualified (`C:\\x`) and UNC (`\\\\host\\share`) paths only;
    drive-relative or rooted forms such as `\\tools\\cl.exe` are not absolute.
    """

    platform_name = os.name if platform is None else platform
    if platform_name != "nt":
        return value.startswith("/")
    normalized = value.replace("/", "\\")
    if normalized.startswith("\\\\"):
        return True
    return len(normalized) >= 3 and normalized[1] == ":" and normalized[2] == "\\"


def same_program(first: ExecutableIdentity | None, second: ExecutableIdentity | None) -> bool:
    """Return whether two identities denote the same program by stem."""

    if first is None or second is None:
        return False
    first_stem = first.stem
    second_stem = second.stem
    if first_stem is None or second_stem is None:
        return False
    return first_stem == second_stem


def same_location(candidate: str | Path, current: ExecutableIdentity) -> bool:
    """Return whether a search hit is the running proxy's own file."""

    return Path(candidate).resolve() == current.resolved_location()


def current_executable() -> ExecutableIdentity:
    """Return the identity of the running proxy.

    Frozen builds (for example PyInstaller) report the bundled executable.
    Console-script launches report the absolute invocation path without
    following symlinks, so a proxy installed under another program's name
    keeps that name.
    """

    frozen = bool(getattr(sys, "frozen", False))
    if frozen:
        return ExecutableIdentity(path=Path(sys.executable).absolute())
    return ExecutableIdentity(path=Path(sys.argv[0]).absolute())
