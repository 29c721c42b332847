"""Self-aware resolution of the executable the proxy pretends to be.

Responsibilities:
- Honor an absolute `RANDOMTEMP_EXECUTABLE` override verbatim.
- Search `PATH` for a bare override or for the proxy's own name.
- Never return the running proxy itself, which would recurse forever.
"""

from __future__ import annotations

import os
import shutil

from .errors import ProxyStageError, SelfPretendError
from .identity import ExecutableIdentity, same_location, same_program

EXECUTABLE_ENV_KEY = "RANDOMTEMP_EXECUTABLE"


def resolve_executable(
    override: str | None,
    current: ExecutableIdentity,
    search_path: str | None = None,
) -> str:
    """Resolve the program to run for this invocation.

    Args:
        override: Optional `RANDOMTEMP_EXECUTABLE` value.
        current: Identity of the running proxy.
        search_path: `PATH`-style directory list; `os.defpath` when `None`.

    Returns:
        An absolute path, a search-path-relative path or a bare command name.

    Raises:
        SelfPretendError: A bare override names the proxy itself.
        ProxyStageError: No distinct executable could be determined.
    """

    if override is not None:
        if ExecutableIdentity.from_value(override).is_absolute:
            return override
        return _resolve_bare_override(override, current, search_path)

    name = current.name
    found = find_distinct_executable(name, current, search_path) if name else None
    if found is None:
        raise ProxyStageError(
            stage="resolve",
            detail="Cannot determine which executable to pretend to be.",
            hint=(
                f"Set `{EXECUTABLE_ENV_KEY}` or rename the proxy after another "
                "executable found in PATH."
            ),
        )
    return found


def _resolve_bare_override(
    override: str, current: ExecutableIdentity, search_path: str | None
) -> str:
    """Resolve a non-absolute override through the search path."""

    requested = ExecutableIdentity.from_value(override)
    if same_program(requested, current):
        raise SelfPretendError()

    found = None
    if requested.name is not None:
        found = find_distinct_executable(override, current, search_path)
    if found is not None:
        return found

    # Unsuffixed names may still be shell builtins or functions.
    if not requested.has_suffix:
        return override

    raise ProxyStageError(
        stage="resolve",
        detail=f"`{EXECUTABLE_ENV_KEY}` points to an invalid executable: `{override}`.",
        hint="Use an absolute path or a command name available in PATH.",
    )


def find_distinct_executable(
    name: str, current: ExecutableIdentity, search_path: str | None = None
) -> str | None:
    """Return the first `PATH` match for `name` that is not the running proxy."""

    for directory in search_path_entries(search_path):
        candidate = shutil.which(name, path=directory)
        if candidate is None:
            continue
        if same_location(candidate, current):
            continue
        return candidate
    return None


def search_path_entries(search_path: str | None) -> list[str]:
    """Split a `PATH`-style value into directory entries in order.

    Empty entries stand for the current directory, as in POSIX shells.
    """

    raw = os.defpath if search_path is None else search_path
    if not raw:
        return []
    return [entry or os.curdir for entry in raw.split(os.pathsep)]
