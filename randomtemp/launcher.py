"""Launch strategies for running the resolved program as a child process.

Responsibilities:
- Pick one launch strategy per resolved program (direct image or shell).
- Build the child's argv and environment as a pure `LaunchPlan`.
- Quote whitespace-bearing tokens where the interpreter re-tokenizes them.

Key types:
- `LaunchPlan`: argv and environment for one child process.
- `DirectLaunch`: run an absolute program image with arguments verbatim.
- `PosixShellLaunch`: run a bare name through `sh -c`.
- `CommandPromptLaunch`: run a bare name through `cmd /q /c`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import os
import shlex
from typing import Protocol

from .identity import is_absolute_program

COMMANDLINE_ENV_KEY = "RANDOMTEMP_COMMANDLINE"
_POSIX_TEMP_KEYS = ("TMPDIR",)
_WINDOWS_TEMP_KEYS = ("TEMP", "TMP")


@dataclass(frozen=True, slots=True)
class LaunchPlan:
    """Fully specified child invocation."""

    argv: tuple[str, ...]
    env: dict[str, str]


class LaunchStrategy(Protocol):
    """Protocol for building a child invocation from program, args and env."""

    def build(
        self, program: str, args: Sequence[str], env: Mapping[str, str]
    ) -> LaunchPlan:
        """Return the launch plan for one attempt."""


@dataclass(frozen=True, slots=True)
class DirectLaunch:
    """Launch the program image directly with the forwarded arguments."""

    def build(
        self, program: str, args: Sequence[str], env: Mapping[str, str]
    ) -> LaunchPlan:
        return LaunchPlan(argv=(program, *args), env=dict(env))


@dataclass(frozen=True, slots=True)
class PosixShellLaunch:
    """Launch through `sh -c` so builtins and late PATH lookups still work.

    Forwarded arguments travel as positional parameters (`"$@"`) and are never
    re-tokenized; only the program token is part of the script.
    """

    shell: str = "sh"

    def build(
        self, program: str, args: Sequence[str], env: Mapping[str, str]
    ) -> LaunchPlan:
        script = f'{quote_posix_token(program)} "$@"'
        return LaunchPlan(argv=(self.shell, "-c", script, program, *args), env=dict(env))


@dataclass(frozen=True, slots=True)
class CommandPromptLaunch:
    """Launch through `cmd /q /c`, passing the quoted command line via env.

    The joined command line is expanded by `cmd` from `RANDOMTEMP_COMMANDLINE`,
    which keeps Python's own argument escaping away from it.
    """

    shell: str = "cmd"

    def build(
        self, program: str, args: Sequence[str], env: Mapping[str, str]
    ) -> LaunchPlan:
        child_env = dict(env)
        child_env[COMMANDLINE_ENV_KEY] = build_command_line(program, args)
        return LaunchPlan(
            argv=(self.shell, "/q", "/c", f"%{COMMANDLINE_ENV_KEY}%"),
            env=child_env,
        )


def select_launch_strategy(program: str, platform: str | None = None) -> LaunchStrategy:
    """Select the launch strategy for a resolved program once per run."""

    platform_name = os.name if platform is None else platform
    if is_absolute_program(program, platform_name):
        return DirectLaunch()
    if platform_name == "nt":
        return CommandPromptLaunch()
    return PosixShellLaunch()


def temp_environment(
    base_env: Mapping[str, str], scratch_dir: str, platform: str | None = None
) -> dict[str, str]:
    """Return `base_env` with the platform temp variable(s) set to `scratch_dir`."""

    platform_name = os.name if platform is None else platform
    keys = _WINDOWS_TEMP_KEYS if platform_name == "nt" else _POSIX_TEMP_KEYS
    env = dict(base_env)
    for key in keys:
        env[key] = scratch_dir
    return env


def quote_command_token(token: str) -> str:
    """Wrap a token in double quotes when it contains whitespace."""

    if any(character.isspace() for character in token):
        return f'"{token}"'
    return token


def quote_posix_token(token: str) -> str:
    """Shell-quote a token for `sh` when it contains whitespace."""

    if any(character.isspace() for character in token):
        return shlex.quote(token)
    return token


def build_command_line(program: str, args: Sequence[str]) -> str:
    """Join program and arguments into one command-prompt command line."""

    return " ".join(quote_command_token(token) for token in (program, *args))

