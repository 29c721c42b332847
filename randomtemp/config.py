"""Configuration model and environment loader for randomtemp.

Responsibilities:
- Collect every environment read once at start-up into an immutable value.
- Validate base directory and retry budget before any resolution happens.

Key types:
- `ProxyConfig`: normalized settings for one proxy run.
- `ConfigLoader`: construction helpers for `ProxyConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Mapping

from .errors import ProxyStageError
from .parsing import (
    normalize_optional_string,
    parse_bounded_unsigned,
    parse_permissive_boolean,
)
from .resolver import EXECUTABLE_ENV_KEY
from .runner import DEFAULT_MAX_TRIALS, MAX_TRIAL_LIMIT

BASEDIR_ENV_KEY = "RANDOMTEMP_BASEDIR"
MAXTRIAL_ENV_KEY = "RANDOMTEMP_MAXTRIAL"
VERBOSE_ENV_KEY = "RANDOMTEMP_VERBOSE"


@dataclass(frozen=True, slots=True)
class ProxyConfig:
    """Settings for one proxy run.

    Attributes:
        base_dir: Absolute existing directory that receives scratch directories.
        max_trials: Additional attempts allowed after the first one.
        executable_override: Optional `RANDOMTEMP_EXECUTABLE` value.
        search_path: `PATH` snapshot used for resolution (`None` means `os.defpath`).
        verbose: Whether diagnostics are written to stderr.
        environment: Environment snapshot handed to child processes
            (default: `os.environ` at construction).
    """

    base_dir: Path
    max_trials: int = DEFAULT_MAX_TRIALS
    executable_override: str | None = None
    search_path: str | None = None
    verbose: bool = False
    environment: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))

    def as_display_rows(self) -> list[tuple[str, str]]:
        """Return human-readable key/value rows for diagnostics output."""

        return [
            (EXECUTABLE_ENV_KEY, self.executable_override or "(search PATH by own name)"),
            (BASEDIR_ENV_KEY, str(self.base_dir)),
            (MAXTRIAL_ENV_KEY, str(self.max_trials)),
            (VERBOSE_ENV_KEY, "true" if self.verbose else "false"),
        ]


class ConfigLoader:
    """Factory methods for building validated `ProxyConfig` values."""

    @staticmethod
    def from_env(
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> ProxyConfig:
        """Create a validated config from environment variables.

        Raises:
            ProxyStageError: A configuration value is invalid (stage `config`).
        """

        env_map: Mapping[str, str] = os.environ if env is None else env
        base_dir = ConfigLoader._base_dir(env_map, cwd)
        max_trials = ConfigLoader._max_trials(env_map)
        verbose = ConfigLoader._verbose(env_map)
        return ProxyConfig(
            base_dir=base_dir,
            max_trials=max_trials,
            executable_override=normalize_optional_string(env_map.get(EXECUTABLE_ENV_KEY)),
            search_path=env_map.get("PATH"),
            verbose=verbose,
            environment=dict(env_map),
        )

    @staticmethod
    def _base_dir(env: Mapping[str, str], cwd: Path | None) -> Path:
        """Read the scratch base directory, defaulting to the working directory."""

        raw_value = normalize_optional_string(env.get(BASEDIR_ENV_KEY))
        if raw_value is None:
            try:
                working_dir = cwd if cwd is not None else Path.cwd()
            except OSError as exc:
                raise ProxyStageError(
                    stage="config",
                    detail="Cannot get the current working directory.",
                    hint=f"Set `{BASEDIR_ENV_KEY}` to an existing directory.",
                ) from exc
            return working_dir.absolute()

        base_dir = Path(raw_value)
        if not base_dir.is_absolute() and cwd is not None:
            base_dir = cwd / base_dir
        if not base_dir.is_dir():
            raise ProxyStageError(
                stage="config",
                detail=f"The directory specified in `{BASEDIR_ENV_KEY}` doesn't exist: `{raw_value}`.",
                hint="Create the directory or unset the variable to use the working directory.",
            )
        return base_dir.absolute()

    @staticmethod
    def _max_trials(env: Mapping[str, str]) -> int:
        """Read the retry budget as an integer in `0..255`."""

        if MAXTRIAL_ENV_KEY not in env:
            return DEFAULT_MAX_TRIALS
        parsed = parse_bounded_unsigned(env[MAXTRIAL_ENV_KEY], MAX_TRIAL_LIMIT)
        if parsed is None:
            raise ProxyStageError(
                stage="config",
                detail=(
                    f"`{MAXTRIAL_ENV_KEY}` is not a valid number in "
                    f"0..{MAX_TRIAL_LIMIT}: `{env[MAXTRIAL_ENV_KEY]}`."
                ),
            )
        return parsed

    @staticmethod
    def _verbose(env: Mapping[str, str]) -> bool:
        """Read the optional verbosity flag."""

        if normalize_optional_string(env.get(VERBOSE_ENV_KEY)) is None:
            return False
        parsed = parse_permissive_boolean(env[VERBOSE_ENV_KEY])
        if parsed is None:
            raise ProxyStageError(
                stage="config",
                detail=(
                    f"`{VERBOSE_ENV_KEY}` must be a boolean value "
                    "(`true`/`false`, `1`/`0`, `yes`/`no`)."
                ),
            )
        return parsed
