"""Isolated-retry execution loop.

Each attempt runs the resolved program inside a fresh scratch directory that is
exposed through the platform temp variable(s) and removed before the next
attempt starts. Attempts repeat until the child succeeds or the retry budget is
spent; only the exit status decides.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
import os
from pathlib import Path
import subprocess

from .errors import ProxyStageError
from .launcher import LaunchPlan, LaunchStrategy, select_launch_strategy, temp_environment
from .scratch import scratch_directory
from .telemetry.logger import RunLogger

MAX_TRIAL_LIMIT = 255
DEFAULT_MAX_TRIALS = 3

Spawner = Callable[[LaunchPlan], int]


@dataclass(frozen=True, slots=True)
class Attempt:
    """Outcome of one finished attempt; its scratch directory is already gone."""

    ordinal: int
    scratch_dir: Path
    exit_code: int


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Final exit code plus every attempt made, in order."""

    exit_code: int
    attempts: tuple[Attempt, ...]


def spawn_child(plan: LaunchPlan) -> int:
    """Run one child to completion and return its normalized exit code.

    Signalled termination (negative return code) counts as exit code 1.

    Raises:
        ProxyStageError: The child could not be launched at all.
    """

    try:
        completed = subprocess.run(list(plan.argv), env=plan.env, check=False)
    except OSError as exc:
        raise ProxyStageError(
            stage="launch",
            detail=f"Failed to execute `{plan.argv[0]}`: {exc}",
            hint="Verify the executable exists and is runnable.",
        ) from exc
    if completed.returncode < 0:
        return 1
    return completed.returncode


class RetryLoop:
    """Run a resolved program with a new scratch directory per attempt."""

    def __init__(
        self,
        base_dir: Path,
        max_trials: int = DEFAULT_MAX_TRIALS,
        environment: Mapping[str, str] | None = None,
        run_logger: RunLogger | None = None,
        spawner: Spawner = spawn_child,
        platform: str | None = None,
    ) -> None:
        """Initialize loop settings.

        Args:
            base_dir: Existing directory under which scratch directories are made.
            max_trials: Additional attempts allowed after the first (0..255).
            environment: Environment snapshot passed to every child (default: `os.environ`).
            run_logger: Logger receiving retry announcements and diagnostics.
            spawner: Callable running a launch plan and returning its exit code.
            platform: `os.name`-style platform override for strategy selection.
        """

        if not 0 <= max_trials <= MAX_TRIAL_LIMIT:
            raise ValueError(f"`max_trials` must be in 0..{MAX_TRIAL_LIMIT}.")
        self._base_dir = base_dir
        self._max_trials = max_trials
        self._environment = dict(os.environ if environment is None else environment)
        self._run_logger = run_logger or RunLogger()
        self._spawner = spawner
        self._platform = platform

    def run(
        self,
        program: str,
        args: Sequence[str],
        strategy: LaunchStrategy | None = None,
    ) -> RunSummary:
        """Run attempts until success or until the retry budget is exhausted."""

        launch_strategy = strategy or select_launch_strategy(program, self._platform)
        forwarded = tuple(args)
        attempts: list[Attempt] = []
        while True:
            retry_number = len(attempts)
            if retry_number > 0:
                self._run_logger.log_retry(retry_number)
            attempt = self._run_attempt(
                retry_number + 1, program, forwarded, launch_strategy
            )
            attempts.append(attempt)
            if attempt.exit_code == 0 or len(attempts) > self._max_trials:
                break
        return RunSummary(exit_code=attempts[-1].exit_code, attempts=tuple(attempts))

    def _run_attempt(
        self,
        ordinal: int,
        program: str,
        args: tuple[str, ...],
        strategy: LaunchStrategy,
    ) -> Attempt:
        with scratch_directory(self._base_dir) as scratch_dir:
            env = temp_environment(self._environment, str(scratch_dir), self._platform)
            plan = strategy.build(program, args, env)
            self._run_logger.debug(
                "attempt_start", attempt=ordinal, scratch=scratch_dir, program=program
            )
            exit_code = self._spawner(plan)
        self._run_logger.debug("attempt_complete", attempt=ordinal, exit_code=exit_code)
        return Attempt(ordinal=ordinal, scratch_dir=scratch_dir, exit_code=exit_code)
