"""Proxy driver: configuration, resolution and the retry loop in one call."""

from __future__ import annotations

from collections.abc import Sequence

from .config import ProxyConfig
from .identity import ExecutableIdentity, current_executable
from .resolver import resolve_executable
from .runner import RetryLoop, RunSummary, Spawner, spawn_child
from .telemetry.logger import RunLogger


def run_proxy(
    args: Sequence[str],
    config: ProxyConfig,
    current: ExecutableIdentity | None = None,
    run_logger: RunLogger | None = None,
    spawner: Spawner = spawn_child,
) -> RunSummary:
    """Resolve the target program and run it with isolated scratch directories.

    Raises:
        ProxyStageError: Resolution, scratch creation or launch failed fatally.
    """

    identity = current or current_executable()
    logger = run_logger or RunLogger(verbose=config.verbose)
    program = resolve_executable(config.executable_override, identity, config.search_path)
    logger.debug("resolved", program=program, proxy=identity.path)

    loop = RetryLoop(
        base_dir=config.base_dir,
        max_trials=config.max_trials,
        environment=config.environment,
        run_logger=logger,
        spawner=spawner,
    )
    return loop.run(program, args)
