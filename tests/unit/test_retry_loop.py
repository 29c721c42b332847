"""Unit tests for the isolated-retry execution loop."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from randomtemp.errors import ProxyStageError
from randomtemp.launcher import DirectLaunch, LaunchPlan
from randomtemp.runner import RetryLoop
from randomtemp.telemetry.logger import RunLogger


class RecordingSpawner:
    """Fake spawner returning scripted exit codes and recording each plan."""

    def __init__(self, exit_codes: list[int]) -> None:
        """Initialize with exit codes returned in call order."""

        self._exit_codes = list(exit_codes)
        self.plans: list[LaunchPlan] = []
        self.scratch_existed: list[bool] = []

    def __call__(self, plan: LaunchPlan) -> int:
        self.plans.append(plan)
        self.scratch_existed.append(Path(plan.env["TMPDIR"]).is_dir())
        return self._exit_codes.pop(0)


def _loop(
    tmp_path: Path, spawner: RecordingSpawner, max_trials: int, sink: io.StringIO
) -> RetryLoop:
    return RetryLoop(
        base_dir=tmp_path,
        max_trials=max_trials,
        environment={"PATH": "/usr/bin"},
        run_logger=RunLogger(sink=sink),
        spawner=spawner,
        platform="posix",
    )


def test_failing_program_exhausts_budget_and_returns_last_code(tmp_path: Path) -> None:
    """Budget B should give exactly 1 + B attempts and B retry lines."""

    sink = io.StringIO()
    spawner = RecordingSpawner([2, 2, 2, 7])
    summary = _loop(tmp_path, spawner, max_trials=3, sink=sink).run("/usr/bin/cc", ["-c"])

    assert summary.exit_code == 7
    assert [attempt.ordinal for attempt in summary.attempts] == [1, 2, 3, 4]
    assert sink.getvalue() == "Retry attempt: 1\nRetry attempt: 2\nRetry attempt: 3\n"


def test_success_on_second_attempt_stops_loop(tmp_path: Path) -> None:
    """A success on the second try should end the loop with exit code 0."""

    sink = io.StringIO()
    spawner = RecordingSpawner([1, 0])
    summary = _loop(tmp_path, spawner, max_trials=5, sink=sink).run("/usr/bin/cc", [])

    assert summary.exit_code == 0
    assert len(summary.attempts) == 2
    assert sink.getvalue() == "Retry attempt: 1\n"


def test_zero_budget_runs_once(tmp_path: Path) -> None:
    """A zero budget should never retry."""

    sink = io.StringIO()
    spawner = RecordingSpawner([4])
    summary = _loop(tmp_path, spawner, max_trials=0, sink=sink).run("/usr/bin/cc", [])

    assert summary.exit_code == 4
    assert len(summary.attempts) == 1
    assert sink.getvalue() == ""


def test_each_attempt_gets_a_fresh_scratch_directory(tmp_path: Path) -> None:
    """Scratch directories must be distinct, live during the child, gone afterwards."""

    sink = io.StringIO()
    spawner = RecordingSpawner([1, 1, 1])
    summary = _loop(tmp_path, spawner, max_trials=2, sink=sink).run("/usr/bin/cc", [])

    scratch_dirs = [attempt.scratch_dir for attempt in summary.attempts]
    assert len(set(scratch_dirs)) == 3
    assert spawner.scratch_existed == [True, True, True]
    assert all(not scratch.exists() for scratch in scratch_dirs)
    assert list(tmp_path.iterdir()) == []
    assert [plan.env["TMPDIR"] for plan in spawner.plans] == [str(path) for path in scratch_dirs]


def test_child_environment_keeps_snapshot_and_forwards_args(tmp_path: Path) -> None:
    """The child should get the start-up environment plus TMPDIR, args untouched."""

    sink = io.StringIO()
    spawner = RecordingSpawner([0])
    _loop(tmp_path, spawner, max_trials=3, sink=sink).run(
        "/usr/bin/cc", ["-o", "out dir/a.out"], strategy=DirectLaunch()
    )

    plan = spawner.plans[0]
    assert plan.argv == ("/usr/bin/cc", "-o", "out dir/a.out")
    assert plan.env["PATH"] == "/usr/bin"
    assert Path(plan.env["TMPDIR"]).parent == tmp_path


def test_windows_platform_sets_both_temp_variables(tmp_path: Path) -> None:
    """Windows-style runs expose the scratch directory through TEMP and TMP."""

    plans: list[LaunchPlan] = []

    def _spawner(plan: LaunchPlan) -> int:
        plans.append(plan)
        return 0

    loop = RetryLoop(
        base_dir=tmp_path,
        run_logger=RunLogger(sink=io.StringIO()),
        spawner=_spawner,
        platform="nt",
    )
    loop.run("dir", ["C:\\Program Files"])

    assert plans[0].env["TEMP"] == plans[0].env["TMP"]
    assert plans[0].argv[0] == "cmd"


def test_launch_error_is_fatal_and_releases_scratch(tmp_path: Path) -> None:
    """Launch failures abort without retrying and still remove the directory."""

    calls: list[str] = []

    def _failing_spawner(plan: LaunchPlan) -> int:
        calls.append(plan.env["TMPDIR"])
        raise ProxyStageError(stage="launch", detail="Failed to execute `/missing`.")

    loop = RetryLoop(
        base_dir=tmp_path,
        max_trials=3,
        run_logger=RunLogger(sink=io.StringIO()),
        spawner=_failing_spawner,
        platform="posix",
    )

    with pytest.raises(ProxyStageError) as exc_info:
        loop.run("/missing", [])

    assert exc_info.value.stage == "launch"
    assert len(calls) == 1
    assert list(tmp_path.iterdir()) == []


def test_retry_loop_rejects_out_of_range_budget(tmp_path: Path) -> None:
    """Budgets outside 0..255 should be rejected at construction."""

    with pytest.raises(ValueError):
        RetryLoop(base_dir=tmp_path, max_trials=256)
    with pytest.raises(ValueError):
        RetryLoop(base_dir=tmp_path, max_trials=-1)
