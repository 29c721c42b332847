"""Scoped scratch directory acquisition for one proxy attempt."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
import tempfile

from .errors import ProxyStageError

SCRATCH_PREFIX = "randomtemp-"


@contextmanager
def scratch_directory(base_dir: Path) -> Iterator[Path]:
    """Create a uniquely named directory under `base_dir` and remove it on exit.

    Removal happens on every exit path, including launch errors raised inside
    the `with` block. Cleanup failures on files the child left behind are
    ignored so they never replace the child's exit status.

    Raises:
        ProxyStageError: The directory could not be created.
    """

    try:
        handle = tempfile.TemporaryDirectory(
            prefix=SCRATCH_PREFIX,
            dir=base_dir,
            ignore_cleanup_errors=True,
        )
    except OSError as exc:
        raise ProxyStageError(
            stage="scratch",
            detail=f"Cannot create temporary directory under `{base_dir}`: {exc}",
            hint="Check free disk space and write permissions, or set `RANDOMTEMP_BASEDIR`.",
        ) from exc

    with handle as raw_path:
        yield Path(raw_path).absolute()
