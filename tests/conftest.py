"""Shared pytest fixtures for the full randomtemp test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
import stat

import pytest

RANDOMTEMP_ENV_KEYS = (
    "RANDOMTEMP_EXECUTABLE",
    "RANDOMTEMP_BASEDIR",
    "RANDOMTEMP_MAXTRIAL",
    "RANDOMTEMP_VERBOSE",
    "RANDOMTEMP_COMMANDLINE",
)


@pytest.fixture(autouse=True)
def _clear_randomtemp_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer `RANDOMTEMP_*` settings out of every test."""

    for key in RANDOMTEMP_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_executable() -> Callable[[Path, str], Path]:
    """Return a factory creating an executable shell script at `directory/name`."""

    def _make(directory: Path, name: str) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make
