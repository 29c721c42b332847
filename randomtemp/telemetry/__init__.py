"""Telemetry for proxy runs: retry announcements and verbose diagnostics."""

from .logger import RunLogger

__all__ = ["RunLogger"]
