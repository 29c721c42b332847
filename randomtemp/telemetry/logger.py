"""Run logging for the proxy.

Responsibilities:
- Print the `Retry attempt: N` line on stdout before each retry.
- Emit deterministic diagnostic lines on stderr when verbose mode is enabled.
"""

from __future__ import annotations

from collections.abc import Callable
import sys
from typing import Any, TextIO

from loguru import logger as _loguru_logger

_CHANNEL_KEY = "channel"
_RETRY_CHANNEL = "retry"
_DIAGNOSTIC_CHANNEL = "diagnostic"


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/", "\\"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


def _channel_filter(channel: str) -> Callable[[dict[str, Any]], bool]:
    def _accept(record: dict[str, Any]) -> bool:
        return record["extra"].get(_CHANNEL_KEY) == channel

    return _accept


class RunLogger:
    """Emit the retry line and optional diagnostics for one proxy run."""

    def __init__(
        self,
        verbose: bool = False,
        sink: TextIO | None = None,
        diagnostic_sink: TextIO | None = None,
    ) -> None:
        """Configure loguru sinks for retry output and diagnostics."""

        self._sink = sink or sys.stdout
        self._diagnostic_sink = diagnostic_sink or sys.stderr
        _loguru_logger.remove()
        _loguru_logger.add(
            self._sink,
            format="{message}",
            level="INFO",
            colorize=False,
            filter=_channel_filter(_RETRY_CHANNEL),
        )
        if verbose:
            _loguru_logger.add(
                self._diagnostic_sink,
                format="{message}",
                level="DEBUG",
                colorize=False,
                filter=_channel_filter(_DIAGNOSTIC_CHANNEL),
            )
        self._retry = _loguru_logger.bind(**{_CHANNEL_KEY: _RETRY_CHANNEL})
        self._diagnostic = _loguru_logger.bind(**{_CHANNEL_KEY: _DIAGNOSTIC_CHANNEL})

    def log_retry(self, retry_number: int) -> None:
        """Announce the retry about to start."""

        self._retry.info(f"Retry attempt: {retry_number}")

    def debug(self, event: str, **context: object) -> None:
        """Emit one diagnostic line; dropped unless verbose mode is enabled."""

        line = f"[randomtemp] level=DEBUG event={event}{_format_context(context)}"
        self._diagnostic.debug(line)
