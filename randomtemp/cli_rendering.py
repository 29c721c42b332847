"""CLI output and error rendering helpers.

This module centralizes user-facing diagnostics for the proxy entry point and
the `randomtemp-info` commands.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import ProxyStageError, SelfPretendError

_SELF_PRETEND_DETAIL = "`RANDOMTEMP_EXECUTABLE` names the proxy itself."


def echo_proxy_error(exc: ProxyStageError) -> None:
    """Print a one-line proxy failure on stderr; the sentinel prints an empty line."""

    if isinstance(exc, SelfPretendError):
        typer.echo("", err=True)
        return

    typer.secho(exc.detail, fg=typer.colors.RED, err=True)
    if exc.hint:
        typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for info command failures and exit with code 1."""

    if isinstance(exc, ProxyStageError):
        detail = _SELF_PRETEND_DETAIL if isinstance(exc, SelfPretendError) else exc.detail
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_rows(rows: list[tuple[str, str]]) -> None:
    """Print aligned `key  value` rows."""

    width = max((len(key) for key, _ in rows), default=0)
    for key, value in rows:
        typer.echo(f"{key.ljust(width)}  {value}")
