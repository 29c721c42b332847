"""Command-line entry points for randomtemp.

Responsibilities:
- `main`: the proxy itself; forwards `sys.argv[1:]` untouched to the child.
- `app`: Typer application behind `randomtemp-info` for inspecting the
  effective configuration and the resolved executable.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
import shutil
import sys
from typing import Annotated

import typer

from .cli_rendering import echo_proxy_error, echo_rows, exit_with_command_error
from .config import ConfigLoader, ProxyConfig
from .errors import ProxyStageError
from .identity import ExecutableIdentity
from .proxy import run_proxy
from .resolver import resolve_executable

PROXY_COMMAND_NAME = "randomtemp"
INTERRUPTED_EXIT_CODE = 130

app = typer.Typer(
    name="randomtemp-info",
    no_args_is_help=True,
    add_completion=False,
    help="Inspect how randomtemp would run in the current environment.",
)


def main(argv: Sequence[str] | None = None) -> None:
    """Proxy entrypoint for console scripts; never parses its arguments."""

    forwarded = list(sys.argv[1:] if argv is None else argv)
    try:
        config = ConfigLoader.from_env()
        summary = run_proxy(forwarded, config)
    except ProxyStageError as exc:
        echo_proxy_error(exc)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        # The child received the same SIGINT; exit the way a shell reports it.
        raise SystemExit(INTERRUPTED_EXIT_CODE) from None
    raise SystemExit(summary.exit_code)


def _proxy_identity(proxy_path: Path | None, config: ProxyConfig) -> ExecutableIdentity:
    """Identity of the proxy to inspect, defaulting to `randomtemp` on PATH."""

    if proxy_path is not None:
        return ExecutableIdentity(path=proxy_path.absolute())

    found = shutil.which(PROXY_COMMAND_NAME, path=config.search_path)
    if found is None:
        raise ProxyStageError(
            stage="resolve",
            detail=f"Cannot find `{PROXY_COMMAND_NAME}` in PATH.",
            hint="Pass the proxy location explicitly: `randomtemp-info which <path>`.",
        )
    return ExecutableIdentity(path=Path(found).absolute())


@app.command("config")
def config_command() -> None:
    """Print the effective configuration read from the environment."""

    try:
        config = ConfigLoader.from_env()
    except ProxyStageError as exc:
        exit_with_command_error("config", exc)

    echo_rows(config.as_display_rows())


@app.command("which")
def which_command(
    proxy_path: Annotated[
        Path | None,
        typer.Argument(
            help="Location of an installed proxy (default: `randomtemp` found in PATH).",
        ),
    ] = None,
) -> None:
    """Print the executable a proxy installed at PROXY_PATH would run."""

    try:
        config = ConfigLoader.from_env()
        identity = _proxy_identity(proxy_path, config)
        program = resolve_executable(
            config.executable_override, identity, config.search_path
        )
    except ProxyStageError as exc:
        exit_with_command_error("which", exc)

    typer.echo(program)


if __name__ == "__main__":
    main()
