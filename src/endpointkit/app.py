"""Typer application and CLI entry point for endpointkit.

The ``endpointkit`` command issues requests through a saved profile and
manages profiles and the on-disk response cache::

    endpointkit profile add github --base-url https://api.github.com --camel-case
    endpointkit -p github request GET /users/octocat --cache-key user:octocat
    endpointkit cache stats

:func:`main` is the console-script entry point declared in
``pyproject.toml``.  :class:`~endpointkit.exceptions.EndpointKitError`
instances exit with their ``exit_code``; anything else exits with
:data:`~endpointkit.exit_codes.EXIT_GENERIC_FAILURE`.
"""

from __future__ import annotations

import signal
import sys
from typing import Any, Optional

import typer

from endpointkit import __version__
from endpointkit.commands.cache import cache_app
from endpointkit.commands.profile import profile_app
from endpointkit.commands.request import request_command
from endpointkit.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="endpointkit",
    help="Send typed, retried, cached API requests from the command line.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("request")(request_command)
app.add_typer(profile_app, name="profile", help="Profile management.")
app.add_typer(cache_app, name="cache", help="Response cache management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"endpointkit {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the profile's base URL."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Initialise the global output manager and share options via ``ctx.obj``."""
    from endpointkit.config import load_global_config
    from endpointkit.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    if not verbose and ctx.invoked_subcommand == "request":
        verbose = load_global_config().verbose

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["base_url"] = base_url


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``endpointkit`` console script."""
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except Exception as exc:
        from endpointkit.exceptions import EndpointKitError
        from endpointkit.output import error

        if isinstance(exc, EndpointKitError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {type(exc).__name__}: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)


if __name__ == "__main__":
    main()
