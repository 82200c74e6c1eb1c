"""Fontanería compartida por los console scripts.

Nota:
- Los errores de uso salen con status 1; el 2 de click queda reservado para
  un fallo del chequeo de estado del dominio.
"""

from __future__ import annotations

import sys

import click
import typer

from cli.ui_components import err_console, print_error
from core.errors import BwInstallError, StatusCheckError

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Turn on verbose output.")
TRACE_OPTION = typer.Option(False, "--trace", "-t", help="Turn on trace output.")


def fail(exc: BwInstallError) -> typer.Exit:
    """Report an error on stderr and build the matching `typer.Exit`."""

    if isinstance(exc, StatusCheckError) and exc.output:
        err_console.print(exc.output.rstrip("\n"), markup=False, highlight=False, soft_wrap=True)
    print_error(exc.message)
    return typer.Exit(exc.exit_code)


def run_app(app: typer.Typer, args: list[str] | None = None) -> None:
    """Run a Typer app and terminate the process with its exit code."""

    try:
        rv = app(args=args, standalone_mode=False)
    except click.exceptions.UsageError as exc:
        exc.show()
        if exc.ctx is not None:
            click.echo("\n" + exc.ctx.get_help(), err=True)
        sys.exit(1)
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    sys.exit(rv if isinstance(rv, int) else 0)
