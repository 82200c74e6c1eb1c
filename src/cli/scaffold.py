"""`bwscaffold`: create a basic installation package stub."""

from __future__ import annotations

from pathlib import Path

import typer

from cli.common import CONTEXT_SETTINGS, TRACE_OPTION, VERBOSE_OPTION, fail, run_app
from cli.log import configure_logging
from cli.ui_components import print_info
from core.config import InstallSettings
from core.errors import BwInstallError
from core.services.scaffold import create_package

HELP = "Create a basic installation package stub for a TIBCO BusinessWorks application."

app = typer.Typer(add_completion=False, context_settings=CONTEXT_SETTINGS, help=HELP)


@app.command(help=HELP)
def scaffold(
    directory: Path = typer.Argument(
        ...,
        help=(
            "The directory to create the package in. If it exists it is scanned "
            "for an enterprise archive to guess the application name."
        ),
    ),
    appname: str | None = typer.Option(
        None,
        "--appname",
        "-a",
        metavar="NAME",
        help="The name (including folder structure) of the BW application.",
    ),
    verbose: bool = VERBOSE_OPTION,
    trace: bool = TRACE_OPTION,
) -> None:
    configure_logging(verbose=verbose, trace=trace)
    settings = InstallSettings()
    try:
        result = create_package(
            directory,
            appname=appname or settings.application,
            domains=settings.default_domains,
        )
    except BwInstallError as exc:
        raise fail(exc) from exc
    print_info(f"Package stub created in {result.packagedir}")


def run() -> None:
    run_app(app)
