"""`bwtool`: umbrella command grouping install, scaffold and the helpers."""

from __future__ import annotations

import typer

from cli.common import CONTEXT_SETTINGS, run_app
from cli.doctor import doctor
from cli.install import install
from cli.scaffold import scaffold
from cli.select_config import select_config

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    context_settings=CONTEXT_SETTINGS,
    help="TIBCO BusinessWorks package installation tools.",
)

app.command(name="install")(install)
app.command(name="scaffold")(scaffold)
app.command(name="select-config")(select_config)
app.command(name="doctor")(doctor)


def run() -> None:
    run_app(app)
