"""`bwtool select-config`: body of the generated `select-config.sh` hook."""

from __future__ import annotations

from pathlib import Path

import typer

from cli.common import TRACE_OPTION, VERBOSE_OPTION, fail
from cli.log import configure_logging
from cli.ui_components import print_info
from core.errors import BwInstallError
from core.services.config_selector import apply_config


def select_config(
    domain: str = typer.Option(..., "--domain", envvar="INSTALL_DOMAIN", help="Target domain."),
    packagedir: Path = typer.Option(
        Path("."),
        "--packagedir",
        envvar="INSTALL_PACKAGEDIR",
        help="Package directory.",
    ),
    baseconfig: str | None = typer.Option(
        None,
        "--baseconfig",
        envvar="INSTALL_BASECONFIG",
        help="Package configuration to point at the selected file.",
    ),
    verbose: bool = VERBOSE_OPTION,
    trace: bool = TRACE_OPTION,
) -> None:
    """Select envconfig/<domain>.xml (or envconfig/default.xml) for the installation."""

    configure_logging(verbose=verbose, trace=trace)
    try:
        selected = apply_config(packagedir, domain, baseconfig)
    except BwInstallError as exc:
        raise fail(exc) from exc
    print_info(f'Using configuration "{selected.relative_to(packagedir)}" for domain "{domain}"')
