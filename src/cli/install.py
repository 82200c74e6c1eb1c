"""`bwinstall`: install or upgrade BW application packages into a domain."""

from __future__ import annotations

import contextlib
from pathlib import Path

import typer

from adapters.appmanage import AppManageTools
from adapters.domain_homes import single_domain
from adapters.workspace import Workspace
from cli.common import CONTEXT_SETTINGS, TRACE_OPTION, VERBOSE_OPTION, fail, run_app
from cli.log import configure_logging
from cli.ui_components import console_hooks, print_failure_banner
from core.config import InstallSettings
from core.errors import BwInstallError
from core.interfaces.tools import DomainTools
from core.services.install_pipeline import (
    InstallRequest,
    check_operator,
    open_session,
    run_install,
)

HELP = """\
Install one or more TIBCO BusinessWorks application packages into a domain.
If an application is already installed, attempt to upgrade the application
with the new archive, keeping the existing configuration.
"""

app = typer.Typer(add_completion=False, context_settings=CONTEXT_SETTINGS, help=HELP)


def build_tools(settings: InstallSettings) -> DomainTools:
    return AppManageTools.from_settings(settings)


def _resolve_domain(settings: InstallSettings, domain: str | None) -> str:
    if domain:
        return domain
    if settings.domain:
        return settings.domain
    # Ask when no domain or more than one is configured.
    return single_domain(settings.domain_homes_file) or typer.prompt("Install to domain")


def _install(
    stack: contextlib.ExitStack,
    request: InstallRequest,
    *,
    domain: str | None,
    user: str | None,
) -> None:
    settings = InstallSettings()
    check_operator(settings.required_user)
    settings.require_tibco_home()
    tools = build_tools(settings)

    domain = _resolve_domain(settings, domain)
    user = user or settings.user or typer.prompt(f'User for domain "{domain}"')
    if settings.password is not None:
        password = settings.password.get_secret_value()
    else:
        password = typer.prompt(f'Password for user "{user}"', hide_input=True)

    workspace = Workspace(stack, root=settings.temp_dir)
    session = open_session(workspace, tools, domain=domain, user=user, password=password)
    run_install(request, session, tools, workspace, console_hooks())


@app.command(help=HELP)
def install(
    packages: list[Path] | None = typer.Argument(
        None,
        metavar="[PACKAGE]...",
        help=(
            "A directory or ZIP archive containing an installation package. "
            "Defaults to the working directory."
        ),
        show_default=False,
    ),
    overwrite: bool = typer.Option(
        False,
        "--overwrite",
        "-o",
        help="Perform a clean installation, overwriting any existing configuration.",
    ),
    deploy: bool = typer.Option(
        False,
        "--deploy",
        "-d",
        help="Deploy the application as part of the installation.",
    ),
    verbose: bool = VERBOSE_OPTION,
    trace: bool = TRACE_OPTION,
    domain: str | None = typer.Option(None, "--domain", help="Target domain (skips discovery)."),
    user: str | None = typer.Option(None, "--user", help="Domain user (skips the prompt)."),
) -> None:
    configure_logging(verbose=verbose, trace=trace)
    request = InstallRequest(packages=packages or [Path(".")], overwrite=overwrite, deploy=deploy)

    completed = False
    try:
        with contextlib.ExitStack() as stack:
            _install(stack, request, domain=domain, user=user)
        completed = True
    except BwInstallError as exc:
        raise fail(exc) from exc
    finally:
        if not completed:
            print_failure_banner()


def run() -> None:
    run_app(app)
