"""Doctor command for environment diagnostics."""

from __future__ import annotations

import getpass
import os
from pathlib import Path

import typer

from adapters.appmanage import AppManageTools
from adapters.domain_homes import discover_domains
from cli.ui_components import build_doctor_table, console
from core.config import InstallSettings


def _check_dir(name: str, path: Path | None) -> tuple[str, str]:
    if path is None:
        return "FAIL", f"{name} not set"
    if not path.is_dir():
        return "FAIL", f"{path} is not a directory"
    return "OK", str(path)


def _check_binary(path: Path) -> tuple[str, str]:
    if not path.is_file():
        return "FAIL", f"{path} not found"
    if not os.access(path, os.X_OK):
        return "FAIL", f"{path} is not executable"
    return "OK", str(path)


def doctor() -> None:
    """Check the TIBCO environment and show what an installation would use."""

    settings = InstallSettings()
    table = build_doctor_table()
    failures = 0

    # Environment
    for name, path in (("TIBCO_HOME", settings.tibco_home), ("TIBCO_TRA_HOME", settings.tra_home)):
        status, detail = _check_dir(name, path)
        failures += status == "FAIL"
        table.add_row(name, status, detail)

    # Vendor tools
    if settings.tra_home is not None:
        tools = AppManageTools.from_settings(settings)
        for binary in (tools.appmanage, tools.appstatuscheck, tools.obfuscate_bin):
            status, detail = _check_binary(binary)
            failures += status == "FAIL"
            table.add_row(binary.name, status, detail)

    # Operator
    current = getpass.getuser()
    if settings.required_user and current != settings.required_user:
        failures += 1
        table.add_row("User", "FAIL", f'running as "{current}", expected "{settings.required_user}"')
    else:
        table.add_row("User", "OK", current)

    # Domains
    if settings.domain:
        table.add_row("Domain", "OK", f"{settings.domain} (configured)")
    elif settings.tibco_home is not None:
        domains = discover_domains(settings.domain_homes_file)
        if len(domains) == 1:
            table.add_row("Domain", "OK", domains[0])
        else:
            detail = ", ".join(domains) if domains else "none found"
            table.add_row("Domain", "PROMPT", f"{detail} -> asked at install time")

    console.print(table)

    if failures:
        raise typer.Exit(1)
