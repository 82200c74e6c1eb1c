"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales (colores, banner de
  fallo, tablas).
- Permite reutilizar los mismos helpers en install, scaffold y doctor.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from core.services.install_pipeline import PipelineHooks

console = Console()
err_console = Console(stderr=True)


def print_heading(message: str, *, target: Console | None = None) -> None:
    out = target or console
    out.print("\n")
    out.print(Text(message, style="bold yellow underline"), soft_wrap=True)


def print_step(message: str, *, target: Console | None = None) -> None:
    (target or console).print()
    (target or console).print(Text(message, style="bold"), soft_wrap=True)


def print_info(message: str, *, target: Console | None = None) -> None:
    (target or console).print(Text(message), soft_wrap=True)


def print_success(message: str, *, target: Console | None = None) -> None:
    (target or console).print()
    (target or console).print(Text(message, style="bold green"), soft_wrap=True)


def print_error(message: str) -> None:
    err_console.print(Text(message, style="red"), soft_wrap=True)


def print_failure_banner() -> None:
    """Printed on stderr whenever an installation did not complete."""

    err_console.print("\n")
    err_console.print(Text(" !!! INSTALLATION FAILED !!! ", style="bold white on red blink"))


def console_hooks(target: Console | None = None) -> PipelineHooks:
    """Pipeline callbacks that print the progress of an installation."""

    return PipelineHooks(
        heading=lambda m: print_heading(m, target=target),
        step=lambda m: print_step(m, target=target),
        info=lambda m: print_info(m, target=target),
        success=lambda m: print_success(m, target=target),
    )


def build_doctor_table() -> Table:
    table = Table(title="bwinstall doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    return table
