"""Configuración de logging común a todos los comandos.

`logging` de la librería estándar, renderizado por Rich en stderr.
`--verbose` muestra cada paso; `--trace` además cada comando externo.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(*, verbose: bool = False, trace: bool = False) -> None:
    level = logging.DEBUG if trace else logging.INFO if verbose else logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=trace,
        markup=False,
        rich_tracebacks=trace,
    )
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)
