"""Plantillas Jinja2 para los paquetes stub.

Por qué plantillas:
- `package-info` y los scripts de ejemplo se renderizan desde los ficheros
  `.j2` de este directorio en vez de concatenar strings en el código.
"""

from __future__ import annotations

import shlex
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

_TEMPLATES_DIR = Path(__file__).resolve().parent


def shell_quote(value: object) -> str:
    """Quote a value for bash, double quotes unless expansions must be suppressed."""

    text = str(value)
    if any(char in text for char in "$`\\"):
        return shlex.quote(text)
    return '"' + text.replace('"', '\\"') + '"'


def _get_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["shquote"] = shell_quote
    return env


def render_template(name: str, **context: object) -> str:
    return _get_env().get_template(name).render(**context)
