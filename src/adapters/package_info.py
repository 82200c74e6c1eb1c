"""Lectura y escritura de ficheros `package-info`.

El fichero usa sintaxis de asignación de shell (antes se hacía `source`):

    appname="Folder/App"
    prepare=("select-config.sh" "prepare-deploy.sh")

Nota:
- Solo se entiende ese subconjunto: asignaciones escalares y arrays entre
  paréntesis, con comillas de shell y comentarios `#`.
"""

from __future__ import annotations

import re
import shlex
from pathlib import Path

from pydantic import ValidationError

from adapters.templates import render_template
from core.domain.models import PackageInfo
from core.errors import PackageInfoError

PACKAGE_INFO = "package-info"

_ASSIGNMENT = re.compile(r"^\s*(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)=(.*)$")
_REQUIRED = ("appname", "archive")


def parse_package_info(text: str) -> dict[str, str | list[str]]:
    """Parse assignments into a dict; arrays become lists."""

    values: dict[str, str | list[str]] = {}
    lines = iter(text.splitlines())
    for line in lines:
        match = _ASSIGNMENT.match(line)
        if not match:
            continue
        key, raw = match.group(1), match.group(2).strip()
        if raw.startswith("("):
            body = raw[1:]
            # Arrays may span several lines.
            end = _array_end(body)
            while end is None:
                try:
                    body += "\n" + next(lines)
                except StopIteration:
                    raise PackageInfoError(f"{key}: Unterminated array in {PACKAGE_INFO}") from None
                end = _array_end(body)
            values[key] = _split(key, body[:end])
        else:
            tokens = _split(key, raw)
            values[key] = tokens[0] if tokens else ""
    return values


# Quoted strings and comments are skipped when looking for the closing paren.
_ARRAY_TOKEN = re.compile(r"\"(?:\\.|[^\"\\])*\"|'[^']*'|#[^\n]*|\)")


def _array_end(body: str) -> int | None:
    for match in _ARRAY_TOKEN.finditer(body):
        if match.group(0) == ")":
            return match.start()
    return None


def _split(key: str, raw: str) -> list[str]:
    try:
        return shlex.split(raw, comments=True)
    except ValueError as exc:
        raise PackageInfoError(f"{key}: {exc} in {PACKAGE_INFO}") from exc


def load_package_info(packagedir: Path, *, label: str | None = None) -> PackageInfo:
    """Load and validate `<packagedir>/package-info`."""

    path = packagedir / PACKAGE_INFO
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PackageInfoError(f"Failed to load {PACKAGE_INFO} from {label or packagedir}") from exc

    values = parse_package_info(text)
    for key in _REQUIRED:
        if not values.get(key):
            raise PackageInfoError(f"{key}: Not specified by {PACKAGE_INFO}")

    def _list(key: str) -> list[str]:
        value = values.get(key)
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value else []
        return [v for v in value if v]

    config = values.get("config")
    try:
        return PackageInfo(
            appname=str(values["appname"]),
            archive=str(values["archive"]),
            config=config if isinstance(config, str) and config else None,
            prepare=_list("prepare"),
            complete=_list("complete"),
        )
    except ValidationError as exc:
        raise PackageInfoError(f"Invalid {PACKAGE_INFO} in {label or packagedir}: {exc}") from exc


def write_package_info(packagedir: Path, info: PackageInfo) -> Path:
    """Write `package-info` in the format `load_package_info` reads."""

    path = packagedir / PACKAGE_INFO
    path.write_text(render_template("package-info.j2", info=info), encoding="utf-8")
    return path
