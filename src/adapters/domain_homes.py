"""Descubrimiento de los dominios configurados en esta máquina.

Lee `$TIBCO_HOME/tra/domain/DomainHomes.properties`; cada clave empieza por
el nombre del dominio.
"""

from __future__ import annotations

from pathlib import Path


def discover_domains(properties: Path) -> list[str]:
    """Domain names listed in `DomainHomes.properties`, unique and sorted.

    Each non-comment entry looks like `<domain>.TIBCO_DOMAIN_HOME=...`; the
    domain is the text before the first dot. A missing file yields no domains.
    """

    try:
        text = properties.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return []

    domains: set[str] = set()
    for line in text.splitlines():
        if line.lstrip(" ").startswith("#"):
            continue
        name = line.split(".", 1)[0].strip()
        if name:
            domains.add(name)
    return sorted(domains)


def single_domain(properties: Path) -> str | None:
    """The only configured domain, or None when there are zero or several."""

    domains = discover_domains(properties)
    return domains[0] if len(domains) == 1 else None
