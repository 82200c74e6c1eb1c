"""Selección de la configuración de despliegue para el dominio destino.

Lo usa el script `select-config.sh` de los paquetes stub: el paquete guarda
una configuración por dominio en `envconfig/` y su configuración base se
re-apunta a la del dominio que se está instalando.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from core.errors import ConfigSelectionError

logger = logging.getLogger(__name__)

ENVCONFIG_DIR = "envconfig"
DEFAULT_CONFIG = "default.xml"


def select_config(packagedir: Path, domain: str) -> Path:
    """`envconfig/<domain>.xml`, else `envconfig/default.xml`."""

    envconfig = packagedir / ENVCONFIG_DIR
    for candidate in (envconfig / f"{domain}.xml", envconfig / DEFAULT_CONFIG):
        if candidate.is_file():
            logger.info("selected %s for domain %s", candidate, domain)
            return candidate
    raise ConfigSelectionError(
        f'No deployment configuration for domain "{domain}" and no '
        f"{ENVCONFIG_DIR}/{DEFAULT_CONFIG} in {packagedir}"
    )


def link_config(target: Path, selected: Path) -> Path:
    """Replace `target` with a relative symlink to `selected` (like `ln -sf`)."""

    relative = os.path.relpath(selected, start=target.parent)
    if target.is_symlink() or target.exists():
        target.unlink()
    target.symlink_to(relative)
    return target


def apply_config(packagedir: Path, domain: str, baseconfig: str | None) -> Path:
    """Select the domain configuration and link the package base config to it.

    Returns the selected file. Without a base configuration nothing is linked.
    """

    selected = select_config(packagedir, domain)
    if baseconfig:
        link_config(packagedir / baseconfig, selected)
    return selected
