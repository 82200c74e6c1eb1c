"""Creación de paquetes de instalación stub.

Un stub contiene un archivo y una configuración de ejemplo, los scripts de
plantilla, un `envconfig/<domain>.xml` por dominio y un `package-info` que
lo une todo.

Nota:
- Nunca se sobrescriben ficheros existentes: si el directorio ya tiene un
  EAR, se conserva y el nombre de la aplicación se deriva de él.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Sequence

from adapters.package_info import PACKAGE_INFO, write_package_info
from adapters.templates import render_template
from core.domain.models import PackageInfo, ScaffoldResult, application_id
from core.errors import ScaffoldError
from core.services.config_selector import DEFAULT_CONFIG, ENVCONFIG_DIR

logger = logging.getLogger(__name__)

DEFAULT_APPNAME = "MyFolder/BwApplication"
DEFAULT_CONFIG_FILE = "deployconfig.xml"
DEFAULT_DOMAINS: tuple[str, ...] = ("dev", "uat", "prod")

SELECT_CONFIG_SCRIPT = "select-config.sh"
PREPARE_SCRIPT = "prepare-deploy.sh"
COMPLETE_SCRIPT = "complete-deploy.sh"


def find_archive(packagedir: Path) -> Path | None:
    """First `*.ear` directly inside the directory."""

    for path in sorted(packagedir.glob("*.ear")):
        if path.is_file():
            return path
    return None


def guess_appname(appname: str | None, archive: Path | None) -> str:
    if appname:
        return appname
    if archive is not None:
        return archive.name[: -len(".ear")]
    return DEFAULT_APPNAME


def _write_if_missing(path: Path, text: str, created: list[Path]) -> None:
    if path.exists() or path.is_symlink():
        return
    path.write_text(text, encoding="utf-8")
    created.append(path)


def _make_executable(path: Path) -> None:
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def _force_symlink(link: Path, target: str) -> None:
    if link.is_symlink() or link.is_file():
        link.unlink()
    link.symlink_to(target)


def create_package(
    packagedir: Path,
    *,
    appname: str | None = None,
    domains: Sequence[str] = DEFAULT_DOMAINS,
) -> ScaffoldResult:
    """Create (or complete) a package stub in `packagedir`."""

    if not domains:
        raise ScaffoldError("At least one domain is required")

    if packagedir.exists() and not packagedir.is_dir():
        raise ScaffoldError(f"{packagedir} is not a directory")
    try:
        packagedir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ScaffoldError(f"Cannot create {packagedir}: {exc.strerror}") from exc
    if (packagedir / PACKAGE_INFO).exists():
        raise ScaffoldError("The package has already been initialized!")

    created: list[Path] = []
    archive_path = find_archive(packagedir)
    appname = guess_appname(appname, archive_path)
    appid = application_id(appname)

    archive = archive_path.name if archive_path else f"{appname.rsplit('/', 1)[-1]}.ear"
    _write_if_missing(packagedir / archive, "Replace me with a real enterprise archive!\n", created)

    config = DEFAULT_CONFIG_FILE
    _write_if_missing(packagedir / config, "Replace me with a real config!\n", created)

    scripts = {
        SELECT_CONFIG_SCRIPT: render_template("select-config.sh.j2", appname=appname, appid=appid),
        PREPARE_SCRIPT: render_template(
            "customscript.sh.j2", appname=appname, appid=appid, stage="preparation"
        ),
        COMPLETE_SCRIPT: render_template(
            "customscript.sh.j2", appname=appname, appid=appid, stage="completion"
        ),
    }
    for name, text in scripts.items():
        _write_if_missing(packagedir / name, text, created)
        _make_executable(packagedir / name)

    envconfig = packagedir / ENVCONFIG_DIR
    envconfig.mkdir(exist_ok=True)
    for domain in domains:
        _write_if_missing(
            envconfig / f"{domain}.xml",
            f'Replace me with the deployment configuration for domain "{domain}"!\n',
            created,
        )
    last = f"{domains[-1]}.xml"
    _force_symlink(envconfig / DEFAULT_CONFIG, last)
    _force_symlink(packagedir / config, os.path.join(ENVCONFIG_DIR, last))

    info = PackageInfo(
        appname=appname,
        archive=archive,
        config=config,
        prepare=[SELECT_CONFIG_SCRIPT, PREPARE_SCRIPT],
        complete=[COMPLETE_SCRIPT],
    )
    created.append(write_package_info(packagedir, info))
    logger.info("package stub for %s written to %s", appname, packagedir)
    return ScaffoldResult(packagedir=packagedir.resolve(), info=info, created=created)
