"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta y documentación autocontenida (Field).
- `InstallContext` se serializa directamente al entorno `INSTALL_*`.

Nota:
- Estos modelos describen *qué* es una instalación (metadatos del paquete,
  contexto por paquete, sesión de dominio), no *cómo* se invocan las
  herramientas.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


def application_id(appname: str) -> str:
    """Lower-cased last path segment of the application name, spaces as dashes."""

    return appname.rsplit("/", 1)[-1].lower().replace(" ", "-")


class PackageInfo(BaseModel):
    """Content of a package's `package-info` file."""

    model_config = ConfigDict(frozen=True)

    appname: str = Field(
        ...,
        min_length=1,
        description="Name of the BW application, including its folder path.",
    )
    archive: str = Field(
        ...,
        min_length=1,
        description="Enterprise archive, relative to the package directory.",
    )
    config: str | None = Field(
        default=None,
        description="Deployment configuration used for fresh installs.",
    )
    prepare: list[str] = Field(
        default_factory=list,
        description="Hook scripts run before the archive is uploaded.",
    )
    complete: list[str] = Field(
        default_factory=list,
        description="Hook scripts run after the upload (and deploy).",
    )

    @property
    def appid(self) -> str:
        return application_id(self.appname)


class DomainSession(BaseModel):
    """Credentials to a domain, valid for the lifetime of one invocation."""

    domain: str = Field(..., min_length=1)
    user: str = Field(..., min_length=1)
    credential: Path = Field(
        ...,
        description="Obfuscated credential file handed to the vendor tools.",
    )


class InstallContext(BaseModel):
    """Everything known about one package being installed.

    Exposed to hook scripts as `INSTALL_*` environment variables.
    """

    packagedir: Path
    domain: str
    user: str
    credential: Path
    appname: str
    archive: str
    baseconfig: str | None = None
    currentconfig: Path | None = None
    deployconfig: Path | None = None
    overwrite: bool = False

    @property
    def update(self) -> bool:
        return self.currentconfig is not None

    def to_environ(self) -> dict[str, str]:
        env = {
            "INSTALL_PACKAGEDIR": str(self.packagedir),
            "INSTALL_DOMAIN": self.domain,
            "INSTALL_USER": self.user,
            "INSTALL_CREDENTIAL": str(self.credential),
            "INSTALL_APPNAME": self.appname,
            "INSTALL_ARCHIVE": self.archive,
        }
        if self.baseconfig:
            env["INSTALL_BASECONFIG"] = self.baseconfig
        if self.currentconfig is not None:
            env["INSTALL_UPDATE"] = "true"
            env["INSTALL_CURRENTCONFIG"] = str(self.currentconfig)
        if self.overwrite:
            env["INSTALL_OVERWRITE"] = "true"
        if self.deployconfig is not None:
            env["INSTALL_DEPLOYCONFIG"] = str(self.deployconfig)
        return env


class ScaffoldResult(BaseModel):
    """Outcome of creating a package stub."""

    packagedir: Path
    info: PackageInfo
    created: list[Path] = Field(
        default_factory=list,
        description="Files written by the scaffolder (existing ones are kept).",
    )
