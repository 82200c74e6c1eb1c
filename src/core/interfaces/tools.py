"""Contrato de las herramientas de dominio.

Por qué Protocol:
- El pipeline solo habla con este contrato; `AppManageTools` es la
  implementación con subprocess y los tests usan un fake en memoria.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from core.domain.models import DomainSession


@runtime_checkable
class DomainTools(Protocol):
    """Operations of `AppManage`, `AppStatusCheck` and `obfuscate`.

    Rules:
    - Every method raises `ToolError` (or `StatusCheckError`) on failure.
    - Relative archive and configuration paths resolve against `cwd`.
    """

    def obfuscate(self, credential: Path) -> None:
        """Obfuscate the password inside a credential file, in place."""

        ...

    def is_installed(self, session: DomainSession, appname: str) -> bool:
        """Query the domain for the application."""

        ...

    def export_app_config(self, session: DomainSession, appname: str, out: Path) -> None:
        """Export the deployment configuration of an installed application."""

        ...

    def export_archive_config(
        self,
        archive: str,
        out: Path,
        *,
        deployconfig: Path | None = None,
        cwd: Path | None = None,
    ) -> None:
        """Export the default configuration of an archive, optionally merged with `deployconfig`."""

        ...

    def upload(
        self,
        session: DomainSession,
        appname: str,
        archive: str,
        deployconfig: Path,
        *,
        cwd: Path | None = None,
    ) -> None:
        """Upload (configure) the archive with its deployment configuration."""

        ...

    def deploy(self, session: DomainSession, appname: str) -> None:
        """Deploy the application without starting it."""

        ...
