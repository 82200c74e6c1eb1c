"""Wrapper de subprocess para las herramientas de administración de TIBCO.

Por qué está en adapters:
- `AppManage`, `AppStatusCheck` y `obfuscate` son binarios de
  `$TIBCO_TRA_HOME/bin`; invocarlos es I/O puro.
- Implementa `core.interfaces.tools.DomainTools` para el pipeline.

Nota:
- stderr se descarta; un exit status distinto de cero es un `ToolError` y un
  binario que no se puede ejecutar, un `ConfigurationError`.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Sequence

from core.config import InstallSettings
from core.domain.models import DomainSession
from core.errors import ConfigurationError, StatusCheckError, ToolError

logger = logging.getLogger(__name__)

# Marker printed by AppStatusCheck for every application it finds.
_INSTALLED_MARKER = "Application Name"


class AppManageTools:
    """`DomainTools` implementation backed by the vendor binaries."""

    def __init__(self, bindir: Path) -> None:
        self.bindir = bindir

    @classmethod
    def from_settings(cls, settings: InstallSettings) -> "AppManageTools":
        return cls(settings.require_tra_home() / "bin")

    @property
    def appmanage(self) -> Path:
        return self.bindir / "AppManage"

    @property
    def appstatuscheck(self) -> Path:
        return self.bindir / "AppStatusCheck"

    @property
    def obfuscate_bin(self) -> Path:
        return self.bindir / "obfuscate"

    def _run(
        self,
        args: Sequence[str | Path],
        *,
        cwd: Path | None = None,
        capture: bool = False,
        quiet: bool = False,
    ) -> str | None:
        argv = [str(a) for a in args]
        logger.debug("+ %s", shlex.join(argv))
        try:
            proc = subprocess.run(
                argv,
                cwd=str(cwd) if cwd else None,
                stdout=subprocess.PIPE if capture else (subprocess.DEVNULL if quiet else None),
                stderr=subprocess.DEVNULL,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise ConfigurationError(f"{argv[0]}: {exc.strerror}") from exc
        if proc.returncode != 0:
            raise ToolError(argv, proc.returncode, proc.stdout if capture else None)
        return proc.stdout if capture else None

    @staticmethod
    def _domain_args(session: DomainSession) -> list[str]:
        return ["-domain", session.domain, "-cred", str(session.credential), "-breaklock"]

    def obfuscate(self, credential: Path) -> None:
        self._run([self.obfuscate_bin, credential], quiet=True)

    def status(self, session: DomainSession, appname: str) -> str:
        """Raw `AppStatusCheck` report for one application."""

        argv = [str(self.appstatuscheck), *self._domain_args(session), "-app", appname]
        try:
            output = self._run(argv, capture=True)
        except ToolError as exc:
            raise StatusCheckError(exc.command, exc.returncode, exc.output) from exc
        return output or ""

    def is_installed(self, session: DomainSession, appname: str) -> bool:
        return _INSTALLED_MARKER in self.status(session, appname)

    def export_app_config(self, session: DomainSession, appname: str, out: Path) -> None:
        self._run(
            [self.appmanage, "-export", *self._domain_args(session), "-app", appname, "-out", out]
        )

    def export_archive_config(
        self,
        archive: str,
        out: Path,
        *,
        deployconfig: Path | None = None,
        cwd: Path | None = None,
    ) -> None:
        argv: list[str | Path] = [self.appmanage, "-export", "-ear", archive]
        if deployconfig is not None:
            argv += ["-deployconfig", deployconfig]
        argv += ["-out", out]
        self._run(argv, cwd=cwd)

    def upload(
        self,
        session: DomainSession,
        appname: str,
        archive: str,
        deployconfig: Path,
        *,
        cwd: Path | None = None,
    ) -> None:
        self._run(
            [
                self.appmanage,
                "-config",
                *self._domain_args(session),
                "-app",
                appname,
                "-ear",
                archive,
                "-deployconfig",
                deployconfig,
            ],
            cwd=cwd,
        )

    def deploy(self, session: DomainSession, appname: str) -> None:
        self._run(
            [
                self.appmanage,
                "-deploy",
                *self._domain_args(session),
                "-app",
                appname,
                "-nostart",
                "-force",
            ]
        )
