"""Errores del instalador y del scaffolder.

Por qué una jerarquía propia:
- Cada error lleva el exit code con el que termina la CLI; la capa de
  comandos no necesita saber qué paso falló.
"""

from __future__ import annotations

from typing import Sequence


class BwInstallError(Exception):
    """Base class. Maps to exit code 1."""

    exit_code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(BwInstallError):
    """Missing or invalid environment (TIBCO variables, operating user)."""


class PackageInfoError(BwInstallError):
    """The `package-info` file is missing, unreadable or incomplete."""


class ConfigSelectionError(BwInstallError):
    """No domain specific nor default deployment configuration exists."""


class ScaffoldError(BwInstallError):
    """A package stub cannot be created."""


class ToolError(BwInstallError):
    """A vendor command exited with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, output: str | None = None) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        name = self.command[0].rsplit("/", 1)[-1] if self.command else "command"
        super().__init__(f"{name} failed with exit status {returncode}")


class StatusCheckError(ToolError):
    """`AppStatusCheck` could not query the domain. Maps to exit code 2."""

    exit_code = 2
