"""Fichero de credenciales para la opción `-cred` de las herramientas TIBCO."""

from __future__ import annotations

import os
from pathlib import Path

from adapters.workspace import Workspace
from core.interfaces.tools import DomainTools


def write_credential(workspace: Workspace, tools: DomainTools, user: str, password: str) -> Path:
    """Write `user=`/`pw=#!` lines to a private file and obfuscate it in place."""

    path = workspace.secure_file(".cred")
    path.write_text(f"user={user}\npw=#!{password}\n", encoding="utf-8")
    tools.obfuscate(path)
    # obfuscate rewrites the file.
    os.chmod(path, 0o600)
    return path
