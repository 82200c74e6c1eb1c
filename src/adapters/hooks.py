"""Ejecución de los scripts prepare/complete que trae cada paquete.

Nota:
- Las variables `INSTALL_*` solo llegan al proceso hijo; `os.environ` no se
  toca.
- Un script sin línea `#!` se ejecuta con `/bin/sh`, igual que haría bash.
"""

from __future__ import annotations

import errno
import logging
import os
import shlex
import stat
import subprocess
from pathlib import Path
from typing import Mapping

from core.errors import PackageInfoError, ToolError

logger = logging.getLogger(__name__)


def ensure_executable(script: Path) -> None:
    mode = script.stat().st_mode
    if not os.access(script, os.X_OK):
        script.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def child_environ(env: Mapping[str, str]) -> dict[str, str]:
    """Current environment without inherited INSTALL_* values, plus `env`."""

    base = {k: v for k, v in os.environ.items() if not k.startswith("INSTALL_")}
    base.update(env)
    return base


def run_hook(packagedir: Path, script: str, env: Mapping[str, str]) -> None:
    """Run `./<script>` inside the package directory.

    `env` is layered over the current environment for the child only. A
    script without a `#!` line is run by `/bin/sh`, as a shell would do.
    """

    path = packagedir / script
    try:
        ensure_executable(path)
    except FileNotFoundError as exc:
        raise PackageInfoError(f"Script \"{script}\" not found in {packagedir}") from exc
    argv = [f"./{script}"]
    environ = child_environ(env)
    logger.debug("+ %s (cwd=%s)", argv[0], packagedir)
    try:
        proc = subprocess.run(argv, cwd=str(packagedir), env=environ, check=False)
    except OSError as exc:
        if exc.errno != errno.ENOEXEC:
            raise PackageInfoError(f"Script \"{script}\" cannot be executed: {exc.strerror}") from exc
        argv = ["/bin/sh", script]
        logger.debug("+ %s", shlex.join(argv))
        proc = subprocess.run(argv, cwd=str(packagedir), env=environ, check=False)
    if proc.returncode != 0:
        raise ToolError([f"./{script}"], proc.returncode)
