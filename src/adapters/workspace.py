"""Ficheros temporales que viven una sola invocación.

Por qué un `ExitStack`:
- Cada ruta entregada queda registrada y se borra al cerrar el stack, tanto
  si la instalación termina bien como si falla.

Nota:
- Los paquetes ZIP se extraen restaurando symlinks y permisos, como `unzip`.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import stat
import tempfile
import uuid
import zipfile
from pathlib import Path

from core.errors import PackageInfoError

logger = logging.getLogger(__name__)


class Workspace:
    """Private scratch directory plus a registry of cleanup actions."""

    def __init__(self, stack: contextlib.ExitStack, *, root: Path | None = None) -> None:
        self._stack = stack
        if root is not None:
            root.mkdir(parents=True, exist_ok=True)
        # mkdtemp creates the directory with mode 0700.
        self.path = Path(tempfile.mkdtemp(prefix="bwinstall-", dir=str(root) if root else None)).resolve()
        stack.callback(self._remove_tree, self.path)

    @staticmethod
    def _remove_file(path: Path) -> None:
        with contextlib.suppress(FileNotFoundError):
            path.unlink()
        logger.debug("removed %s", path)

    @staticmethod
    def _remove_tree(path: Path) -> None:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("removed %s", path)

    def temp_path(self, suffix: str = "", *, log_sidecar: bool = False) -> Path:
        """A fresh, not yet existing file name.

        `log_sidecar` also removes the `<name>.log` file AppManage writes next
        to its exports.
        """

        path = self.path / f"{uuid.uuid4().hex}{suffix}"
        self._stack.callback(self._remove_file, path)
        if log_sidecar:
            self._stack.callback(self._remove_file, path.with_name(path.name + ".log"))
        return path

    def secure_file(self, suffix: str = "") -> Path:
        """An empty file readable by the owner only."""

        path = self.temp_path(suffix)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        os.close(fd)
        return path

    def temp_dir(self) -> Path:
        path = Path(tempfile.mkdtemp(dir=str(self.path)))
        self._stack.callback(self._remove_tree, path)
        return path

    def extract_zip(self, archive: Path) -> Path:
        """Unpack a zipped installation package into a fresh directory.

        Symbolic links and permission bits stored by `zip -y` are restored.
        """

        target = self.temp_dir()
        with zipfile.ZipFile(archive) as zf:
            for member in zf.infolist():
                mode = member.external_attr >> 16
                if stat.S_ISLNK(mode):
                    self._extract_symlink(zf, member, target, archive)
                    continue
                path = Path(zf.extract(member, target))
                if stat.S_IMODE(mode) and not member.is_dir():
                    path.chmod(stat.S_IMODE(mode))
        return target

    @staticmethod
    def _extract_symlink(zf: zipfile.ZipFile, member: zipfile.ZipInfo, target: Path, archive: Path) -> None:
        name = Path(member.filename)
        if name.is_absolute() or ".." in name.parts:
            raise PackageInfoError(f"Refusing to extract {member.filename} from {archive}")
        link = target / name
        link.parent.mkdir(parents=True, exist_ok=True)
        os.symlink(zf.read(member).decode("utf-8"), link)
