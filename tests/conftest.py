"""Shared fixtures: isolated environment, fake vendor tools, package builder."""

from __future__ import annotations

import os
import stat
import textwrap
from pathlib import Path

import pytest

from core.errors import StatusCheckError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """No TIBCO/BWINSTALL/INSTALL variables leak in; cwd has no `.env`."""

    for key in list(os.environ):
        if key.startswith(("TIBCO_", "BWINSTALL_", "INSTALL_")):
            monkeypatch.delenv(key)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


class FakeTools:
    """In-memory `DomainTools` recording every call."""

    def __init__(self, *, installed: bool = False, status_output: str | None = None) -> None:
        self.installed = installed
        self.status_output = status_output
        self.calls: list[tuple] = []
        self.uploaded_config: str | None = None

    def obfuscate(self, credential: Path) -> None:
        self.calls.append(("obfuscate", credential))

    def is_installed(self, session, appname: str) -> bool:
        self.calls.append(("status", appname))
        if self.status_output is not None:
            raise StatusCheckError(["AppStatusCheck", "-app", appname], 1, self.status_output)
        return self.installed

    def export_app_config(self, session, appname: str, out: Path) -> None:
        self.calls.append(("export_app", appname, out))
        out.write_text("<current/>", encoding="utf-8")

    def export_archive_config(self, archive, out, *, deployconfig=None, cwd=None) -> None:
        self.calls.append(("export_archive", archive, out, deployconfig))
        out.write_text("<merged/>" if deployconfig else "<default/>", encoding="utf-8")
        out.with_name(out.name + ".log").write_text("AppManage log", encoding="utf-8")

    def upload(self, session, appname, archive, deployconfig, *, cwd=None) -> None:
        self.calls.append(("upload", appname, archive, deployconfig))
        self.uploaded_config = (Path(cwd or ".") / deployconfig).read_text(encoding="utf-8")

    def deploy(self, session, appname) -> None:
        self.calls.append(("deploy", appname))

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def call(self, name: str) -> tuple:
        return next(call for call in self.calls if call[0] == name)


@pytest.fixture
def fake_tools() -> FakeTools:
    return FakeTools()


ENV_DUMP_SCRIPT = """\
#!/usr/bin/env bash
env | grep '^INSTALL_' | sort > "{out}"
"""


def make_package(
    root: Path,
    *,
    appname: str = "Sales/OrderService",
    archive: str = "OrderService.ear",
    config: str | None = None,
    prepare: tuple[str, ...] = (),
    complete: tuple[str, ...] = (),
    envdir: Path | None = None,
) -> Path:
    """Write a package directory; hooks dump their INSTALL_* env to `envdir`."""

    root.mkdir(parents=True, exist_ok=True)
    (root / archive).write_text("ear", encoding="utf-8")
    if config:
        (root / config).write_text("<package/>", encoding="utf-8")
    envdir = envdir or root.parent / "hook-env"
    envdir.mkdir(parents=True, exist_ok=True)
    for script in (*prepare, *complete):
        path = root / script
        path.write_text(ENV_DUMP_SCRIPT.format(out=envdir / f"{script}.env"), encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR)

    def _array(items: tuple[str, ...]) -> str:
        return " ".join(f'"{item}"' for item in items)

    (root / "package-info").write_text(
        textwrap.dedent(
            f"""\
            appname="{appname}"
            archive="{archive}"
            config="{config or ''}"
            prepare=({_array(prepare)})
            complete=({_array(complete)})
            """
        ),
        encoding="utf-8",
    )
    return root


def read_env_dump(path: Path) -> dict[str, str]:
    env: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        key, _, value = line.partition("=")
        env[key] = value
    return env
