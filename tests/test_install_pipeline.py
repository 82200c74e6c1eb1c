from __future__ import annotations

import contextlib
import logging
import os
import stat
import zipfile
from pathlib import Path

import pytest

from adapters.workspace import Workspace
from core.domain.models import DomainSession
from core.errors import ConfigurationError, PackageInfoError, StatusCheckError, ToolError
from core.services.install_pipeline import (
    InstallRequest,
    PipelineHooks,
    check_operator,
    run_install,
)
from tests.conftest import FakeTools, make_package, read_env_dump


def _install(tmp_path: Path, tools: FakeTools, request: InstallRequest, messages: list | None = None):
    scratch = tmp_path / "scratch"
    with contextlib.ExitStack() as stack:
        workspace = Workspace(stack, root=scratch)
        session = DomainSession(domain="dev", user="admin", credential=workspace.secure_file(".cred"))
        hooks = PipelineHooks(
            heading=messages.append if messages is not None else None,
            step=messages.append if messages is not None else None,
            info=messages.append if messages is not None else None,
            success=messages.append if messages is not None else None,
        )
        result = run_install(request, session, tools, workspace, hooks)
    return result


def test_fresh_install_exports_archive_default(tmp_path: Path, fake_tools: FakeTools):
    pkg = make_package(tmp_path / "pkg")
    messages: list[str] = []

    result = _install(tmp_path, fake_tools, InstallRequest(packages=[pkg]), messages)

    assert fake_tools.names() == ["status", "export_archive", "upload"]
    _, archive, out, merged_with = fake_tools.call("export_archive")
    assert (archive, merged_with) == ("OrderService.ear", None)
    assert fake_tools.call("upload")[3] == out
    assert fake_tools.uploaded_config == "<default/>"
    assert messages[0] == 'Installing application "Sales/OrderService" into domain "dev"'
    assert "The application is currently not installed!" in messages
    assert messages[-1] == 'Application "Sales/OrderService" installed successfully!'
    assert result.installed[0].update is False


def test_fresh_install_uses_package_config(tmp_path: Path, fake_tools: FakeTools):
    pkg = make_package(tmp_path / "pkg", config="deployconfig.xml")

    _install(tmp_path, fake_tools, InstallRequest(packages=[pkg]))

    assert "export_archive" not in fake_tools.names()
    assert fake_tools.call("upload")[3] == Path("deployconfig.xml")
    assert fake_tools.uploaded_config == "<package/>"


def test_upgrade_merges_current_configuration(tmp_path: Path):
    tools = FakeTools(installed=True)
    pkg = make_package(tmp_path / "pkg", config="deployconfig.xml")

    _install(tmp_path, tools, InstallRequest(packages=[pkg]))

    assert tools.names() == ["status", "export_app", "export_archive", "upload"]
    current = tools.call("export_app")[2]
    assert tools.call("export_archive")[3] == current
    assert tools.uploaded_config == "<merged/>"


def test_overwrite_skips_status_check(tmp_path: Path):
    tools = FakeTools(installed=True)
    pkg = make_package(tmp_path / "pkg", prepare=("prepare.sh",))

    result = _install(tmp_path, tools, InstallRequest(packages=[pkg], overwrite=True))

    assert "status" not in tools.names()
    env = read_env_dump(tmp_path / "hook-env" / "prepare.sh.env")
    assert env["INSTALL_OVERWRITE"] == "true"
    assert "INSTALL_UPDATE" not in env
    assert result.installed[0].overwrite is True


def test_deploy_only_when_requested(tmp_path: Path, fake_tools: FakeTools):
    pkg = make_package(tmp_path / "pkg")

    _install(tmp_path, fake_tools, InstallRequest(packages=[pkg], deploy=True))

    assert fake_tools.names()[-2:] == ["upload", "deploy"]


def test_hooks_receive_install_environment(tmp_path: Path):
    tools = FakeTools(installed=True)
    pkg = make_package(
        tmp_path / "pkg",
        config="deployconfig.xml",
        prepare=("prepare.sh",),
        complete=("complete.sh",),
    )

    _install(tmp_path, tools, InstallRequest(packages=[pkg]))

    prepare = read_env_dump(tmp_path / "hook-env" / "prepare.sh.env")
    complete = read_env_dump(tmp_path / "hook-env" / "complete.sh.env")
    assert prepare["INSTALL_PACKAGEDIR"] == str(pkg.resolve())
    assert prepare["INSTALL_DOMAIN"] == "dev"
    assert prepare["INSTALL_USER"] == "admin"
    assert prepare["INSTALL_APPNAME"] == "Sales/OrderService"
    assert prepare["INSTALL_ARCHIVE"] == "OrderService.ear"
    assert prepare["INSTALL_BASECONFIG"] == "deployconfig.xml"
    assert prepare["INSTALL_UPDATE"] == "true"
    assert prepare["INSTALL_CURRENTCONFIG"] == str(tools.call("export_app")[2])
    assert prepare["INSTALL_CREDENTIAL"].endswith(".cred")
    assert "INSTALL_OVERWRITE" not in prepare
    assert "INSTALL_DEPLOYCONFIG" not in prepare
    assert complete["INSTALL_DEPLOYCONFIG"] == str(tools.call("upload")[3])
    assert not any(key.startswith("INSTALL_") for key in os.environ)


def test_inherited_install_variables_are_dropped(tmp_path: Path, fake_tools: FakeTools, monkeypatch):
    monkeypatch.setenv("INSTALL_UPDATE", "true")
    pkg = make_package(tmp_path / "pkg", prepare=("prepare.sh",))

    _install(tmp_path, fake_tools, InstallRequest(packages=[pkg]))

    assert "INSTALL_UPDATE" not in read_env_dump(tmp_path / "hook-env" / "prepare.sh.env")


def test_non_executable_hook_is_made_executable(tmp_path: Path, fake_tools: FakeTools):
    pkg = make_package(tmp_path / "pkg", prepare=("prepare.sh",))
    script = pkg / "prepare.sh"
    script.chmod(0o644)

    _install(tmp_path, fake_tools, InstallRequest(packages=[pkg]))

    assert script.stat().st_mode & stat.S_IXUSR


def test_failing_hook_aborts_and_cleans_up(tmp_path: Path):
    tools = FakeTools(installed=True)
    pkg = make_package(tmp_path / "pkg", prepare=("prepare.sh",))
    (pkg / "prepare.sh").write_text("#!/usr/bin/env bash\nexit 4\n", encoding="utf-8")

    with pytest.raises(ToolError) as excinfo:
        _install(tmp_path, tools, InstallRequest(packages=[pkg]))

    assert excinfo.value.returncode == 4
    assert "upload" not in tools.names()
    assert list((tmp_path / "scratch").iterdir()) == []


def test_missing_hook_script(tmp_path: Path, fake_tools: FakeTools):
    pkg = make_package(tmp_path / "pkg", prepare=("prepare.sh",))
    (pkg / "prepare.sh").unlink()

    with pytest.raises(PackageInfoError, match='Script "prepare.sh" not found'):
        _install(tmp_path, fake_tools, InstallRequest(packages=[pkg]))


def test_status_check_failure_propagates(tmp_path: Path):
    tools = FakeTools(status_output="Domain dev unreachable")
    pkg = make_package(tmp_path / "pkg")

    with pytest.raises(StatusCheckError) as excinfo:
        _install(tmp_path, tools, InstallRequest(packages=[pkg]))

    assert excinfo.value.exit_code == 2
    assert list((tmp_path / "scratch").iterdir()) == []


def test_temp_files_removed_after_success(tmp_path: Path):
    tools = FakeTools(installed=True)
    pkg = make_package(tmp_path / "pkg")

    _install(tmp_path, tools, InstallRequest(packages=[pkg]))

    current = tools.call("export_app")[2]
    merged = tools.call("export_archive")[2]
    assert not current.exists()
    assert not merged.exists()
    assert not merged.with_name(merged.name + ".log").exists()
    assert list((tmp_path / "scratch").iterdir()) == []


def test_zipped_package(tmp_path: Path, fake_tools: FakeTools):
    pkg = make_package(tmp_path / "pkg", complete=("complete.sh",))
    archive = tmp_path / "pkg.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        for path in pkg.rglob("*"):
            zf.write(path, path.relative_to(pkg))

    _install(tmp_path, fake_tools, InstallRequest(packages=[archive]))

    env = read_env_dump(tmp_path / "hook-env" / "complete.sh.env")
    assert env["INSTALL_PACKAGEDIR"].startswith(str((tmp_path / "scratch").resolve()))
    assert list((tmp_path / "scratch").iterdir()) == []


def test_multiple_packages_in_order(tmp_path: Path, fake_tools: FakeTools):
    first = make_package(tmp_path / "one", appname="A/One", archive="One.ear")
    second = make_package(tmp_path / "two", appname="A/Two", archive="Two.ear")

    result = _install(tmp_path, fake_tools, InstallRequest(packages=[first, second]))

    assert [ctx.appname for ctx in result.installed] == ["A/One", "A/Two"]
    assert [call[1] for call in fake_tools.calls if call[0] == "upload"] == ["A/One", "A/Two"]


def test_missing_package_info(tmp_path: Path, fake_tools: FakeTools):
    (tmp_path / "empty").mkdir()

    with pytest.raises(PackageInfoError, match="Failed to load package-info from"):
        _install(tmp_path, fake_tools, InstallRequest(packages=[tmp_path / "empty"]))


def test_default_package_is_working_directory(isolated_env: Path, tmp_path: Path, fake_tools: FakeTools):
    make_package(isolated_env)

    result = _install(tmp_path, fake_tools, InstallRequest())

    assert result.installed[0].packagedir == isolated_env.resolve()


def test_check_operator(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr("core.services.install_pipeline.getpass.getuser", lambda: "jdoe")

    check_operator(None)
    check_operator("jdoe")
    with pytest.raises(ConfigurationError, match='only be run as user "tibco"'):
        check_operator("tibco")


def test_printed_steps_are_not_logged_again(tmp_path: Path, fake_tools: FakeTools, caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.INFO, logger="core.services.install_pipeline")
    make_package(tmp_path / "pkg")
    messages: list[str] = []

    _install(tmp_path, fake_tools, InstallRequest(packages=[tmp_path / "pkg"]), messages)

    assert "Checking installation status:" in messages
    assert not [r for r in caplog.records if r.name == "core.services.install_pipeline"]


def test_steps_are_logged_without_callbacks(tmp_path: Path, fake_tools: FakeTools, caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.INFO, logger="core.services.install_pipeline")
    make_package(tmp_path / "pkg")

    _install(tmp_path, fake_tools, InstallRequest(packages=[tmp_path / "pkg"]))

    logged = [r.getMessage() for r in caplog.records if r.name == "core.services.install_pipeline"]
    assert "Checking installation status:" in logged
