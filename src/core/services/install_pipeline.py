"""Installation/upgrade orchestration.

The CLI collects options and credentials, then delegates every step to the
helpers below. Printing goes through `PipelineHooks` so the sequence stays
free of UI concerns and can be driven from tests with a fake `DomainTools`.

Per package:

1. unpack zipped packages, load `package-info`
2. unless overwriting, check the installation status and export the current
   configuration of an installed application
3. run the prepare scripts
4. merge, pick or export the deployment configuration
5. upload, optionally deploy
6. run the complete scripts
"""

from __future__ import annotations

import getpass
import logging
import os
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from adapters.credentials import write_credential
from adapters.hooks import run_hook
from adapters.package_info import load_package_info
from adapters.workspace import Workspace
from core.domain.models import DomainSession, InstallContext, PackageInfo
from core.errors import ConfigurationError, PackageInfoError
from core.interfaces.tools import DomainTools

logger = logging.getLogger(__name__)


@dataclass
class InstallRequest:
    """Parameters that control the install pipeline."""

    packages: Sequence[Path] = field(default_factory=lambda: [Path(".")])
    overwrite: bool = False
    deploy: bool = False


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers."""

    heading: Callable[[str], None] | None = None
    step: Callable[[str], None] | None = None
    info: Callable[[str], None] | None = None
    success: Callable[[str], None] | None = None

    def emit(self, kind: str, message: str) -> None:
        callback = getattr(self, kind)
        if callback is None:
            logger.info(message)
        else:
            callback(message)


@dataclass
class PipelineResult:
    """Output of a pipeline invocation."""

    installed: list[InstallContext] = field(default_factory=list)


def check_operator(required_user: str | None) -> None:
    """Refuse to run as anyone but the TIBCO service account."""

    if required_user and getpass.getuser() != required_user:
        raise ConfigurationError(f'This should only be run as user "{required_user}"!')


def open_session(
    workspace: Workspace,
    tools: DomainTools,
    *,
    domain: str,
    user: str,
    password: str,
) -> DomainSession:
    """Write the obfuscated credential file for the rest of the run."""

    credential = write_credential(workspace, tools, user, password)
    return DomainSession(domain=domain, user=user, credential=credential)


def resolve_package_dir(package: Path, workspace: Workspace) -> Path:
    """Directory of an installation package; zip files are unpacked first."""

    if package.is_file():
        try:
            return workspace.extract_zip(package)
        except zipfile.BadZipFile as exc:
            raise PackageInfoError(f"{package} is neither a directory nor a ZIP archive") from exc
    return package.resolve()


def _run_scripts(
    kind: str,
    scripts: Sequence[str],
    packagedir: Path,
    context: InstallContext,
    hooks: PipelineHooks,
) -> None:
    env = context.to_environ()
    for script in scripts:
        if not script:
            continue
        hooks.emit("step", f'Executing {kind} script "{script}":')
        run_hook(packagedir, script, env)


def _current_config(
    info: PackageInfo,
    request: InstallRequest,
    session: DomainSession,
    tools: DomainTools,
    workspace: Workspace,
    hooks: PipelineHooks,
) -> Path | None:
    if request.overwrite:
        hooks.emit("step", "Forcing clean installation!")
        return None

    hooks.emit("step", "Checking installation status:")
    if not tools.is_installed(session, info.appname):
        hooks.emit("info", "The application is currently not installed!")
        return None

    hooks.emit("info", "The application is already installed!")
    hooks.emit("step", "Exporting the applications current configuration:")
    out = workspace.temp_path(".xml")
    tools.export_app_config(session, info.appname, out)
    os.chmod(out, 0o600)
    return out


def _deploy_config(
    info: PackageInfo,
    packagedir: Path,
    currentconfig: Path | None,
    tools: DomainTools,
    workspace: Workspace,
    hooks: PipelineHooks,
) -> Path:
    if currentconfig is not None:
        hooks.emit("step", "Merging current configuration with archive configuration:")
        out = workspace.temp_path(".xml", log_sidecar=True)
        tools.export_archive_config(info.archive, out, deployconfig=currentconfig, cwd=packagedir)
        os.chmod(out, 0o600)
        return out

    if info.config:
        hooks.emit("step", f'Using supplied configuration from "{info.config}"')
        return Path(info.config)

    hooks.emit("step", "Exporting the archives default configuration:")
    out = workspace.temp_path(".xml", log_sidecar=True)
    tools.export_archive_config(info.archive, out, cwd=packagedir)
    return out


def install_package(
    package: Path,
    request: InstallRequest,
    session: DomainSession,
    tools: DomainTools,
    workspace: Workspace,
    hooks: PipelineHooks | None = None,
) -> InstallContext:
    """Install or upgrade the application of a single package."""

    hooks = hooks or PipelineHooks()
    packagedir = resolve_package_dir(package, workspace)
    info = load_package_info(packagedir, label=str(package))

    hooks.emit("heading", f'Installing application "{info.appname}" into domain "{session.domain}"')

    currentconfig = _current_config(info, request, session, tools, workspace, hooks)

    context = InstallContext(
        packagedir=packagedir,
        domain=session.domain,
        user=session.user,
        credential=session.credential,
        appname=info.appname,
        archive=info.archive,
        baseconfig=info.config,
        currentconfig=currentconfig,
        overwrite=request.overwrite,
    )

    _run_scripts("preparation", info.prepare, packagedir, context, hooks)

    deployconfig = _deploy_config(info, packagedir, currentconfig, tools, workspace, hooks)

    hooks.emit("step", f'Uploading the application archive "{info.archive}":')
    tools.upload(session, info.appname, info.archive, deployconfig, cwd=packagedir)

    if request.deploy:
        hooks.emit("step", "Deploying the application:")
        tools.deploy(session, info.appname)

    context = context.model_copy(update={"deployconfig": deployconfig})
    _run_scripts("completion", info.complete, packagedir, context, hooks)

    hooks.emit("success", f'Application "{info.appname}" installed successfully!')
    return context


def run_install(
    request: InstallRequest,
    session: DomainSession,
    tools: DomainTools,
    workspace: Workspace,
    hooks: PipelineHooks | None = None,
) -> PipelineResult:
    """Install every requested package in order, stopping at the first failure."""

    result = PipelineResult()
    for package in request.packages or [Path(".")]:
        result.installed.append(install_package(package, request, session, tools, workspace, hooks))
    return result
