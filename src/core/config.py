"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- La CLI y los adaptadores de TIBCO leen el entorno de la misma forma.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Annotated

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from core.errors import ConfigurationError


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "bwinstall"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "bwinstall"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "bwinstall"
    return Path.home() / ".config" / "bwinstall"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class InstallSettings(BaseSettings):
    """Settings shared by the install, scaffold and doctor commands.

    The TIBCO variables keep their vendor names; everything specific to this
    tool is read with the `BWINSTALL_` prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="BWINSTALL_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Project first, then the per-user file.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    tibco_home: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("TIBCO_HOME", "BWINSTALL_TIBCO_HOME"),
        description="Root of the TIBCO installation.",
    )
    tra_home: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("TIBCO_TRA_HOME", "BWINSTALL_TRA_HOME"),
        description="TRA installation holding bin/AppManage.",
    )
    application: str | None = Field(
        default=None,
        validation_alias=AliasChoices("TIBCO_APPLICATION", "BWINSTALL_APPLICATION"),
        description="Default BW application name for new package stubs.",
    )

    domain: str | None = Field(
        default=None,
        description="Target domain. Discovered or prompted when unset.",
    )
    user: str | None = Field(
        default=None,
        description="Domain administrator. Prompted when unset.",
    )
    password: SecretStr | None = Field(
        default=None,
        description="Password of the domain administrator. Prompted when unset.",
    )

    required_user: str | None = Field(
        default="tibco",
        description="Operating system user the installer must run as (empty disables the check).",
    )
    temp_dir: Path | None = Field(
        default=None,
        description="Parent directory for scratch files (defaults to the system temp dir).",
    )
    default_domains: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["dev", "uat", "prod"],
        min_length=1,
        description="Domains that get an envconfig stub in new packages.",
    )

    @field_validator("required_user", "domain", "user", "application", mode="before")
    @classmethod
    def _blank_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("default_domains", mode="before")
    @classmethod
    def _split_domains(cls, value: object) -> object:
        if isinstance(value, str):
            if value.lstrip().startswith("["):
                return json.loads(value)
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    def require_tibco_home(self) -> Path:
        if self.tibco_home is None:
            raise ConfigurationError("TIBCO_HOME: Variable not set")
        return self.tibco_home

    def require_tra_home(self) -> Path:
        if self.tra_home is None:
            raise ConfigurationError("TIBCO_TRA_HOME: Variable not set")
        return self.tra_home

    @property
    def domain_homes_file(self) -> Path:
        return self.require_tibco_home() / "tra" / "domain" / "DomainHomes.properties"
