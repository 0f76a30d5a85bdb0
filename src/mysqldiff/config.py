"""
Configuration loading

The config file names the two databases to compare and the diff options:

    {
      "development": {"host": "...", "user": "...", "password": "...", "database": "app_dev"},
      "production": {"host": "...", "user": "...", "password": "...", "database": "app"},
      "options": {"dropDeletedTables": true, "dropDeletedColumns": true}
    }

A side may point at a snapshot file (see `mysqldiff snapshot`) instead of a
live database by setting "snapshot".
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from mysqldiff.domain.errors import ConfigError
from mysqldiff.models import DiffPolicy

DEFAULT_CONFIG_PATH = Path("config.json")
TARGET_NAMES = ("development", "production")


class ConnectionConfig(BaseModel):
    """Where to read one side's metadata from"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    host: str = "localhost"
    port: int = 3306
    user: str | None = None
    password: str | None = None
    database: str | None = None
    charset: str | None = None
    connect_timeout: int = Field(10, alias="connectTimeout", ge=1)
    snapshot: Path | None = None

    @model_validator(mode="after")
    def _check_source(self) -> "ConnectionConfig":
        if not self.database and self.snapshot is None:
            raise ValueError("either 'database' or 'snapshot' must be set")
        return self

    def connect_params(self) -> dict[str, Any]:
        """Keyword arguments for mysql.connector.connect()"""
        params: dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "connection_timeout": self.connect_timeout,
        }
        if self.user is not None:
            params["user"] = self.user
        if self.password is not None:
            params["password"] = self.password
        if self.charset is not None:
            params["charset"] = self.charset
        return params

    def describe(self) -> str:
        """Human-readable source description (never includes the password)"""
        if self.snapshot is not None:
            return f"snapshot {self.snapshot}"
        return f"{self.user or ''}@{self.host}:{self.port}/{self.database}"


class MigrationConfig(BaseModel):
    """Top-level config file structure"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    development: ConnectionConfig
    production: ConnectionConfig
    options: DiffPolicy = Field(default_factory=DiffPolicy)

    def get_target(self, name: str) -> ConnectionConfig:
        if name not in TARGET_NAMES:
            raise ConfigError(
                message=f"Unknown target '{name}'. Expected one of: {', '.join(TARGET_NAMES)}",
                code="unknown_target",
            )
        return self.development if name == "development" else self.production


def _format_validation_error(err: ValidationError) -> str:
    problems = []
    for error in err.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        problems.append(f"  • {location}: {error['msg']}")
    return "\n".join(problems)


def load_config(config_path: Path) -> MigrationConfig:
    """Read and validate a config file

    Relative snapshot paths are resolved against the config file's directory.

    Raises:
        ConfigError: If the file is missing, not JSON, or fails validation
    """
    if not config_path.exists():
        raise ConfigError(message=f"Config file not found: {config_path}", code="config_missing")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as err:
        raise ConfigError(
            message=f"Config file {config_path} is not valid JSON: {err}",
            code="config_invalid_json",
        ) from err
    except OSError as err:
        raise ConfigError(
            message=f"Cannot read config file {config_path}: {err}",
            code="config_unreadable",
        ) from err

    try:
        config = MigrationConfig.model_validate(data)
    except ValidationError as err:
        raise ConfigError(
            message=f"Invalid config file {config_path}:\n{_format_validation_error(err)}",
            code="config_invalid",
        ) from err

    return _resolve_snapshot_paths(config, config_path.parent)


def _resolve_snapshot_paths(config: MigrationConfig, base_dir: Path) -> MigrationConfig:
    updates: dict[str, ConnectionConfig] = {}
    for name in TARGET_NAMES:
        target = config.get_target(name)
        if target.snapshot is not None and not target.snapshot.is_absolute():
            updates[name] = target.model_copy(update={"snapshot": base_dir / target.snapshot})
    if not updates:
        return config
    return config.model_copy(update=updates)
