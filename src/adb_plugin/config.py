"""Configuration loader for adb-plugin."""

from __future__ import annotations

import asyncio
import os
import tempfile
import tomllib
from pathlib import Path

import tomlkit
from pydantic import BaseModel, Field, ValidationError, field_validator

from adb_plugin.debug_log import LEVELS
from adb_plugin.paths import get_config_path

DEFAULT_CHANNEL_NAME = "adb"
DEFAULT_FALLBACK_VERSION = "unknown"


class ConfigError(Exception):
    """Raised when the config file cannot be parsed or validated."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid config {path}: {reason}")


class GeneralConfig(BaseModel):
    """General plugin settings."""

    channel_name: str = Field(
        default=DEFAULT_CHANNEL_NAME, description="Channel the plugin registers on"
    )
    fallback_version: str = Field(
        default=DEFAULT_FALLBACK_VERSION,
        description="Version text reported when the OS query fails",
    )

    @field_validator("channel_name", "fallback_version")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class LoggingConfig(BaseModel):
    """Debug log settings."""

    level: str = Field(default="INFO", description="Minimum level kept in the debug log")

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, value: object) -> str:
        if not isinstance(value, str) or value.upper() not in LEVELS:
            raise ValueError(f"level must be one of {', '.join(LEVELS)}")
        return value.upper()


class PluginConfig(BaseModel):
    """Root configuration model."""

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> PluginConfig:
        """Load configuration from TOML file or use defaults."""
        if config_path is None:
            config_path = get_config_path()

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
            return cls.model_validate(data)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(config_path, str(e)) from e
        except ValidationError as e:
            raise ConfigError(config_path, f"{e.error_count()} validation error(s)") from e

    def to_toml(self) -> str:
        doc = tomlkit.document()
        doc.add(tomlkit.comment("adb-plugin configuration"))
        for section, values in self.model_dump().items():
            table = tomlkit.table()
            for key, value in values.items():
                table[key] = value
            doc[section] = table
        return tomlkit.dumps(doc)

    async def save(self, path: Path) -> None:
        """Serialize current config to TOML file.

        Args:
            path: Path to write config file (created if missing)
        """
        await asyncio.to_thread(_write_atomic, path, self.to_toml())


def _write_atomic(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp_")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.replace(tmp_name, path)
    except Exception:
        Path(tmp_name).unlink(missing_ok=True)
        raise
