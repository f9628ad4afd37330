from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ImporterSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    default_separator: str = Field(default="=", min_length=1)
    encoding: str = "utf-8"
    # When false, variable names are spliced into the line rule as regular expressions.
    escape_names: bool = True


class FileRotationSettings(BaseModel):
    """
    Date-based rotation settings (daily).

    This maps cleanly to Python's standard library TimedRotatingFileHandler behavior.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    backup_count: int = Field(default=5, ge=0)


class FileLoggingSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = "logs/trusted-conf.log"
    rotation: FileRotationSettings = Field(default_factory=FileRotationSettings)


class LoggingSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    level: str = "INFO"
    file: Optional[FileLoggingSettings] = None


class AppConfig(BaseModel):
    """Effective settings after defaults, the YAML file and environment overrides are applied."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    importer: ImporterSettings = Field(default_factory=ImporterSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@dataclass(frozen=True, slots=True)
class ConfigLoadRequest:
    """
    Optional inputs for a configuration loader.

    With no `yaml_path`, only defaults and environment overrides are used.
    """

    yaml_path: Optional[str] = None
    env_prefix: str = "TRUSTED_CONF__"
    dotenv_path: Optional[str] = ".env"
