"""Tool settings loaded from the environment."""

from __future__ import annotations

from enum import StrEnum
from os import environ
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError

ENV_DEBUG = "OPENSPEC_DEBUG"
ENV_LOG_LEVEL = "OPENSPEC_LOG_LEVEL"
ENV_LOG_FORMAT = "OPENSPEC_LOG_FORMAT"
ENV_LOG_FILE = "OPENSPEC_LOG_FILE"


class LogLevel(StrEnum):
    """Log level threshold values, most verbose first."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Logging settings.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to the log file (empty uses the platform default).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> LoggingConfig:
        """Build settings from ``OPENSPEC_LOG_*`` variables.

        ``OPENSPEC_DEBUG`` forces the debug level. Invalid values for a field
        fall back to that field's default without affecting the others.

        Args:
            env: Mapping to read instead of ``os.environ``.
        """
        source = environ if env is None else env
        values: dict[str, str] = {}

        if source.get(ENV_DEBUG):
            values["level"] = LogLevel.DEBUG.value
        elif level := source.get(ENV_LOG_LEVEL):
            values["level"] = level.strip().lower()
        if fmt := source.get(ENV_LOG_FORMAT):
            values["format"] = fmt.strip().lower()
        if log_file := source.get(ENV_LOG_FILE):
            values["file"] = log_file

        for key in list(values):
            try:
                _ = cls.model_validate({key: values[key]})
            except ValidationError:
                del values[key]
        return cls.model_validate(values)
