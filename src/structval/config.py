"""Configuration management for structval using Pydantic models."""

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

CONFIG_FILE_NAME = ".structval.json"
DEFAULT_TAG_NAME = "validate"

logger = logging.getLogger(__name__)


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"

    def to_logging(self) -> int:
        """Matching level number of the standard logging module."""
        return {
            LogLevel.ERROR: logging.ERROR,
            LogLevel.WARN: logging.WARNING,
            LogLevel.INFO: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
        }[self]


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.INFO


class ValidatorConfig(BaseModel):
    """Complete structval configuration model."""
    tag_name: str = Field(alias="tagName", default=DEFAULT_TAG_NAME)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("tag_name")
    @classmethod
    def validate_tag_name(cls, v):
        if not v or not v.strip():
            raise ValueError("tag_name must be a non-empty string")
        return v

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)


def load_config(config_path: str | Path | None = None) -> ValidatorConfig:
    """Load settings from ``config_path`` or the nearest ``.structval.json``.

    Defaults are returned when no file is given and none is found, or when the
    given path does not exist.

    Raises:
        ValueError: If the file cannot be read, is not JSON, or holds settings
            the model rejects. The underlying error is chained as ``__cause__``.
    """
    path = find_config_file() if config_path is None else Path(config_path)
    if path is None or not path.is_file():
        logger.debug(f"No config file at {path}, using defaults")
        return create_default_config()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ValueError(f"Failed to read config file {path}: {e}") from e

    try:
        config = ValidatorConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid settings in config file {path}: {e}") from e

    logger.debug(f"Loaded config from {path}")
    return config


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Nearest ``.structval.json`` in ``start_dir`` (default: cwd) or its parents."""
    start = Path(start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def create_default_config() -> ValidatorConfig:
    """Create default configuration."""
    return ValidatorConfig()
