"""Configuration management for editgate using Pydantic models."""

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

CONFIG_FILE_NAME = ".editgate.json"
PROJECT_MARKER = ".claude"
DEFAULT_RULES_DIR = ".claude/rules"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"

    def to_logging(self) -> int:
        return {
            LogLevel.ERROR: logging.ERROR,
            LogLevel.WARN: logging.WARNING,
            LogLevel.INFO: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
        }[self]


class RulesConfig(BaseModel):
    """Rule discovery configuration section."""
    dir: str = Field(alias="rulesDir", default=DEFAULT_RULES_DIR)
    exclude: list[str] = Field(default_factory=list)

    @field_validator("dir")
    @classmethod
    def validate_dir(cls, v):
        if not v.strip():
            raise ValueError("rules dir must not be empty")
        return v

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN


class EditGateConfig(BaseModel):
    """Complete editgate configuration model."""
    rules: RulesConfig = Field(default_factory=RulesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> EditGateConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .editgate.json

    Returns:
        EditGateConfig: Loaded and validated configuration

    Raises:
        ConfigError: If the file specified does not exist or is invalid
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            return EditGateConfig()
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            config_data = json.load(f)
        return EditGateConfig(**config_data)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {config_path}: {e}") from e
    except (OSError, TypeError, ValidationError) as e:
        raise ConfigError(f"Failed to load config from {config_path}: {e}") from e


def _find_upwards(name: str, start_dir: Path | None, want_dir: bool) -> Path | None:
    current = Path(start_dir or Path.cwd()).resolve()

    while True:
        candidate = current / name
        if candidate.is_dir() if want_dir else candidate.is_file():
            return candidate

        parent = current.parent
        if parent == current:  # Reached root directory
            return None
        current = parent


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .editgate.json by searching up the directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    return _find_upwards(CONFIG_FILE_NAME, start_dir, want_dir=False)


def find_project_root(start_dir: Path | None = None) -> Path | None:
    """Find the nearest directory containing a .claude/ directory.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Project root if found, None otherwise
    """
    marker = _find_upwards(PROJECT_MARKER, start_dir, want_dir=True)
    return marker.parent if marker else None


def resolve_rules_dir(rules_dir: str | Path, start_dir: Path | None = None) -> Path | None:
    """Resolve the rules directory against the project root.

    Absolute paths are returned unchanged. Relative paths need a project root.

    Returns:
        Absolute rules directory, or None if no project root was found
    """
    rules_path = Path(rules_dir)
    if rules_path.is_absolute():
        return rules_path

    project_root = find_project_root(start_dir)
    if project_root is None:
        return None
    return (project_root / rules_path).resolve()
