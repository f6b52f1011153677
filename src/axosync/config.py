"""Configuration management for axosync."""

import json
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from . import CONFIG_FILE, DEFAULT_HOST, DEFAULT_PORT
from .errors import FileSystemError, FormatError, describe_validation_error

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class AxosyncConfig(BaseModel):
    """Configuration for axosync."""

    model_config = ConfigDict(extra="forbid")

    project_name: str = ""
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    sourcemap_directory: Path = Path(".")
    file_paths_scrape_directory: Path = Path(".")
    log_level: str = "info"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.lower()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value


def get_config_path(project_root: Path) -> Path:
    """Get the config file path."""
    return project_root / CONFIG_FILE


def default_project_name(project_root: Path) -> str:
    """Name of the project directory."""
    return project_root.resolve().name


def create_default_config(project_root: Path) -> AxosyncConfig:
    """Create a default configuration named after the project directory."""
    return AxosyncConfig(project_name=default_project_name(project_root))


def load_config(project_root: Path) -> AxosyncConfig:
    """Load configuration from the project's config file.

    Falls back to defaults if file doesn't exist.
    Environment variables can override config values.
    """
    config_path = get_config_path(project_root)

    if config_path.exists():
        try:
            with open(config_path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise FormatError(f"invalid JSON ({e})", config_path) from e
        except OSError as e:
            raise FileSystemError(str(e), config_path) from e
        try:
            config = AxosyncConfig.model_validate(data)
        except ValidationError as e:
            raise FormatError(describe_validation_error(e), config_path) from e
    else:
        config = create_default_config(project_root)

    if not config.project_name:
        config = config.model_copy(
            update={"project_name": default_project_name(project_root)}
        )

    # Apply environment variable overrides
    config = _apply_env_overrides(config)

    return config


def save_config(config: AxosyncConfig, project_root: Path) -> None:
    """Save configuration to the project's config file."""
    config_path = get_config_path(project_root)

    try:
        with open(config_path, "w") as f:
            json.dump(config.model_dump(mode="json"), f, indent=2)
            f.write("\n")
    except OSError as e:
        raise FileSystemError(str(e), config_path) from e


def resolve_directory(directory: Path, project_root: Path) -> Path:
    """Resolve a configured directory against the project root."""
    if directory.is_absolute():
        return directory
    return project_root / directory


def check_directories(config: AxosyncConfig, project_root: Path) -> list[str]:
    """Return warnings for configured directories that do not exist."""
    warnings = []
    for field_name in ("sourcemap_directory", "file_paths_scrape_directory"):
        directory = resolve_directory(getattr(config, field_name), project_root)
        if not directory.is_dir():
            warnings.append(f"{field_name}: {directory} is not a valid directory.")
    return warnings


def _apply_env_overrides(config: AxosyncConfig) -> AxosyncConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    # AXOSYNC_PORT
    if port := os.environ.get("AXOSYNC_PORT"):
        data["port"] = port

    # AXOSYNC_LOG_LEVEL
    if log_level := os.environ.get("AXOSYNC_LOG_LEVEL"):
        data["log_level"] = log_level

    # AXOSYNC_PROJECT_NAME
    if project_name := os.environ.get("AXOSYNC_PROJECT_NAME"):
        data["project_name"] = project_name

    try:
        return AxosyncConfig.model_validate(data)
    except ValidationError as e:
        raise FormatError(f"invalid environment override ({describe_validation_error(e)})") from e
