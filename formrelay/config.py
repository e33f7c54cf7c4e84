"""Global configuration for formrelay.

Configuration lives in ``~/.config/formrelay/config.yaml`` (or wherever
``FORMRELAY_HOME`` / ``FORMRELAY_CONFIG`` point) and can be overridden per
process with environment variables.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from formrelay.routing.params import DEFAULT_OUTPUT_KEYS, DEFAULT_PARAM_NAMES, ParamRegistry

DEFAULT_PERMISSION_MESSAGE = "You don't have enough permissions to perform this action!"

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigError(Exception):
    """Raised when the configuration file cannot be loaded."""

    pass


class SettingsTypeNames(BaseModel):
    """Type tags that route a submission to the settings branch."""

    settings: str = "settings"
    settings_global: str = "settings-global"
    file_upload_admin: str = "file-upload-admin"

    def all(self) -> tuple[str, ...]:
        return (self.settings, self.settings_global, self.file_upload_admin)


class AppConfig(BaseModel):
    """Resolved formrelay configuration."""

    developer_mode: bool = False
    log_level: str = "INFO"
    upload_dir: Path = Path("formrelay-tmp")
    param_names: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_PARAM_NAMES))
    output_keys: list[str] = Field(default_factory=lambda: list(DEFAULT_OUTPUT_KEYS))
    settings_types: SettingsTypeNames = Field(default_factory=SettingsTypeNames)
    permission_message: str = DEFAULT_PERMISSION_MESSAGE

    def param_registry(self) -> ParamRegistry:
        """Build the param registry described by this config."""
        return ParamRegistry(self.param_names, self.output_keys)


def get_formrelay_home() -> Path:
    """Return the formrelay home directory."""
    env_home = os.environ.get("FORMRELAY_HOME")
    if env_home:
        return Path(env_home)
    return Path.home() / ".config" / "formrelay"


def get_config_path() -> Path:
    """Return the path of the global config file."""
    env_path = os.environ.get("FORMRELAY_CONFIG")
    if env_path:
        return Path(env_path)
    return get_formrelay_home() / "config.yaml"


def load_global_config(path: Path | None = None) -> dict[str, Any]:
    """Load the raw global config mapping.

    Args:
        path: Config file path (default: get_config_path()).

    Returns:
        The parsed YAML mapping, or an empty dict if the file does not exist.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        return {}

    with open(config_path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return data


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    data = dict(data)
    developer_mode = os.environ.get("FORMRELAY_DEVELOPER_MODE")
    if developer_mode is not None:
        data["developer_mode"] = developer_mode.strip().lower() in _TRUE_VALUES
    upload_dir = os.environ.get("FORMRELAY_UPLOAD_DIR")
    if upload_dir:
        data["upload_dir"] = upload_dir
    log_level = os.environ.get("FORMRELAY_LOG_LEVEL")
    if log_level:
        data["log_level"] = log_level.upper()
    return data


def load_config(path: Path | None = None) -> AppConfig:
    """Load the formrelay configuration with environment overrides applied.

    Raises:
        ConfigError: If the file or the resulting values are invalid.
    """
    data = _apply_env_overrides(load_global_config(path))
    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid formrelay configuration: {e}") from e
