"""Configuration loader."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from hless.config.schema import Config

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "hless" / "default"
CONFIG_ENV_VAR = "HLESS_CONFIG"


class ConfigNotFoundError(FileNotFoundError):
    """The configuration file does not exist."""


def default_config_path() -> Path:
    """Config path from $HLESS_CONFIG, or ~/.config/hless/default."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


def resolve_config_path(config_path: Path | str | None = None) -> Path:
    if config_path is None:
        return default_config_path()
    return Path(config_path).expanduser()


def parse_yaml(text: str, source: str = "<string>") -> dict[str, Any]:
    """Parse a YAML (or JSON) document into a mapping.

    Raises:
        ValueError: If the document is not valid YAML or not a mapping
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"{source}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{source}: expected a mapping, got {type(data).__name__}")
    return data


def load_config(config_path: Path | str | None = None) -> Config:
    """Load configuration from file.

    JSON is a subset of YAML, so configs written as JSON load as well.

    Args:
        config_path: Path to config file (default: $HLESS_CONFIG or ~/.config/hless/default)

    Returns:
        Configuration object

    Raises:
        ConfigNotFoundError: If the file does not exist
        ValueError: If the file is not a valid configuration
    """
    path = resolve_config_path(config_path)
    if not path.is_file():
        raise ConfigNotFoundError(f"configuration not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = parse_yaml(f.read(), source=str(path))
    return Config(**data)


def load_config_from_string(yaml_string: str) -> Config:
    """Load configuration from a YAML string (useful for testing)."""
    return Config(**parse_yaml(yaml_string))


def save_config(config: Config, config_path: Path | str | None = None) -> Path:
    """Write configuration as YAML, creating parent directories.

    Returns:
        The path written
    """
    path = resolve_config_path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(exclude_none=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=True, allow_unicode=True)
    return path
