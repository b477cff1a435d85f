"""Configuration loading and schema definitions."""

from hless.config.loader import (
    ConfigNotFoundError,
    default_config_path,
    load_config,
    load_config_from_string,
    save_config,
)
from hless.config.schema import Config

__all__ = [
    "Config",
    "ConfigNotFoundError",
    "default_config_path",
    "load_config",
    "load_config_from_string",
    "save_config",
]
