"""Configuration input."""

from .config import ConfigError, ConfigResult, load_config, load_config_or_raise

__all__ = ["ConfigResult", "ConfigError", "load_config", "load_config_or_raise"]
