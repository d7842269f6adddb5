"""Configuration management for replshell."""

from replshell.config.config import (
    DEFAULTS,
    Config,
    ConfigManager,
    get_config_manager,
)

__all__ = [
    "DEFAULTS",
    "Config",
    "ConfigManager",
    "get_config_manager",
]
