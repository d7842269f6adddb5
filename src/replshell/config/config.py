"""
Configuration management for replshell.

Provides a configuration file at ~/.replshell/config.json for default settings.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Default values - single source of truth
DEFAULTS = {
    "prompt": "repl> ",
    "secondary_prompt": "{missing} > ",
    "indentation": 2,
    "hint_style": "completer",
    "hint_lines": 5,
    "hint_enabled": True,
    "history_file": str(Path.home() / ".replshell" / "history"),
    "simple": False,
    "debug": False,
}


class Config(BaseModel):
    """Configuration settings for replshell.

    All settings are optional. Use DEFAULTS for default values.
    """

    model_config = {"extra": "ignore"}  # Ignore unknown fields like _comment

    # Prompt settings
    prompt: Optional[str] = Field(
        default=None,
        description="Primary prompt"
    )
    secondary_prompt: Optional[str] = Field(
        default=None,
        description="Continuation prompt; {missing} is replaced by the unclosed brackets"
    )
    indentation: Optional[int] = Field(
        default=None,
        ge=0,
        description="Spaces of indentation per open bracket on continuation lines"
    )

    # Hint overlay settings
    hint_style: Optional[Literal["completer", "usage"]] = Field(
        default=None,
        description="Hint overlay style: candidate list or full usage panel"
    )
    hint_lines: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum lines shown by the hint overlay"
    )
    hint_enabled: Optional[bool] = Field(
        default=None,
        description="Show the hint overlay at startup (toggle with Alt-s)"
    )

    # REPL settings
    history_file: Optional[str] = Field(
        default=None,
        description="Input history file"
    )
    simple: Optional[bool] = Field(
        default=None,
        description="Use simple REPL (no prompt_toolkit line editing)"
    )
    debug: Optional[bool] = Field(
        default=None,
        description="Mirror debug logging to stderr"
    )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value with fallback to DEFAULTS, then to provided default."""
        value = getattr(self, key, None)
        if value is not None:
            return value
        return DEFAULTS.get(key, default)


class ConfigManager:
    """Manages loading and saving configuration."""

    CONFIG_DIR = Path.home() / ".replshell"
    CONFIG_FILE = CONFIG_DIR / "config.json"

    def __init__(self):
        self._config: Optional[Config] = None

    def _ensure_dir(self) -> None:
        """Ensure config directory exists."""
        self.CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    @property
    def config(self) -> Config:
        """Get the current config, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self, create_if_missing: bool = False) -> Config:
        """Load configuration from file.

        Args:
            create_if_missing: If True, create default config file if it doesn't exist.

        Returns:
            Config object with loaded settings, or defaults if file doesn't exist.
        """
        if not self.CONFIG_FILE.exists():
            if create_if_missing:
                self._create_default_config()
            return Config()

        try:
            data = json.loads(self.CONFIG_FILE.read_text())
            return Config.model_validate(data)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Invalid config file {self.CONFIG_FILE}: {e}")
            print(f"Warning: Invalid config file ({e}), using defaults")
            return Config()

    def _create_default_config(self) -> None:
        """Create default config file with actual default values."""
        self._ensure_dir()
        default_config = {"_comment": "replshell configuration file", **DEFAULTS}
        self.CONFIG_FILE.write_text(json.dumps(default_config, indent=2) + "\n")

    def _read_raw(self) -> dict[str, Any]:
        if not self.CONFIG_FILE.exists():
            return {}
        try:
            return json.loads(self.CONFIG_FILE.read_text())
        except json.JSONDecodeError:
            return {}

    def save(self, config: Optional[Config] = None) -> Path:
        """Save configuration to file, preserving existing structure.

        Args:
            config: Config to save. If None, saves current config.

        Returns:
            Path to saved config file.
        """
        self._ensure_dir()
        if config is not None:
            self._config = config

        if self._config is None:
            self._config = Config()

        existing_data = self._read_raw()
        for key, value in self._config.model_dump().items():
            if value is not None:
                existing_data[key] = value

        self.CONFIG_FILE.write_text(json.dumps(existing_data, indent=2) + "\n")
        return self.CONFIG_FILE

    def set(self, key: str, value: Any) -> None:
        """Set a config value and save.

        The value is validated against the Config model; strings such as
        "true" or "3" are coerced to the field type.
        """
        self._config = self.load()

        if key not in Config.model_fields:
            raise ValueError(f"Unknown config key: {key}")

        data = self._config.model_dump()
        data[key] = value
        self._config = Config.model_validate(data)
        self.save()

    def unset(self, key: str) -> None:
        """Remove a config value (reset to default)."""
        self._config = self.load()

        if key not in Config.model_fields:
            raise ValueError(f"Unknown config key: {key}")

        setattr(self._config, key, None)

        existing_data = self._read_raw()
        if key in existing_data:
            existing_data[key] = None
        self._ensure_dir()
        self.CONFIG_FILE.write_text(json.dumps(existing_data, indent=2) + "\n")

    def reset(self) -> None:
        """Delete the config file, restoring all defaults."""
        if self.CONFIG_FILE.exists():
            self.CONFIG_FILE.unlink()
        self._config = None

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value with fallback."""
        return self.config.get(key, default)

    def list_settings(self) -> dict[str, Any]:
        """List user-customized settings (values that differ from defaults)."""
        result = {}
        for k, v in self.config.model_dump().items():
            if v is None:
                continue
            if k not in DEFAULTS or v != DEFAULTS[k]:
                result[k] = v
        return result


# Singleton instance
_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the singleton ConfigManager instance."""
    global _manager
    if _manager is None:
        _manager = ConfigManager()
    return _manager
