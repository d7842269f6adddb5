#!/usr/bin/env python3
"""
Tests for configuration management module.
"""

import json
import pytest
from unittest.mock import patch

from replshell.config import DEFAULTS, Config, ConfigManager, get_config_manager


# ============================================================================
# Config Model Tests
# ============================================================================

class TestConfig:
    """Tests for Config model."""

    def test_create_empty_config(self):
        """Test creating config with all defaults."""
        cfg = Config()
        assert cfg.prompt is None
        assert cfg.secondary_prompt is None
        assert cfg.indentation is None
        assert cfg.hint_style is None
        assert cfg.hint_enabled is None
        assert cfg.history_file is None
        assert cfg.simple is None

    def test_create_config_with_values(self):
        """Test creating config with specific values."""
        cfg = Config(prompt=">>> ", indentation=4, hint_style="usage")
        assert cfg.prompt == ">>> "
        assert cfg.indentation == 4
        assert cfg.hint_style == "usage"

    def test_invalid_values_rejected(self):
        """Test field constraints are enforced."""
        with pytest.raises(ValueError):
            Config(hint_style="popup")
        with pytest.raises(ValueError):
            Config(indentation=-1)

    def test_get_with_value(self):
        """Test get method when value exists."""
        cfg = Config(indentation=4)
        assert cfg.get("indentation") == 4
        assert cfg.get("indentation", 8) == 4

    def test_get_with_none(self):
        """Test get method when value is None falls back to DEFAULTS."""
        cfg = Config()
        assert cfg.get("prompt") == DEFAULTS["prompt"]
        # Explicit default is ignored when DEFAULTS has the key
        assert cfg.get("prompt", "$ ") == DEFAULTS["prompt"]

    def test_get_unknown_key(self):
        """Test get with unknown key returns default."""
        cfg = Config()
        assert cfg.get("unknown_key") is None
        assert cfg.get("unknown_key", "default") == "default"

    def test_defaults_cover_fields(self):
        """Test every config field has a default."""
        assert set(Config.model_fields) == set(DEFAULTS)


# ============================================================================
# ConfigManager Tests
# ============================================================================

class TestConfigManager:
    """Tests for ConfigManager."""

    @pytest.fixture
    def temp_config_dir(self, tmp_path):
        """Create temporary config directory."""
        config_dir = tmp_path / ".replshell"
        config_dir.mkdir()
        return config_dir

    @pytest.fixture
    def mgr(self, temp_config_dir):
        """ConfigManager reading and writing the temporary directory."""
        with patch.object(ConfigManager, 'CONFIG_DIR', temp_config_dir):
            with patch.object(ConfigManager, 'CONFIG_FILE', temp_config_dir / "config.json"):
                yield ConfigManager()

    def test_load_nonexistent_config(self, mgr):
        """Test loading config when file doesn't exist (without creating)."""
        cfg = mgr.load(create_if_missing=False)
        assert cfg.prompt is None
        assert not mgr.CONFIG_FILE.exists()

    def test_load_creates_default_config(self, mgr):
        """Test that load creates default config file if missing."""
        cfg = mgr.load(create_if_missing=True)
        assert cfg.prompt is None
        assert mgr.CONFIG_FILE.exists()
        content = mgr.CONFIG_FILE.read_text()
        assert '"secondary_prompt"' in content

    def test_save_and_load_config(self, mgr):
        """Test saving and loading config."""
        mgr.save(Config(prompt="$ ", hint_lines=3))
        assert mgr.CONFIG_FILE.exists()

        loaded = ConfigManager().load()
        assert loaded.prompt == "$ "
        assert loaded.hint_lines == 3

    def test_save_only_non_none_values(self, mgr):
        """Test that save only writes non-None values."""
        mgr.save(Config(indentation=4))
        data = json.loads(mgr.CONFIG_FILE.read_text())
        assert data == {"indentation": 4}

    def test_set_value(self, mgr):
        """Test setting a config value."""
        mgr.set("indentation", 4)
        assert ConfigManager().load().indentation == 4

    def test_set_coerces_strings(self, mgr):
        """Test command-line strings are coerced to the field type."""
        mgr.set("indentation", "3")
        mgr.set("hint_enabled", "false")
        loaded = ConfigManager().load()
        assert loaded.indentation == 3
        assert loaded.hint_enabled is False

    def test_set_invalid_value_raises(self, mgr):
        with pytest.raises(ValueError):
            mgr.set("hint_style", "popup")

    def test_set_preserves_other_values(self, mgr):
        """Test that setting one value preserves other existing values."""
        mgr.set("indentation", 4)

        mgr2 = ConfigManager()
        mgr2.set("prompt", "$ ")

        final = ConfigManager().load(create_if_missing=False)
        assert final.indentation == 4
        assert final.prompt == "$ "

    def test_set_unknown_key_raises(self, mgr):
        """Test that setting unknown key raises ValueError."""
        with pytest.raises(ValueError, match="Unknown config key"):
            mgr.set("unknown_key", "value")

    def test_unset_value(self, mgr):
        """Test unsetting a config value."""
        mgr.set("indentation", 4)
        mgr.set("simple", True)
        mgr.unset("indentation")

        loaded = ConfigManager().load()
        assert loaded.indentation is None
        assert loaded.simple is True

    def test_get_value(self, mgr):
        """Test getting a config value."""
        mgr.set("indentation", 4)
        assert mgr.get("indentation") == 4
        # Unset values fall back to DEFAULTS
        assert mgr.get("prompt") == DEFAULTS["prompt"]

    def test_list_settings(self, mgr):
        """Test listing non-default settings."""
        mgr.set("indentation", 4)
        mgr.set("hint_style", "completer")  # Same as default
        assert mgr.list_settings() == {"indentation": 4}

    def test_list_settings_empty(self, mgr):
        """Test listing settings when empty."""
        assert mgr.list_settings() == {}

    def test_reset(self, mgr):
        """Test resetting config to defaults."""
        mgr.set("indentation", 4)
        assert mgr.CONFIG_FILE.exists()

        mgr.reset()
        assert not mgr.CONFIG_FILE.exists()
        assert mgr.load().indentation is None

    def test_load_invalid_json(self, mgr):
        """Test loading invalid JSON returns defaults."""
        mgr.CONFIG_FILE.write_text("not valid json")
        assert mgr.load().prompt is None

    def test_load_invalid_schema(self, mgr):
        """Test loading invalid schema returns defaults."""
        mgr.CONFIG_FILE.write_text('{"indentation": "not a number"}')
        assert mgr.load().indentation is None

    def test_load_ignores_comment(self, mgr):
        mgr.CONFIG_FILE.write_text('{"_comment": "hi", "prompt": "% "}')
        assert mgr.load().prompt == "% "


# ============================================================================
# Singleton Tests
# ============================================================================

class TestSingleton:
    """Tests for singleton functions."""

    def test_get_config_manager_returns_same_instance(self, tmp_path):
        """Test that get_config_manager returns singleton."""
        import replshell.config.config as config_module

        config_module._manager = None

        with patch.object(ConfigManager, 'CONFIG_DIR', tmp_path):
            with patch.object(ConfigManager, 'CONFIG_FILE', tmp_path / "config.json"):
                mgr1 = get_config_manager()
                mgr2 = get_config_manager()
                assert mgr1 is mgr2

        config_module._manager = None


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
