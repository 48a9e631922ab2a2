"""
Tests for settings resolution: defaults, config.yaml, environment.
"""

from pathlib import Path

import yaml

from gametracker.io_paths import DEFAULT_STORAGE_FILE, PROJECT_ROOT
from gametracker.settings import load_settings


def _write_config(tmp_path, data) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestLoadSettings:
    """Defaults < config.yaml < environment."""

    def test_defaults_without_file(self, tmp_path):
        settings = load_settings(tmp_path / "missing.yaml", environ={})
        assert settings.storage_file == DEFAULT_STORAGE_FILE
        assert settings.slot_key == "gameTrackerData"
        assert settings.autosave_interval_seconds == 30.0
        assert settings.notification_seconds == 3.0
        assert settings.truncate_length == 30
        assert settings.search.min_query_length == 3
        assert settings.search.api_key == ""

    def test_values_from_yaml(self, tmp_path):
        path = _write_config(tmp_path, {
            "storage_file": "data/other.json",
            "autosave_interval_seconds": 10,
            "debug": True,
            "unknown_key": 1,
            "search": {"api_key": "abc", "debounce_seconds": 0.2},
        })
        settings = load_settings(path, environ={})
        assert settings.storage_file == PROJECT_ROOT / "data" / "other.json"
        assert settings.autosave_interval_seconds == 10.0
        assert settings.debug is True
        assert settings.search.api_key == "abc"
        assert settings.search.debounce_seconds == 0.2

    def test_absolute_storage_path_kept(self, tmp_path):
        target = tmp_path / "abs.json"
        settings = load_settings(_write_config(tmp_path, {"storage_file": str(target)}), environ={})
        assert settings.storage_file == target

    def test_environment_overrides(self, tmp_path):
        path = _write_config(tmp_path, {"search": {"api_key": "from-file"}})
        env = {
            "GAME_TRACKER_STORAGE": str(tmp_path / "env.json"),
            "GAME_TRACKER_DEBUG": "yes",
            "RAWG_API_KEY": "from-env",
        }
        settings = load_settings(path, environ=env)
        assert settings.storage_file == tmp_path / "env.json"
        assert settings.debug is True
        assert settings.search.api_key == "from-env"

    def test_malformed_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("storage_file: [unclosed", encoding="utf-8")
        settings = load_settings(path, environ={})
        assert settings.storage_file == DEFAULT_STORAGE_FILE

    def test_bad_value_uses_defaults(self, tmp_path):
        settings = load_settings(_write_config(tmp_path, {"autosave_interval_seconds": "soon"}), environ={})
        assert settings.autosave_interval_seconds == 30.0

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        assert load_settings(path, environ={}).truncate_length == 30
