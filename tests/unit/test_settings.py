"""Unit tests for application settings and the key/value store."""

import json
import pytest
from pathlib import Path

from src.config.settings import AppSettings, SettingsManager
from src.config.store import SettingsStore


class TestAppSettings:
    """Tests for AppSettings dataclass."""

    def test_default_values(self):
        """Test default settings values."""
        settings = AppSettings()
        assert settings.server == "tranquility"
        assert settings.auto_link_window_ms == 10_000
        assert settings.lookup_concurrency == 4
        assert settings.request_timeout == 10

    def test_to_dict(self):
        """Test converting settings to dictionary."""
        settings = AppSettings(server="serenity", lookup_concurrency=2)
        data = settings.to_dict()

        assert isinstance(data, dict)
        assert data["server"] == "serenity"
        assert data["lookup_concurrency"] == 2
        assert "auto_link_window_ms" in data

    def test_from_dict_ignores_unknown_keys(self):
        """Test that from_dict ignores unknown keys."""
        data = {
            "server": "singularity",
            "unknown_field": "should be ignored",
        }
        settings = AppSettings.from_dict(data)

        assert settings.server == "singularity"
        assert not hasattr(settings, "unknown_field")

    def test_from_dict_with_missing_keys(self):
        """Test that from_dict uses defaults for missing keys."""
        settings = AppSettings.from_dict({"lookup_concurrency": 8})

        assert settings.lookup_concurrency == 8
        assert settings.auto_link_window_ms == 10_000


class TestSettingsManager:
    """Tests for SettingsManager class."""

    @pytest.fixture
    def temp_settings_path(self, tmp_path):
        """Create a temporary settings path."""
        return tmp_path / "settings.json"

    @pytest.fixture
    def manager(self, temp_settings_path):
        """Create a SettingsManager with temp path."""
        return SettingsManager(config_path=temp_settings_path)

    def test_load_returns_defaults_when_file_missing(self, manager, temp_settings_path):
        """Test loading settings when file doesn't exist."""
        assert not temp_settings_path.exists()

        settings = manager.load()

        assert settings == AppSettings()

    def test_save_and_load(self, manager, temp_settings_path):
        """Test that load restores previously saved settings."""
        manager.save(AppSettings(server="serenity", auto_link_window_ms=5000))

        with open(temp_settings_path, "r") as f:
            assert json.load(f)["server"] == "serenity"

        loaded = SettingsManager(config_path=temp_settings_path).load()
        assert loaded.server == "serenity"
        assert loaded.auto_link_window_ms == 5000

    def test_load_corrupt_file_uses_defaults(self, manager, temp_settings_path):
        """Test that invalid JSON falls back to defaults."""
        temp_settings_path.write_text("{not json")

        assert manager.load() == AppSettings()

    def test_save_creates_parent_directories(self, tmp_path):
        """Test that save creates parent directories if needed."""
        nested_path = tmp_path / "deep" / "nested" / "settings.json"
        SettingsManager(config_path=nested_path).save(AppSettings())

        assert nested_path.exists()

    def test_reset_removes_file(self, manager, temp_settings_path):
        """Test reset deletes the file and returns defaults."""
        manager.save(AppSettings(server="infinity"))

        settings = manager.reset()

        assert settings.server == "tranquility"
        assert not temp_settings_path.exists()

    def test_update_fields(self, manager):
        """Test updating individual fields persists them."""
        manager.update(server="thunderdome", not_a_field=1)

        settings = SettingsManager(config_path=manager.config_path).load()
        assert settings.server == "thunderdome"
        assert not hasattr(settings, "not_a_field")


class TestSettingsStore:
    """Tests for the dotted-key store."""

    def test_read_missing_returns_default(self, store):
        assert store.read("links.tranquility.settings_Default") is None
        assert store.read("links.tranquility.settings_Default", {}) == {}

    def test_save_and_read_nested(self, store):
        store.save("names.tranquility.core_char_1", "Pilot One")

        assert store.read("names.tranquility.core_char_1") == "Pilot One"
        assert store.read("names.tranquility") == {"core_char_1": "Pilot One"}

    def test_persists_across_instances(self, store):
        store.save("savedFolder.tranquility", "/eve/folder")

        reopened = SettingsStore(store_path=store.store_path)
        assert reopened.read("savedFolder.tranquility") == "/eve/folder"

    def test_read_returns_copy(self, store):
        store.save("links.s.p", {"core_char_1": "core_user_1"})

        value = store.read("links.s.p")
        value["core_char_2"] = "core_user_2"

        assert store.read("links.s.p") == {"core_char_1": "core_user_1"}

    def test_save_replaces_scalar_parent(self, store):
        store.save("a", "scalar")
        store.save("a.b", 1)

        assert store.read("a") == {"b": 1}

    def test_delete(self, store):
        store.save("descriptions.tranquility.core_user_1", "main")

        assert store.delete("descriptions.tranquility.core_user_1") is True
        assert store.delete("descriptions.tranquility.core_user_1") is False
        assert store.has("descriptions.tranquility.core_user_1") is False

    def test_corrupt_file_loads_empty(self, tmp_path):
        path = tmp_path / "profiles.json"
        path.write_text("[1, 2")

        assert SettingsStore(store_path=path).read("links") is None

    def test_non_object_file_loads_empty(self, tmp_path):
        path = tmp_path / "profiles.json"
        path.write_text("[1, 2]")

        assert SettingsStore(store_path=path).read("links") is None

    def test_clear(self, store):
        store.save("groups.s.p", {})

        store.clear()

        assert store.read("groups.s.p") is None
        assert not store.store_path.exists()

    def test_empty_key_rejected(self, store):
        with pytest.raises(ValueError):
            store.save("", 1)

    def test_tuple_key_segments_are_verbatim(self, store):
        store.save(("links", "tranquility", "settings_Main.Alt"), {"core_char_1": "core_user_1"})
        store.save(("links", "tranquility", "settings_Main"), {"core_char_2": "core_user_2"})

        assert store.read(("links", "tranquility", "settings_Main.Alt")) == {
            "core_char_1": "core_user_1",
        }
        assert store.read("links.tranquility") == {
            "settings_Main.Alt": {"core_char_1": "core_user_1"},
            "settings_Main": {"core_char_2": "core_user_2"},
        }

    def test_empty_tuple_key_rejected(self, store):
        with pytest.raises(ValueError):
            store.read(())

    def test_write_failure_raises_and_discards_change(self, tmp_path):
        path = tmp_path / "profiles.json"
        path.write_text(json.dumps({"savedFolder": {"tranquility": "/eve"}}))
        store = SettingsStore(store_path=path)
        store.read("savedFolder.tranquility")
        path.unlink()
        path.mkdir()

        with pytest.raises(OSError):
            store.save("savedFolder.tranquility", "/other")

        assert store.read("savedFolder.tranquility") is None
