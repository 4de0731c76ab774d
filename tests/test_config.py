"""Tests for sshsession.config."""

import json

from sshsession.config import ClientSettings, SettingsManager


class TestClientSettings:
    def test_defaults(self):
        s = ClientSettings()
        assert s.port == 22
        assert s.probe_timeout == 15
        assert s.default_file_permissions == 0o644
        assert s.verify_host_key is False

    def test_from_dict_ignores_unknown_keys(self):
        s = ClientSettings.from_dict({"port": 2222, "theme_name": "dracula"})
        assert s.port == 2222
        assert not hasattr(s, "theme_name")

    def test_to_dict_round_trip(self):
        s = ClientSettings(probe_timeout=5, combine_stderr=True)
        assert ClientSettings.from_dict(s.to_dict()) == s


class TestSettingsManager:
    def test_missing_file_gives_defaults(self, tmp_path):
        manager = SettingsManager(tmp_path / "config.json")
        assert manager.settings == ClientSettings()

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        manager = SettingsManager(path)
        manager.settings.port = 2200
        manager.save()

        assert json.loads(path.read_text())["port"] == 2200
        assert SettingsManager(path).settings.port == 2200

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        assert SettingsManager(path).settings == ClientSettings()

    def test_save_before_load_is_noop(self, tmp_path):
        path = tmp_path / "config.json"
        SettingsManager(path).save()
        assert not path.exists()

    def test_settings_loaded_once(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"port": 2200}))
        manager = SettingsManager(path)

        first = manager.settings
        path.write_text(json.dumps({"port": 2201}))

        assert manager.settings is first
        assert manager.settings.port == 2200
