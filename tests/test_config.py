"""Tests for configuration loading."""

import pytest
from zoneinfo import ZoneInfo

from healthtracker.config import (
    PLACEHOLDER_REMOTE_URL,
    Config,
    ConfigError,
    RemoteConfig,
    load_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep HEALTHTRACKER_ variables from the host out of the tests."""
    for key in (
        "REMOTE_URL",
        "REMOTE_TIMEOUT",
        "REMOTE_TIMEZONE",
        "CACHE_DB_PATH",
        "CACHE_KEY",
        "SYNC_LOCAL_FALLBACK",
    ):
        monkeypatch.delenv(f"HEALTHTRACKER_{key}", raising=False)


class TestConfigDefaults:
    """Tests for default configuration."""

    def test_defaults(self):
        config = load_config()

        assert isinstance(config, Config)
        assert config.remote.url == ""
        assert config.remote.is_configured is False
        assert config.cache.key == "healthData"
        assert config.sync.local_fallback is True
        assert config.status.online_display_seconds == 5.0

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")
        assert config.cache.db_path == "~/.healthtracker/cache.db"

    def test_placeholder_is_unconfigured(self):
        assert RemoteConfig(url=PLACEHOLDER_REMOTE_URL).is_configured is False
        assert RemoteConfig(url="https://sheet.test/exec").is_configured is True

    def test_empty_timezone_uses_machine_zone(self):
        assert RemoteConfig().zone is None
        assert RemoteConfig(timezone="  ").zone is None

    def test_named_timezone(self):
        assert RemoteConfig(timezone="Europe/Berlin").zone == ZoneInfo("Europe/Berlin")

    def test_unknown_timezone(self):
        with pytest.raises(ConfigError, match="Mars/Olympus"):
            RemoteConfig(timezone="Mars/Olympus").zone


class TestConfigFile:
    """Tests for YAML loading."""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "remote:\n"
            "  url: https://sheet.test/exec\n"
            "  timeout_seconds: 10\n"
            "  timezone: America/New_York\n"
            "cache:\n"
            "  db_path: /tmp/cache.db\n"
            "sync:\n"
            "  local_fallback: false\n"
            "status:\n"
            "  online_display_seconds: 2\n"
        )

        config = load_config(path)

        assert config.remote.url == "https://sheet.test/exec"
        assert config.remote.timeout_seconds == 10
        assert config.remote.timezone == "America/New_York"
        assert config.cache.db_path == "/tmp/cache.db"
        assert config.cache.key == "healthData"
        assert config.sync.local_fallback is False
        assert config.status.online_display_seconds == 2

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(path) == Config()

    def test_null_url(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("remote:\n  url:\n")

        config = load_config(path)

        assert config.remote.url == ""
        assert config.remote.is_configured is False


class TestEnvOverrides:
    """Tests for environment variable overrides."""

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("remote:\n  url: https://file.test/exec\n")
        monkeypatch.setenv("HEALTHTRACKER_REMOTE_URL", "https://env.test/exec")
        monkeypatch.setenv("HEALTHTRACKER_REMOTE_TIMEOUT", "7.5")
        monkeypatch.setenv("HEALTHTRACKER_REMOTE_TIMEZONE", "Asia/Tokyo")
        monkeypatch.setenv("HEALTHTRACKER_CACHE_KEY", "otherSlot")
        monkeypatch.setenv("HEALTHTRACKER_SYNC_LOCAL_FALLBACK", "no")

        config = load_config(path)

        assert config.remote.url == "https://env.test/exec"
        assert config.remote.timeout_seconds == 7.5
        assert config.remote.timezone == "Asia/Tokyo"
        assert config.cache.key == "otherSlot"
        assert config.sync.local_fallback is False
