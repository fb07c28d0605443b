"""Configuration loading for the health tracker."""

import os
from dataclasses import dataclass, field
from datetime import tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

# Value shipped in sample configs before a real web app URL is pasted in
PLACEHOLDER_REMOTE_URL = "YOUR_GOOGLE_SCRIPT_URL_HERE"


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used."""


@dataclass
class RemoteConfig:
    """Configuration for the spreadsheet-backed remote endpoint."""

    url: str = ""
    timeout_seconds: float = 30.0
    timezone: str = ""  # IANA name the sheet records days in; empty = this machine's

    @property
    def is_configured(self) -> bool:
        """True when a real endpoint URL has been provided."""
        url = (self.url or "").strip()
        return bool(url) and url != PLACEHOLDER_REMOTE_URL

    @property
    def zone(self) -> tzinfo | None:
        """Timezone for reducing remote timestamps to calendar days.

        Raises:
            ConfigError: If the timezone name is unknown.
        """
        name = (self.timezone or "").strip()
        if not name:
            return None
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown remote timezone: {name!r}") from e


@dataclass
class CacheConfig:
    """Configuration for the on-device entry cache."""

    db_path: str = "~/.healthtracker/cache.db"
    key: str = "healthData"


@dataclass
class SyncConfig:
    local_fallback: bool = True  # False: remote write failures are hard failures


@dataclass
class StatusConfig:
    online_display_seconds: float = 5.0


@dataclass
class Config:
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    status: StatusConfig = field(default_factory=StatusConfig)


def _get_env(key: str, default: Any = None) -> Any:
    """Get environment variable with HEALTHTRACKER_ prefix."""
    return os.environ.get(f"HEALTHTRACKER_{key}", default)


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to config."""
    # Remote overrides
    if url := _get_env("REMOTE_URL"):
        config.remote.url = url
    if timeout := _get_env("REMOTE_TIMEOUT"):
        config.remote.timeout_seconds = float(timeout)
    if tz_name := _get_env("REMOTE_TIMEZONE"):
        config.remote.timezone = tz_name

    # Cache overrides
    if db_path := _get_env("CACHE_DB_PATH"):
        config.cache.db_path = db_path
    if key := _get_env("CACHE_KEY"):
        config.cache.key = key

    # Sync overrides
    if fallback := _get_env("SYNC_LOCAL_FALLBACK"):
        config.sync.local_fallback = fallback.lower() in ("true", "1", "yes")

    return config


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to YAML config file. If None, uses default config.

    Returns:
        Loaded Config object.
    """
    config = Config()

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f) or {}

            # Parse remote config
            if "remote" in data:
                remote_data = data["remote"] or {}
                config.remote = RemoteConfig(
                    url=remote_data.get("url", config.remote.url) or "",
                    timeout_seconds=remote_data.get(
                        "timeout_seconds", config.remote.timeout_seconds
                    ),
                    timezone=remote_data.get("timezone", config.remote.timezone) or "",
                )

            # Parse cache config
            if "cache" in data:
                cache_data = data["cache"] or {}
                config.cache = CacheConfig(
                    db_path=cache_data.get("db_path", config.cache.db_path),
                    key=cache_data.get("key", config.cache.key),
                )

            # Parse sync config
            if "sync" in data:
                sync_data = data["sync"] or {}
                config.sync = SyncConfig(
                    local_fallback=sync_data.get(
                        "local_fallback", config.sync.local_fallback
                    ),
                )

            # Parse status config
            if "status" in data:
                status_data = data["status"] or {}
                config.status = StatusConfig(
                    online_display_seconds=status_data.get(
                        "online_display_seconds",
                        config.status.online_display_seconds,
                    ),
                )

    # Apply environment variable overrides
    return _apply_env_overrides(config)
