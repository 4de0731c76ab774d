"""
Persistent client settings for sshsession.
Stored in ~/.sshsession/config.json
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".sshsession"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"


@dataclass
class ClientSettings:
    """
    Connection settings shared by every session client.
    """
    # Reachability probe
    port: int = 22
    probe_timeout: float = 15

    # Handshake
    connect_timeout: float = 10
    banner_timeout: float = 15
    keepalive_interval: int = 30
    legacy_algorithms: bool = True
    # Force ssh-rsa (SHA-1) signatures for OpenSSH < 7.2
    rsa_sha1: bool = False

    # Host key checking (off means accept any key, like AutoAddPolicy)
    verify_host_key: bool = False
    known_hosts_path: str = "~/.ssh/known_hosts"

    # Command execution
    combine_stderr: bool = False

    # File transfer
    default_file_permissions: int = 0o644

    def to_dict(self) -> dict:
        """Serialize to dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> ClientSettings:
        """Deserialize from dict, ignoring unknown keys."""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)


class SettingsManager:
    """
    Manages loading and saving client settings.

    Usage:
        manager = SettingsManager()
        settings = manager.settings

        settings.probe_timeout = 5
        manager.save()
    """

    def __init__(self, config_path: Path = None):
        self._config_path = config_path or DEFAULT_CONFIG_FILE
        self._settings: Optional[ClientSettings] = None

    @property
    def settings(self) -> ClientSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ClientSettings:
        """Read settings from disk. A missing or unreadable file yields defaults."""
        path = self._config_path
        if not path.exists():
            logger.debug(f"No settings at {path}")
            return ClientSettings()

        try:
            settings = ClientSettings.from_dict(json.loads(path.read_text()))
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Ignoring settings in {path}: {e}")
            return ClientSettings()
        logger.debug(f"Loaded settings from {path}")
        return settings

    def save(self) -> None:
        """Write loaded settings back to disk. Nothing is written before a load."""
        if self._settings is None:
            return

        path = self._config_path
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            path.write_text(json.dumps(self._settings.to_dict(), indent=2))
        except OSError as e:
            logger.error(f"Could not write settings to {path}: {e}")
            return
        logger.debug(f"Saved settings to {path}")


_manager: Optional[SettingsManager] = None


def get_settings() -> ClientSettings:
    """Settings from the default config file, loaded once per process."""
    global _manager
    if _manager is None:
        _manager = SettingsManager()
    return _manager.settings
