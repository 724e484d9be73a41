"""
Application configuration management for Radiant.

Handles settings storage, notification preferences, and the last known
observer location. Settings are persisted to ~/.radiant/config.json
(set RADIANT_HOME to use another directory).
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from radiant.models.shower import NotificationSettings, UserLocation
from radiant.utils.constants import DEFAULT_NOTIFICATION_SETTINGS

logger = logging.getLogger(__name__)


class Config:
    """Manages application settings with JSON file persistence."""

    _CONFIG_NAME = "config.json"
    _DB_NAME = "radiant.db"

    _defaults = {
        "notification_settings": dict(DEFAULT_NOTIFICATION_SETTINGS),
        "user_location": None,          # {"latitude", "longitude", "timezone", ...}
        "theme": "auto",                # "light", "dark", "auto"
        "onboarding_completed": False,
        "log_level": "INFO",
    }

    _instance: Optional["Config"] = None
    _settings: dict
    _app_dir: Path

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._settings = {}
            cls._instance._app_dir = Path(
                os.environ.get("RADIANT_HOME", Path.home() / ".radiant")
            )
            cls._instance._load()
        return cls._instance

    @classmethod
    def reset(cls):
        """Drop the cached instance so the next Config() reloads from disk."""
        cls._instance = None

    @property
    def config_file(self) -> Path:
        return self._app_dir / self._CONFIG_NAME

    def _load(self):
        """Load settings from disk, merging with defaults."""
        self._app_dir.mkdir(parents=True, exist_ok=True)

        if self.config_file.exists():
            try:
                with open(self.config_file) as f:
                    saved = json.load(f)
                # Merge: defaults first, then saved values override
                self._settings = {**self._defaults, **saved}
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Unreadable config {self.config_file}, using defaults: {e}")
                self._settings = dict(self._defaults)
        else:
            self._settings = dict(self._defaults)

    def save(self):
        """Persist current settings to disk."""
        self._app_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self._settings, f, indent=2)

    def get(self, key: str, default=None):
        """Get a setting value."""
        return self._settings.get(key, default)

    def set(self, key: str, value):
        """Set a setting value and save."""
        self._settings[key] = value
        self.save()

    def get_notification_settings(self) -> NotificationSettings:
        return NotificationSettings.from_dict(
            self.get("notification_settings") or {}
        )

    def set_notification_settings(self, settings: NotificationSettings):
        self.set("notification_settings", settings.to_dict())

    def get_user_location(self) -> Optional[UserLocation]:
        data = self.get("user_location")
        if not data:
            return None
        try:
            return UserLocation.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed stored location: {e}")
            return None

    def set_user_location(self, location: UserLocation):
        self.set("user_location", location.to_dict())

    @classmethod
    def get_db_path(cls) -> Path:
        """Get the SQLite database file path."""
        instance = cls()
        instance._app_dir.mkdir(parents=True, exist_ok=True)
        return instance._app_dir / cls._DB_NAME

    @classmethod
    def get_app_dir(cls) -> Path:
        """Get the application data directory."""
        instance = cls()
        instance._app_dir.mkdir(parents=True, exist_ok=True)
        return instance._app_dir
