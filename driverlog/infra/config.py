"""
Application configuration.

Values come from, lowest priority first: field defaults, ``DRIVERLOG_*``
environment variables (or a ``.env`` file), and for preferences a YAML file
that the ``prefs`` command writes back.
"""

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from driverlog.domain.models import UserPreferences

PREFERENCES_FILE = "settings.yaml"


def _platform_dir(kind: Literal["config", "data"]) -> Path:
    """Per-user base directory for config or data files"""
    if os.name == 'nt':  # Windows
        return Path(os.getenv('APPDATA'))
    if kind == "config":
        return Path(os.getenv('XDG_CONFIG_HOME') or Path.home() / '.config')
    return Path(os.getenv('XDG_DATA_HOME') or Path.home() / '.local' / 'share')


def _read_preferences(path: Path) -> Optional[UserPreferences]:
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    return UserPreferences(**data) if data else None


class Settings(BaseSettings):
    """
    Runtime settings for storage, accounts and logging.

    ``config_dir`` and ``data_dir`` default to the platform's per-user
    directories and are created on load.
    """
    model_config = SettingsConfigDict(
        env_prefix='DRIVERLOG_',
        env_file='.env',
        env_file_encoding='utf-8'
    )

    app_name: str = "DriverLog"
    config_dir: Optional[Path] = None
    data_dir: Optional[Path] = None

    # Storage
    storage_backend: Literal["sqlite", "json"] = "sqlite"
    database_url: Optional[str] = None
    local_quota_bytes: int = 5 * 1024 * 1024
    photo_quota_bytes: int = 50 * 1024 * 1024

    # Account used when none is given on the command line
    default_user: str = "driver"

    log_level: str = "INFO"

    preferences: UserPreferences = UserPreferences()

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        folder = self.app_name.lower()
        self.config_dir = self.config_dir or _platform_dir("config") / folder
        self.data_dir = self.data_dir or _platform_dir("data") / folder
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        preferences_file = self._preferences_file()
        if preferences_file:
            self.preferences = _read_preferences(preferences_file) or self.preferences

    def _preferences_file(self) -> Optional[Path]:
        """A ./config/settings.yaml in the working directory wins over the user's"""
        for candidate in (Path("config") / PREFERENCES_FILE, self.config_dir / PREFERENCES_FILE):
            if candidate.exists():
                return candidate
        return None

    def save_preferences(self) -> Path:
        """Write preferences to the user's YAML file"""
        path = self.config_dir / PREFERENCES_FILE
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self.preferences.model_dump(), f, default_flow_style=False, allow_unicode=True)
        return path

    def get_db_url(self) -> str:
        """Configured database URL, or a SQLite file in the data directory"""
        return self.database_url or f"sqlite+aiosqlite:///{self.data_dir / 'driverlog.db'}"

    @property
    def photo_dir(self) -> Path:
        return self.data_dir / 'photos'

    @property
    def records_dir(self) -> Path:
        return self.data_dir / 'records'

    @property
    def backup_dir(self) -> Path:
        if self.preferences.backup_directory:
            return Path(self.preferences.backup_directory)
        return self.data_dir / 'backups'


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide settings, loaded on first use"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Discard the cached settings and load them again"""
    global _settings
    _settings = Settings()
    return _settings
