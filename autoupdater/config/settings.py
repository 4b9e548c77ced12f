"""Application settings — persistence via JSON."""

import json
import logging
import os
from dataclasses import dataclass, asdict

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.path.join(os.environ.get('LOCALAPPDATA', '.'), 'AutoUpdater')


@dataclass
class AppSettings:
    """Persistent application settings."""
    # Paths
    data_dir: str = ""
    mods_dir: str = ""
    updates_file: str = ""              # Pending update list written by the update check
    messages_file: str = ""             # Optional message text overrides

    # Update run
    restart_delay: float = 1.0          # Seconds the "restarting" message stays up
    download_timeout: float = 120       # Seconds, per request

    # UI
    tick_interval_ms: int = 16          # Foreground poll interval

    def __post_init__(self):
        if not self.data_dir:
            self.data_dir = DEFAULT_DATA_DIR
        if not self.mods_dir:
            self.mods_dir = os.path.join(self.data_dir, 'Mods')
        if not self.updates_file:
            self.updates_file = os.path.join(self.data_dir, 'pending_updates.json')

    @property
    def temp_download_path(self) -> str:
        """Scratch file reused by every package download."""
        return os.path.join(self.data_dir, 'mod-update.zip')

    @staticmethod
    def load(path: str | None = None) -> 'AppSettings':
        """Load settings from JSON. Returns defaults if file doesn't exist."""
        if path is None:
            path = os.path.join(DEFAULT_DATA_DIR, 'settings.json')

        if not os.path.isfile(path):
            logger.info("No settings file, using defaults")
            return AppSettings()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            settings = AppSettings(**{k: v for k, v in data.items()
                                      if k in AppSettings.__dataclass_fields__})
            logger.info("Loaded settings from %s", path)
            return settings
        except Exception as e:
            logger.warning("Failed to load settings: %s", e)
            return AppSettings()

    def save(self, path: str | None = None):
        """Save settings to JSON."""
        if path is None:
            path = os.path.join(self.data_dir, 'settings.json')

        os.makedirs(os.path.dirname(path), exist_ok=True)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(asdict(self), f, indent=2)
            logger.info("Saved settings to %s", path)
        except Exception as e:
            logger.warning("Failed to save settings: %s", e)

    def ensure_dirs(self):
        """Create data directories if they don't exist."""
        os.makedirs(self.data_dir, exist_ok=True)
        os.makedirs(self.mods_dir, exist_ok=True)
