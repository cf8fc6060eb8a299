"""
Caller settings, stored as YAML.

The extension keeps two settings: the base folder that job folders are
created in, and the UI theme. This is the same key-value store for callers
running outside the browser (the CLI, scripts).

Example settings.yaml:

    baseFolder: /home/me/Jobs
    theme: dark
"""

import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()
SETTINGS_PATH = Path(
    os.getenv("JOBLOGGER_SETTINGS_PATH", str(Path.home() / ".joblogger" / "settings.yaml"))
)

DEFAULT_SETTINGS = {"baseFolder": "", "theme": "light"}
THEMES = ("light", "dark")


class SettingsStore:
    """
    Key-value settings backed by a YAML file.

    Reads go to the file each time, so edits made by another process are
    picked up. A missing file reads as the defaults.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else SETTINGS_PATH

    def _load(self) -> dict:
        settings = OmegaConf.create(DEFAULT_SETTINGS)
        if self.path.exists():
            stored = OmegaConf.load(self.path)
            settings = OmegaConf.merge(settings, stored)
        return OmegaConf.to_container(settings, resolve=True)

    def as_dict(self) -> dict:
        """All known settings (stored values over defaults)."""
        stored = self._load()
        return {key: stored.get(key, default) for key, default in DEFAULT_SETTINGS.items()}

    def get(self, key: str, default: str = "") -> str:
        """
        Read a setting.

        Raises:
            KeyError: key is not a known setting
        """
        if key not in DEFAULT_SETTINGS:
            raise KeyError(f"Unknown setting: {key}")
        value = self.as_dict().get(key)
        return str(value) if value not in (None, "") else default

    def set(self, key: str, value: str) -> None:
        """
        Validate and persist one setting.

        Raises:
            KeyError: key is not a known setting
            ValueError: value is not acceptable for key
        """
        if key not in DEFAULT_SETTINGS:
            raise KeyError(f"Unknown setting: {key}")

        value = value.strip()
        if key == "baseFolder" and not value:
            raise ValueError("Base folder path is required")
        if key == "theme" and value not in THEMES:
            raise ValueError(f"Theme must be one of: {', '.join(THEMES)}")

        settings = self.as_dict()
        settings[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        OmegaConf.save(OmegaConf.create(settings), self.path)
