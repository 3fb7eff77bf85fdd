"""User settings stored as JSON in the application data directory."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

APP_NAME = "FunnelBuilder"
DATA_DIR_ENV = "FUNNELBUILDER_DATA_DIR"

DEFAULT_SETTINGS: Dict[str, str] = {
    "default_view": "desktop",
    "default_theme": "clean-light",
    "font_group": "professional",
    "spacer_min": "0",
    "spacer_max": "300",
}


def app_data_dir() -> Path:
    """Return the platform-specific application data directory."""
    override = os.getenv(DATA_DIR_ENV)
    if override:
        target = Path(override)
    else:
        if os.name == "nt":
            base = Path(os.getenv("LOCALAPPDATA", Path.home()))
        else:
            base = Path.home() / ".local" / "share"
        target = base / APP_NAME
    target.mkdir(parents=True, exist_ok=True)
    return target


class SettingsManager:
    """Very small settings helper storing JSON data."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else app_data_dir() / "settings.json"
        self._settings: Dict[str, str] = {}
        self.load()

    def load(self) -> None:
        self._settings = {}
        if self.path.exists():
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Ignoring unreadable settings file %s: %s", self.path, exc)
                raw = {}
            if isinstance(raw, dict):
                self._settings = {str(k): str(v) for k, v in raw.items()}

        changed = False
        for key, value in DEFAULT_SETTINGS.items():
            if self._settings.get(key, "") == "":
                self._settings[key] = value
                changed = True
        if changed:
            try:
                self.save()
            except OSError as exc:
                logger.warning("Could not write settings to %s: %s", self.path, exc)

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._settings, indent=2), encoding="utf-8")

    def get(self, key: str, default: str = "") -> str:
        return self._settings.get(key, default)

    def get_int(self, key: str, default: int = 0) -> int:
        try:
            return int(float(self._settings.get(key, "")))
        except ValueError:
            return default

    def set(self, key: str, value: str) -> None:
        self._settings[key] = value
        self.save()
