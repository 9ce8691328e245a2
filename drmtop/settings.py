# SPDX-License-Identifier: GPL-3.0-or-later
# Settings management

"""Settings management module for persisting sampler preferences."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union

from gi.repository import GLib

from .constants import DEFAULT_REFRESH_INTERVAL


SettingValue = Union[int, float, bool, str, list]


class Settings:
    """Application settings manager.

    Settings are stored in JSON format in the user's config directory.
    """

    DEFAULTS: Dict[str, SettingValue] = {
        "refresh_interval": DEFAULT_REFRESH_INTERVAL,  # milliseconds
        "rate_formula": "divide",  # divide, multiply
        "memory_units": "kib",  # kib, legacy
        "max_workers": 4,  # threads reading fdinfo files
        "proc_path": "",  # empty: /proc, or the Flatpak host mount
        "show_idle": True,  # list devices with all engines at 0%
    }

    def __init__(self, config_dir: Optional[Union[str, Path]] = None) -> None:
        self._settings: Dict[str, SettingValue] = dict(self.DEFAULTS)
        if config_dir is None:
            config_dir = Path(GLib.get_user_config_dir()) / "drmtop"
        self._config_dir = Path(config_dir)
        self._config_file = self._config_dir / "settings.json"
        self.load()

    @property
    def path(self) -> Path:
        return self._config_file

    def load(self) -> None:
        """Load settings from file.

        If the settings file doesn't exist or is invalid, defaults are used.
        """
        try:
            if self._config_file.exists():
                with open(self._config_file, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    raise ValueError("settings file does not hold an object")
                self._settings.update(loaded)
        except (ValueError, OSError) as e:
            print(f"Warning: Could not load settings: {e}", file=sys.stderr)

    def save(self) -> None:
        """Save settings to file.

        Creates the config directory if it doesn't exist.
        """
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            with open(self._config_file, 'w', encoding='utf-8') as f:
                json.dump(self._settings, f, indent=2)
        except OSError as e:
            print(f"Warning: Could not save settings: {e}", file=sys.stderr)

    def get(self, key: str, default: Optional[SettingValue] = None) -> Any:
        """Get a setting value.

        Args:
            key: The setting key to retrieve.
            default: Default value if key is not found (falls back to DEFAULTS).

        Returns:
            The setting value.
        """
        if default is not None:
            return self._settings.get(key, default)
        return self._settings.get(key, self.DEFAULTS.get(key))

    def set(self, key: str, value: SettingValue) -> None:
        """Set a setting value and save to disk."""
        self._settings[key] = value
        self.save()
