import json
import logging
from dataclasses import asdict
from pathlib import Path

from ..models.data_models import Settings, ENGINE_CHOICES

SETTINGS_FILE_NAME = "excel_utility_settings.json"


class ConfigManager:
    """Manages settings loading, saving, and defaults"""

    def __init__(self, base_dir=None):
        if base_dir is None:
            # Use current working directory if no base_dir provided
            base_dir = Path.cwd()
        self.base_dir = Path(base_dir)
        self.settings_file = self.base_dir / SETTINGS_FILE_NAME

    def get_default_settings(self):
        """Get default settings"""
        return Settings()

    def load_settings(self):
        """Load settings, falling back to defaults for anything missing or invalid"""
        settings = self.get_default_settings()

        if not self.settings_file.exists():
            logging.info(f"No settings file at {self.settings_file}, using defaults")
            return settings

        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                content = f.read()
            if not content.strip():
                logging.warning(f"Settings file {self.settings_file} is empty, using defaults")
                return settings
            loaded = json.loads(content)
            if not isinstance(loaded, dict):
                raise ValueError("settings document is not a key-value mapping")
        except Exception as e:
            logging.warning(f"Failed to load settings from {self.settings_file}: {e}")
            return self.get_default_settings()

        self._apply_loaded_values(settings, loaded)
        logging.info(f"Settings successfully loaded from {self.settings_file}")
        return settings

    def _apply_loaded_values(self, settings, loaded):
        """Copy recognised keys onto settings, validating each value against its default"""
        for key in Settings.keys():
            if key not in loaded:
                continue
            value = loaded[key]
            default = getattr(settings, key)

            # bool is a subclass of int, so it must be checked on its own
            if isinstance(default, bool):
                valid = isinstance(value, bool)
            elif isinstance(default, int):
                valid = isinstance(value, int) and not isinstance(value, bool)
            else:
                valid = isinstance(value, type(default))

            if not valid:
                logging.warning(f"Ignoring setting '{key}': expected {type(default).__name__}, got {value!r}")
                continue

            if isinstance(default, int) and not isinstance(default, bool) and value < 0:
                logging.warning(f"Setting '{key}' cannot be negative, using 0")
                value = 0

            setattr(settings, key, value)

        if settings.engine not in ENGINE_CHOICES:
            logging.warning(f"Unknown engine '{settings.engine}', using 'auto'")
            settings.engine = "auto"

        unknown = set(loaded) - set(Settings.keys())
        if unknown:
            logging.debug(f"Ignoring unknown settings keys: {sorted(unknown)}")

    def save_settings(self, settings):
        """Save the full settings snapshot"""
        try:
            self.settings_file.parent.mkdir(parents=True, exist_ok=True)

            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(asdict(settings), f, indent=2)

            logging.info(f"Settings successfully saved to {self.settings_file}")
            return True
        except Exception as e:
            logging.error(f"Failed to save settings to {self.settings_file}: {e}")
            return False
