"""
Application settings.

Defaults live on the Settings dataclass. A JSON file can override any of
them; command-line flags (see __main__.py) override the file.
"""

import json
import logging
import os
from dataclasses import dataclass, fields, replace

from .colormaps import DEFAULT_PALETTE, PALETTES
from .viewport import DEFAULT_ITERATIONS, MAX_ITERATIONS, MIN_ITERATIONS

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')


@dataclass(frozen=True)
class Settings:
    width: int = 640
    height: int = 480
    max_iterations: int = DEFAULT_ITERATIONS
    palette: str = DEFAULT_PALETTE
    fps: int = 60
    highlight_cursor: bool = True
    save_dir: str = "."

    def validate(self):
        """Raise ValueError if any setting has the wrong type or is out of range."""
        for name in ('width', 'height', 'max_iterations', 'fps'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if not isinstance(self.highlight_cursor, bool):
            raise ValueError(f"highlight_cursor must be true or false, got {self.highlight_cursor!r}")
        if not isinstance(self.palette, str) or not isinstance(self.save_dir, str):
            raise ValueError("palette and save_dir must be strings")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"window size must be positive, got {self.width}x{self.height}")
        if not MIN_ITERATIONS <= self.max_iterations <= MAX_ITERATIONS:
            raise ValueError(
                f"max_iterations must be in [{MIN_ITERATIONS}, {MAX_ITERATIONS}], "
                f"got {self.max_iterations}"
            )
        if self.palette not in PALETTES:
            raise ValueError(f"unknown palette {self.palette!r}")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        return self


def load_settings(path=None):
    """
    Load settings from a JSON file.

    Missing files, malformed JSON, unknown keys and invalid values are
    logged and ignored; the defaults are used for anything not loaded.

    Args:
        path: JSON file path (default: settings.json next to this module)

    Returns:
        Settings instance
    """
    settings_path = path or DEFAULT_SETTINGS_PATH
    try:
        with open(settings_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        if path is not None:
            logger.warning("Settings file not found: %s", settings_path)
        return Settings()
    except (OSError, ValueError) as e:
        # ValueError covers JSONDecodeError and UnicodeDecodeError
        logger.warning("Could not read %s: %s", settings_path, e)
        return Settings()

    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a JSON object", settings_path)
        return Settings()

    known = {f.name for f in fields(Settings)}
    for key in sorted(set(data) - known):
        logger.warning("Ignoring unknown setting %r in %s", key, settings_path)

    try:
        return replace(Settings(), **{k: v for k, v in data.items() if k in known}).validate()
    except (TypeError, ValueError) as e:
        logger.warning("Invalid settings in %s: %s", settings_path, e)
        return Settings()
