"""Editor settings. Stored at ~/.zeptex/settings.json."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from zeptex.buffer import DEFAULT_MAX_LINE_LENGTH, DEFAULT_MAX_LINES
from zeptex.render import DEFAULT_TITLE

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".zeptex"
SETTINGS_FILE_NAME = "settings.json"
LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class EditorSettings:
    """Limits and cosmetics for one editor session."""

    max_lines: int = DEFAULT_MAX_LINES
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    title: str = DEFAULT_TITLE
    log_file: str | None = None
    log_level: str = "warning"


def get_config_dir() -> Path:
    return Path(os.environ.get("ZEPTEX_CONFIG_DIR", Path.home() / CONFIG_DIR_NAME))


def get_settings_path() -> Path:
    return get_config_dir() / SETTINGS_FILE_NAME


def settings_from_dict(data: dict[str, Any]) -> EditorSettings:
    """Build settings from parsed JSON, falling back to defaults per field."""
    settings = EditorSettings()
    for f in fields(EditorSettings):
        if f.name not in data:
            continue
        value = data[f.name]
        default = getattr(settings, f.name)

        if f.name in ("max_lines", "max_line_length"):
            if isinstance(value, int) and not isinstance(value, bool) and value > 0:
                setattr(settings, f.name, value)
            else:
                logger.warning("ignoring invalid %s=%r, using %r", f.name, value, default)
        elif f.name == "log_level":
            if isinstance(value, str) and value.lower() in LOG_LEVELS:
                settings.log_level = value.lower()
            else:
                logger.warning("ignoring invalid log_level=%r", value)
        elif f.name == "log_file":
            if value is None or isinstance(value, str):
                settings.log_file = value or None
            else:
                logger.warning("ignoring invalid log_file=%r", value)
        elif isinstance(value, str):
            setattr(settings, f.name, value)
        else:
            logger.warning("ignoring invalid %s=%r", f.name, value)
    return settings


def load_settings(path: Path | None = None) -> EditorSettings:
    """Read settings from *path* (default: the per-user settings file).

    A missing file gives defaults; an unreadable or malformed one gives
    defaults and a warning.  ``ZEPTEX_LOG`` names a log file when the
    settings do not.
    """
    settings_path = path if path is not None else get_settings_path()
    settings = EditorSettings()
    if settings_path.exists():
        try:
            data = json.loads(settings_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("error reading settings from %s: %s", settings_path, e)
        else:
            if isinstance(data, dict):
                settings = settings_from_dict(data)
            else:
                logger.warning("%s does not hold a JSON object, using defaults", settings_path)

    if settings.log_file is None:
        settings.log_file = os.environ.get("ZEPTEX_LOG") or None
    return settings
