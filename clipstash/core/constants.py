"""Core constants and paths for clipstash.

Single source of truth for on-disk locations. All modules should import from
here instead of building paths like `Path.home() / ".config" / "clipstash"`.
"""

import os
from pathlib import Path

APP_NAME = "clipstash"

HOME_ENV_VAR = "CLIPSTASH_HOME"

HISTORY_FILE_NAME = "history.json"
CONFIG_FILE_NAME = "config.json"

DEFAULT_MAX_ITEMS = 20
DEFAULT_PREVIEW_LENGTH = 60
TRUNCATION_MARKER = "..."
IMAGE_PREVIEW_PREFIX = "[Image] "


def get_data_dir() -> Path:
    """Get the clipstash data directory.

    $CLIPSTASH_HOME wins, then $XDG_CONFIG_HOME/clipstash, then
    ~/.config/clipstash.
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser() / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_history_path() -> Path:
    """Get the durable history file path."""
    return get_data_dir() / HISTORY_FILE_NAME


def get_images_dir() -> Path:
    """Get the directory holding captured image blobs."""
    return get_data_dir() / "images"


def get_logs_dir() -> Path:
    """Get the capture session log directory."""
    return get_data_dir() / "logs"


def get_default_config_path() -> Path:
    """Get default config file path."""
    return get_data_dir() / CONFIG_FILE_NAME


def get_default_rofi_theme() -> Path:
    """Get the rofi theme picked up when no theme is configured."""
    return Path.home() / ".config" / "rofi" / f"{APP_NAME}.rasi"
