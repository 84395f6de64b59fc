"""Configuration loading with fail-fast behavior.

A missing config file means "use defaults". A config file that exists but is
broken is an error: silently ignoring it would run the daemon with settings
the user did not ask for.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from clipstash.config.schema import Config
from clipstash.core.constants import get_default_config_path
from clipstash.core.errors import ConfigError

logger = logging.getLogger(__name__)


def load_config(path: Path | None = None) -> Config:
    """Load configuration from file.

    Args:
        path: Explicit config file path. Must exist when given. When None, the
            default location (<data dir>/config.json) is used if present.

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If the file is missing (explicit path only), contains
            invalid JSON, or fails validation.
    """
    if path is None:
        path = get_default_config_path()
        if not path.is_file():
            logger.debug("No config at %s, using defaults", path)
            return Config()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    data = read_config_file(path)
    if not data:
        return Config()

    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed for {path}: {e}") from e
    logger.info("Config loaded from: %s", path)
    return config


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a config file into a dict.

    An empty (or whitespace-only) file is an empty dict. A UTF-8 BOM is
    tolerated since some editors write one.

    Raises:
        ConfigError: If the file cannot be read, is not JSON, or is not a
            JSON object.
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    if not text.strip():
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Config {path} must be a JSON object, got {type(data).__name__}"
        )
    return data
