"""Configuration loading and validation."""

from clipstash.config.loader import load_config
from clipstash.config.schema import (
    CaptureConfig,
    Config,
    HistoryConfig,
    SelectionConfig,
)

__all__ = [
    "CaptureConfig",
    "Config",
    "HistoryConfig",
    "SelectionConfig",
    "load_config",
]
