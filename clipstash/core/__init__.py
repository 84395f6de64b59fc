"""Core types and utilities for clipstash."""

from clipstash.core.cancel import CancellationToken
from clipstash.core.errors import (
    CaptureError,
    ClipstashError,
    ConfigError,
    ExternalServiceError,
    LoadError,
    MalformedStateError,
    PersistenceError,
    SetupError,
)
from clipstash.core.rwlock import ReadWriteLock

__all__ = [
    "CancellationToken",
    "CaptureError",
    "ClipstashError",
    "ConfigError",
    "ExternalServiceError",
    "LoadError",
    "MalformedStateError",
    "PersistenceError",
    "ReadWriteLock",
    "SetupError",
]
