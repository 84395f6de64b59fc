"""Typed exception hierarchy for clipstash."""

from __future__ import annotations


class ClipstashError(Exception):
    """Base class for all clipstash errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SetupError(ClipstashError):
    """Raised when a writable location for durable state cannot be established.

    This is the only error allowed to end a capture session.
    """


class PersistenceError(ClipstashError):
    """Raised when the history file could not be written after an accepted add.

    The in-memory history has already changed when this is raised.
    """


class ConfigError(ClipstashError):
    """Raised for configuration issues (invalid JSON, validation failure)."""


class LoadError(ClipstashError):
    """Base class for loading errors (config, history files)."""

    pass


class MalformedStateError(LoadError):
    """History file is unreadable or does not have the expected shape."""

    pass


class CaptureError(ClipstashError):
    """Raised when a clipboard event cannot be materialized or forwarded."""


class ExternalServiceError(ClipstashError):
    """Raised when the presentation or paste helper fails."""

    def __init__(self, service: str, reason: str) -> None:
        self.service = service
        self.reason = reason
        super().__init__(f"{service} failed: {reason}")
