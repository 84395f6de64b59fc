"""Shared Rich Console instance for clipstash."""

from __future__ import annotations

from rich.console import Console

_console: Console | None = None


def get_console() -> Console:
    """Get the shared stdout Console instance."""
    global _console
    if _console is None:
        _console = Console(highlight=False, markup=True)
    return _console


def get_error_console() -> Console:
    """Console bound to stderr for status and error lines.

    Keeps stdout clean so `clipstash list` output can be piped.
    """
    return Console(stderr=True, highlight=False, markup=True)


def set_console(console: Console | None) -> None:
    """Set a custom Console instance.

    Useful for testing or custom configurations. None restores the default.
    """
    global _console
    _console = console
