"""Command-line interface."""

from clipstash.cli.main import main

__all__ = ["main"]
