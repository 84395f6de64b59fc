"""Terminal output helpers."""

from clipstash.display.console import get_console, get_error_console, set_console
from clipstash.display.history_list import format_time_ago, print_history

__all__ = [
    "format_time_ago",
    "get_console",
    "get_error_console",
    "print_history",
    "set_console",
]
