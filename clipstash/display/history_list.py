"""Numbered listing of the clipboard history for `clipstash list`."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from rich.console import Console

from clipstash.core.text_safety import sanitize_for_display
from clipstash.history.types import Item, ItemKind


def format_time_ago(dt: datetime, now: datetime | None = None) -> str:
    """Format a capture time as a relative string.

    Args:
        dt: Timezone-aware capture time.
        now: Reference time (defaults to the current UTC time).

    Returns:
        Human-readable relative time like '2h ago', '3d ago', 'just now'.
    """
    now = now or datetime.now(timezone.utc)
    seconds = int((now - dt).total_seconds())
    if seconds < 60:
        return "just now"

    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"

    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"

    days = hours // 24
    if days < 30:
        return f"{days}d ago"

    if days < 365:
        return f"{days // 30}mo ago"
    return f"{days // 365}y ago"


def print_history(
    items: Sequence[Item],
    console: Console,
    now: datetime | None = None,
) -> None:
    """Print history entries most recent first, numbered from 1.

    Previews are sanitized: clipboard text may contain ANSI sequences or
    Rich markup brackets.
    """
    console.print()
    console.print("[bold]Clipboard History[/]")
    console.print()

    for i, item in enumerate(items, 1):
        kind_style = "magenta" if item.kind == ItemKind.IMAGE else "green"
        time_ago = format_time_ago(item.captured_at, now)
        console.print(
            f"  {i}) [{kind_style}]{item.kind.value}[/] "
            f"[dim]({time_ago})[/] {sanitize_for_display(item.preview)}"
        )

    console.print()
