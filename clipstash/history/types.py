"""History item types and preview derivation."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from clipstash.core.constants import (
    DEFAULT_PREVIEW_LENGTH,
    IMAGE_PREVIEW_PREFIX,
    TRUNCATION_MARKER,
)


class ItemKind(Enum):
    """What a history item holds."""

    TEXT = "text"  # content is the captured string
    IMAGE = "image"  # content is the path of the saved blob


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Item:
    """A single clipboard capture.

    Attributes:
        kind: TEXT or IMAGE.
        content: Raw text for TEXT, blob file path for IMAGE.
        preview: Single-line, length-bounded label for the selection menu.
        captured_at: When the capture happened (timezone-aware).
    """

    kind: ItemKind
    content: str
    preview: str
    captured_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def text(
        cls,
        content: str,
        *,
        preview_length: int = DEFAULT_PREVIEW_LENGTH,
        captured_at: datetime | None = None,
    ) -> Item:
        """Create a TEXT item, deriving its preview."""
        return cls(
            kind=ItemKind.TEXT,
            content=content,
            preview=text_preview(content, preview_length),
            captured_at=captured_at or _utcnow(),
        )

    @classmethod
    def image(cls, path: Path | str, *, captured_at: datetime | None = None) -> Item:
        """Create an IMAGE item referencing a saved blob."""
        return cls(
            kind=ItemKind.IMAGE,
            content=str(path),
            preview=image_preview(path),
            captured_at=captured_at or _utcnow(),
        )

    def same_content(self, other: Item) -> bool:
        """True if both items would paste the same thing."""
        return self.kind == other.kind and self.content == other.content


def text_preview(content: str, max_length: int = DEFAULT_PREVIEW_LENGTH) -> str:
    """Flatten newlines to spaces and truncate to max_length characters.

    A truncated preview ends with "...", so the result is at most
    max_length + len("...") characters long.
    """
    flattened = content.replace("\r\n", " ").replace("\r", " ").replace("\n", " ")
    if len(flattened) > max_length:
        return flattened[:max_length] + TRUNCATION_MARKER
    return flattened


def image_preview(path: Path | str) -> str:
    """Label for an image item: "[Image] <file name>"."""
    return IMAGE_PREVIEW_PREFIX + Path(path).name


def is_blank(text: str) -> bool:
    """True for text that should never enter the history."""
    return not text.strip()
