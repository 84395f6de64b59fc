"""History persistence: serialization and deserialization of items.

The history file is a small JSON document meant to be readable and diffable:

    {
      "schema_version": 1,
      "items": [
        {"kind": "text", "content": "...", "preview": "...",
         "captured_at": "2026-01-01T12:00:00+00:00"}
      ]
    }

Readers are lenient so that files written by other versions still load:
unknown fields are ignored, a bare JSON array of items is accepted, and the
older "type"/"timestamp" keys are understood.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from clipstash.core.errors import MalformedStateError
from clipstash.history.types import Item, ItemKind, image_preview, text_preview

logger = logging.getLogger(__name__)

# Schema version for future migrations
HISTORY_SCHEMA_VERSION = 1


def serialize_item(item: Item) -> dict[str, Any]:
    """Serialize an Item to a JSON-safe dictionary."""
    return {
        "kind": item.kind.value,
        "content": item.content,
        "preview": item.preview,
        "captured_at": item.captured_at.isoformat(),
    }


def deserialize_item(data: dict[str, Any]) -> Item:
    """Deserialize an Item from a dictionary.

    Raises:
        ValueError: If required fields are missing or have the wrong type.
    """
    if not isinstance(data, dict):
        raise ValueError(f"expected object, got {type(data).__name__}")

    raw_kind = data.get("kind", data.get("type"))
    try:
        kind = ItemKind(raw_kind)
    except ValueError:
        raise ValueError(f"unknown kind: {raw_kind!r}") from None

    content = data.get("content")
    if not isinstance(content, str) or not content:
        raise ValueError("missing content")

    preview = data.get("preview")
    if not isinstance(preview, str) or not preview:
        # Re-derive rather than drop an otherwise good entry
        preview = text_preview(content) if kind == ItemKind.TEXT else image_preview(content)

    return Item(
        kind=kind,
        content=content,
        preview=preview,
        captured_at=_parse_timestamp(data.get("captured_at", data.get("timestamp"))),
    )


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError("missing captured_at")
    # Other writers may use a trailing "Z" for UTC
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def encode_history(items: list[Item] | tuple[Item, ...]) -> str:
    """Encode the full history document."""
    document = {
        "schema_version": HISTORY_SCHEMA_VERSION,
        "items": [serialize_item(item) for item in items],
    }
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def decode_history(text: str) -> list[Item]:
    """Decode a history document, skipping entries that cannot be read.

    Raises:
        MalformedStateError: If the document itself is not valid JSON or does
            not have the shape of a history document.
    """
    if not text.strip():
        return []

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedStateError(f"Invalid JSON in history: {e}") from e
    except RecursionError as e:
        raise MalformedStateError("History nesting exceeds decoder depth") from e

    if isinstance(data, list):
        raw_items = data
    elif isinstance(data, dict):
        raw_items = data.get("items", [])
        if raw_items is None:
            raw_items = []
    else:
        raise MalformedStateError(
            f"Expected object or array in history, got {type(data).__name__}"
        )

    if not isinstance(raw_items, list):
        raise MalformedStateError(
            f"Expected array of items, got {type(raw_items).__name__}"
        )

    items: list[Item] = []
    for index, raw in enumerate(raw_items):
        try:
            items.append(deserialize_item(raw))
        except ValueError as e:
            logger.warning("Skipping malformed history entry %d: %s", index, e)
    return items
