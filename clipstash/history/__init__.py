"""Clipboard history: items, persistence and the bounded store."""
from clipstash.history.blobs import ImageBlobStore, remove_blob
from clipstash.history.persistence import (
    HISTORY_SCHEMA_VERSION,
    decode_history,
    deserialize_item,
    encode_history,
    serialize_item,
)
from clipstash.history.store import HistoryStore
from clipstash.history.types import Item, ItemKind, image_preview, is_blank, text_preview

__all__ = [
    "HISTORY_SCHEMA_VERSION",
    "HistoryStore",
    "ImageBlobStore",
    "Item",
    "ItemKind",
    "decode_history",
    "deserialize_item",
    "encode_history",
    "image_preview",
    "is_blank",
    "remove_blob",
    "serialize_item",
    "text_preview",
]
