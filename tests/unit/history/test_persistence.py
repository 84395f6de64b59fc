"""Tests for history file encoding and decoding."""

import json
import logging
from datetime import datetime, timedelta, timezone

import pytest

from clipstash.core.errors import MalformedStateError
from clipstash.history.persistence import (
    HISTORY_SCHEMA_VERSION,
    decode_history,
    deserialize_item,
    encode_history,
    serialize_item,
)
from clipstash.history.types import Item, ItemKind

WHEN = datetime(2026, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


class TestSerializeItem:
    def test_fields(self):
        data = serialize_item(Item.text("hello", captured_at=WHEN))
        assert data == {
            "kind": "text",
            "content": "hello",
            "preview": "hello",
            "captured_at": "2026-03-04T05:06:07+00:00",
        }


class TestDeserializeItem:
    """Tests for deserialize_item()."""

    def test_current_format(self):
        item = deserialize_item({
            "kind": "image",
            "content": "/x/img_1.png",
            "preview": "[Image] img_1.png",
            "captured_at": "2026-03-04T05:06:07+00:00",
        })
        assert item.kind == ItemKind.IMAGE
        assert item.captured_at == WHEN

    def test_legacy_keys(self):
        """Files using "type"/"timestamp" still load."""
        item = deserialize_item({
            "type": "text",
            "content": "hi",
            "preview": "hi",
            "timestamp": "2026-03-04T05:06:07Z",
        })
        assert item.kind == ItemKind.TEXT
        assert item.captured_at == WHEN

    def test_nanosecond_offset_timestamp(self):
        """Timestamps with fractional seconds and a non-UTC offset parse."""
        item = deserialize_item({
            "kind": "text",
            "content": "hi",
            "captured_at": "2026-03-04T07:06:07.123456+02:00",
        })
        assert item.captured_at.utcoffset() == timedelta(hours=2)

    def test_naive_timestamp_assumed_utc(self):
        item = deserialize_item({
            "kind": "text",
            "content": "hi",
            "captured_at": "2026-03-04T05:06:07",
        })
        assert item.captured_at == WHEN

    def test_missing_preview_rederived(self):
        item = deserialize_item({
            "kind": "text",
            "content": "a\nb",
            "captured_at": "2026-03-04T05:06:07+00:00",
        })
        assert item.preview == "a b"

    @pytest.mark.parametrize(
        "data",
        [
            ["not", "an", "object"],
            {"kind": "video", "content": "x", "captured_at": "2026-01-01T00:00:00"},
            {"kind": "text", "captured_at": "2026-01-01T00:00:00"},
            {"kind": "text", "content": "", "captured_at": "2026-01-01T00:00:00"},
            {"kind": "text", "content": "x"},
            {"kind": "text", "content": "x", "captured_at": "yesterday"},
        ],
    )
    def test_bad_entries_raise_value_error(self, data):
        with pytest.raises(ValueError):
            deserialize_item(data)


class TestEncodeHistory:
    def test_document_shape(self):
        text = encode_history([Item.text("a", captured_at=WHEN)])
        data = json.loads(text)
        assert data["schema_version"] == HISTORY_SCHEMA_VERSION
        assert [entry["content"] for entry in data["items"]] == ["a"]
        assert text.endswith("\n")

    def test_non_ascii_kept_readable(self):
        text = encode_history([Item.text("héllo ✓", captured_at=WHEN)])
        assert "héllo ✓" in text

    def test_order_preserved(self):
        items = [Item.text(c, captured_at=WHEN) for c in ("c", "b", "a")]
        assert decode_history(encode_history(items)) == items


class TestDecodeHistory:
    """Tests for decode_history()."""

    def test_blank_document_is_empty(self):
        assert decode_history("  \n") == []

    def test_bare_array_accepted(self):
        doc = json.dumps([
            {"kind": "text", "content": "a", "preview": "a", "captured_at": "2026-01-01T00:00:00Z"},
        ])
        assert [item.content for item in decode_history(doc)] == ["a"]

    def test_null_items_is_empty(self):
        assert decode_history('{"schema_version": 1, "items": null}') == []

    def test_invalid_json_raises(self):
        with pytest.raises(MalformedStateError):
            decode_history("{truncated")

    def test_excessive_nesting_raises(self):
        with pytest.raises(MalformedStateError, match="nesting"):
            decode_history("[" * 200000 + "]" * 200000)

    def test_scalar_document_raises(self):
        with pytest.raises(MalformedStateError):
            decode_history("42")

    def test_non_list_items_raises(self):
        with pytest.raises(MalformedStateError):
            decode_history('{"items": {"kind": "text"}}')

    def test_bad_entries_skipped_with_warning(self, caplog):
        doc = json.dumps({"items": [
            {"kind": "text", "content": "good", "captured_at": "2026-01-01T00:00:00Z"},
            {"kind": "text"},
            "garbage",
            {"kind": "text", "content": "also good", "captured_at": "2026-01-01T00:00:00Z"},
        ]})

        with caplog.at_level(logging.WARNING, logger="clipstash"):
            items = decode_history(doc)

        assert [item.content for item in items] == ["good", "also good"]
        assert "Skipping malformed history entry 1" in caplog.text
        assert "Skipping malformed history entry 2" in caplog.text
