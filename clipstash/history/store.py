"""HistoryStore - bounded, deduplicated, durable clipboard history."""
from __future__ import annotations

import logging
from pathlib import Path

from clipstash.core.constants import DEFAULT_MAX_ITEMS
from clipstash.core.errors import MalformedStateError, PersistenceError, SetupError
from clipstash.core.rwlock import ReadWriteLock
from clipstash.core.secure_io import secure_mkdir, secure_write_atomic
from clipstash.history.blobs import remove_blob
from clipstash.history.persistence import decode_history, encode_history
from clipstash.history.types import Item, ItemKind, is_blank

logger = logging.getLogger(__name__)


class HistoryStore:
    """Most-recent-first log of clipboard items backed by a JSON file.

    Thread-safe: add() holds the write lock across mutate + persist, so adds
    never interleave; snapshot() takes the read lock and returns a copy.

    A write failure in add() is reported as PersistenceError but the
    in-memory change is kept. Memory stays authoritative and the next
    successful add() rewrites the whole file.
    """

    def __init__(self, history_path: Path, max_items: int = DEFAULT_MAX_ITEMS) -> None:
        """Initialize store and load existing history.

        Args:
            history_path: Path of the durable history file.
            max_items: Capacity; entries beyond it are evicted oldest-first.

        Raises:
            ValueError: If max_items is less than 1.
            SetupError: If the directory holding the history cannot be created.
        """
        if max_items < 1:
            raise ValueError(f"max_items must be >= 1, got {max_items}")

        self._path = history_path
        self._max_items = max_items
        self._items: list[Item] = []
        self._deferred_release: list[Item] = []
        self._lock = ReadWriteLock()

        try:
            secure_mkdir(self._path.parent)
        except OSError as e:
            raise SetupError(
                f"Cannot create history directory {self._path.parent}: {e}"
            ) from e

        self._load()

    @property
    def path(self) -> Path:
        """Get the history file path."""
        return self._path

    @property
    def max_items(self) -> int:
        return self._max_items

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._items)

    # --- Core Operations ---

    def add(self, item: Item) -> bool:
        """Insert item at the front of the history.

        Args:
            item: The item to record.

        Returns:
            True if the item was inserted, False if it duplicates the current
            most recent item (nothing changed, nothing written).

        Raises:
            ValueError: If item is a TEXT item with blank content. Nothing
                changes in that case.
            PersistenceError: If the history file could not be written. The
                insert and any eviction have already happened in memory.
        """
        if item.kind == ItemKind.TEXT and is_blank(item.content):
            raise ValueError("Refusing to store blank text")
        if not item.content:
            raise ValueError(f"Refusing to store {item.kind.value} item without content")

        with self._lock.write_locked():
            # Only the immediate predecessor is compared
            if self._items and self._items[0].same_content(item):
                logger.debug("Ignoring duplicate %s item", item.kind.value)
                return False

            self._items.insert(0, item)
            self._release_blobs(self._evict_overflow())
            self._persist()
            if self._deferred_release:
                # Only now does the file stop listing entries trimmed at load
                self._release_blobs(self._deferred_release)
                self._deferred_release = []
            return True

    def snapshot(self) -> tuple[Item, ...]:
        """Return an immutable copy of the history, most recent first."""
        with self._lock.read_locked():
            return tuple(self._items)

    # --- Internals (caller holds the write lock, or is __init__) ---

    def _evict_overflow(self) -> list[Item]:
        """Drop entries beyond capacity, oldest first."""
        if len(self._items) <= self._max_items:
            return []

        evicted = self._items[self._max_items:]
        del self._items[self._max_items:]
        for old in evicted:
            logger.debug("Evicted %s item captured at %s", old.kind.value, old.captured_at)
        return evicted

    def _release_blobs(self, evicted: list[Item]) -> None:
        """Delete the image files of evicted entries, best-effort."""
        for old in evicted:
            if old.kind == ItemKind.IMAGE:
                # Failure is logged by remove_blob and never fails the add
                remove_blob(old.content)

    def _load(self) -> None:
        """Read the history file; start empty if it is missing or malformed."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No history at %s, starting empty", self._path)
            return
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read history %s, starting empty: %s", self._path, e)
            return

        try:
            items = decode_history(text)
        except MalformedStateError as e:
            logger.warning("Discarding malformed history %s: %s", self._path, e.message)
            return

        with self._lock.write_locked():
            self._items = items
            # The file still lists these; their blobs go when the file stops
            # referencing them, at the next accepted add().
            self._deferred_release = self._evict_overflow()
        if self._deferred_release:
            logger.info(
                "Loaded history exceeds capacity %d, dropped %d entries",
                self._max_items,
                len(self._deferred_release),
            )
        logger.debug("Loaded %d history items from %s", len(self._items), self._path)

    def _persist(self) -> None:
        """Overwrite the history file with the current sequence."""
        try:
            # A lone surrogate is written as its JSON \uXXXX escape
            payload = encode_history(self._items).encode("utf-8", errors="backslashreplace")
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to serialize history: {e}") from e

        try:
            secure_write_atomic(self._path, payload)
        except OSError as e:
            raise PersistenceError(f"Failed to write history {self._path}: {e}") from e
