"""Capture loop: turns clipboard notifications into history entries.

The loop waits on three sources at once: the text stream, the image stream
and the cancellation token. It handles exactly one event at a time. While an
event is being stored (the store call runs in a worker thread), the backend
streams keep running, so nothing is lost while the history file is written.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from clipstash.capture.backend import ClipboardBackend
from clipstash.core.cancel import CancellationToken
from clipstash.core.constants import DEFAULT_PREVIEW_LENGTH
from clipstash.core.errors import CaptureError, PersistenceError
from clipstash.history.blobs import ImageBlobStore
from clipstash.history.store import HistoryStore
from clipstash.history.types import Item, is_blank

logger = logging.getLogger(__name__)


class Channel(Enum):
    """Where an event came from."""

    TEXT = "text"
    IMAGE = "image"
    CANCEL = "cancel"


class Outcome(Enum):
    """What happened to one clipboard event."""

    CAPTURED = "captured"
    DUPLICATE = "duplicate"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class CaptureStats:
    """Per-session counters, mostly for logging and tests."""

    captured: int = 0
    duplicates: int = 0
    skipped: int = 0
    failed: int = 0

    def record(self, outcome: Outcome) -> None:
        if outcome == Outcome.CAPTURED:
            self.captured += 1
        elif outcome == Outcome.DUPLICATE:
            self.duplicates += 1
        elif outcome == Outcome.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CaptureLoop:
    """Feeds clipboard changes from a backend into a HistoryStore."""

    def __init__(
        self,
        store: HistoryStore,
        backend: ClipboardBackend,
        blobs: ImageBlobStore,
        *,
        preview_length: int = DEFAULT_PREVIEW_LENGTH,
        capture_text: bool = True,
        capture_images: bool = True,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._backend = backend
        self._blobs = blobs
        self._preview_length = preview_length
        self._capture_text = capture_text
        self._capture_images = capture_images
        self._clock = clock

    async def run(self, cancel: CancellationToken) -> CaptureStats:
        """Process clipboard events until cancelled or both streams end.

        Returns:
            Counters for this session.
        """
        stats = CaptureStats()
        streams: dict[Channel, AsyncIterator[Any]] = {}
        if self._capture_text:
            streams[Channel.TEXT] = aiter(self._backend.watch_text())
        if self._capture_images:
            streams[Channel.IMAGE] = aiter(self._backend.watch_image())
        if not streams:
            logger.warning("Both capture channels are disabled, nothing to watch")

        pending: dict[asyncio.Task[Any], Channel] = {
            asyncio.ensure_future(anext(stream)): channel
            for channel, stream in streams.items()
        }
        cancel_task = asyncio.ensure_future(cancel.wait())
        pending[cancel_task] = Channel.CANCEL

        logger.info("Listening for clipboard events on: %s", ", ".join(c.value for c in streams))
        try:
            while not cancel.is_cancelled and len(pending) > 1:
                done, _ = await asyncio.wait(pending.keys(), return_when=asyncio.FIRST_COMPLETED)

                ready = list(done)
                # No fixed priority between channels
                random.shuffle(ready)
                for task in ready:
                    channel = pending.pop(task)
                    if channel == Channel.CANCEL or cancel.is_cancelled:
                        # Already-fetched payloads are dropped, not processed
                        if channel != Channel.CANCEL:
                            pending[task] = channel
                        break

                    try:
                        payload = task.result()
                    except StopAsyncIteration:
                        logger.info("%s stream ended", channel.value.capitalize())
                        continue
                    except Exception:
                        logger.exception("%s stream failed; no longer watching it", channel.value)
                        continue

                    outcome = await self._process(channel, payload)
                    stats.record(outcome)
                    pending[asyncio.ensure_future(anext(streams[channel]))] = channel
        finally:
            await self._shutdown(pending, streams)

        logger.info(
            "Capture stopped: %d captured, %d duplicates, %d skipped, %d failed",
            stats.captured,
            stats.duplicates,
            stats.skipped,
            stats.failed,
        )
        return stats

    async def _process(self, channel: Channel, payload: Any) -> Outcome:
        """Handle one event. Never raises."""
        try:
            if channel == Channel.TEXT:
                return await self.handle_text(payload)
            return await self.handle_image(payload)
        except Exception:
            logger.exception("Unexpected error handling %s event", channel.value)
            return Outcome.FAILED

    async def handle_text(self, payload: str) -> Outcome:
        """Store a text payload unless it is blank."""
        if is_blank(payload):
            logger.debug("Skipping blank text event")
            return Outcome.SKIPPED

        item = Item.text(
            payload,
            preview_length=self._preview_length,
            captured_at=self._clock(),
        )
        try:
            added = await asyncio.to_thread(self._store.add, item)
        except PersistenceError as e:
            logger.error("Error adding text item: %s", e.message)
            return Outcome.FAILED

        if not added:
            return Outcome.DUPLICATE
        logger.info("Captured text")
        return Outcome.CAPTURED

    async def handle_image(self, payload: bytes) -> Outcome:
        """Save an image payload as a blob and store a reference to it.

        The blob belongs to this loop until the store accepts the item. If
        the store declines it (duplicate or invalid), the blob is deleted
        here. On PersistenceError the item is already in memory, so the
        store owns the blob and it is kept.
        """
        try:
            path = await asyncio.to_thread(self._blobs.save, payload)
        except CaptureError as e:
            logger.error("Error saving image: %s", e.message)
            return Outcome.FAILED

        item = Item.image(path, captured_at=self._clock())
        try:
            added = await asyncio.to_thread(self._store.add, item)
        except PersistenceError as e:
            logger.error("Error adding image item: %s", e.message)
            return Outcome.FAILED
        except Exception:
            self._discard_blob(path)
            raise

        if not added:
            self._discard_blob(path)
            return Outcome.DUPLICATE
        logger.info("Captured image %s", path.name)
        return Outcome.CAPTURED

    def _discard_blob(self, path: Path) -> None:
        logger.debug("Store did not take %s; removing it", path)
        self._blobs.delete(path)

    async def _shutdown(
        self,
        pending: dict[asyncio.Task[Any], Channel],
        streams: dict[Channel, AsyncIterator[Any]],
    ) -> None:
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        for stream in streams.values():
            aclose = getattr(stream, "aclose", None)
            if aclose is None:
                continue
            try:
                await aclose()
            except RuntimeError:
                # Generator is still running elsewhere; nothing more to do
                pass
