"""Clipboard change notification sources.

A backend exposes two independent streams, one per channel. Each stream
yields a payload whenever the clipboard changes on that channel. Backends
make no promise against repeating the current top of history; the store's
dedup rule handles that.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Protocol

from clipstash.capture.system_clipboard import ClipboardCommands, ClipboardUnavailable
from clipstash.core.encoding import decode_clipboard_text
from clipstash.core.process import run_helper

logger = logging.getLogger(__name__)


class ClipboardBackend(Protocol):
    """Source of clipboard change notifications."""

    def watch_text(self) -> AsyncIterator[str]:
        """Yield text payloads as the clipboard changes."""
        ...

    def watch_image(self) -> AsyncIterator[bytes]:
        """Yield image payloads as the clipboard changes."""
        ...


_CLOSED = object()


class QueueBackend:
    """In-process backend fed by push_text()/push_image().

    Used by tests and by callers embedding clipstash in another event source.
    close() ends both streams once already queued payloads are consumed.
    """

    def __init__(self) -> None:
        self._text: asyncio.Queue[object] = asyncio.Queue()
        self._image: asyncio.Queue[object] = asyncio.Queue()

    def push_text(self, payload: str) -> None:
        self._text.put_nowait(payload)

    def push_image(self, payload: bytes) -> None:
        self._image.put_nowait(payload)

    def close(self) -> None:
        self._text.put_nowait(_CLOSED)
        self._image.put_nowait(_CLOSED)

    async def watch_text(self) -> AsyncIterator[str]:
        async for payload in self._drain(self._text):
            yield payload  # type: ignore[misc]

    async def watch_image(self) -> AsyncIterator[bytes]:
        async for payload in self._drain(self._image):
            yield payload  # type: ignore[misc]

    @staticmethod
    async def _drain(queue: asyncio.Queue[object]) -> AsyncIterator[object]:
        while True:
            payload = await queue.get()
            if payload is _CLOSED:
                return
            yield payload


class SystemClipboardBackend:
    """Backend that polls the platform clipboard helpers.

    Each channel remembers a digest of the last payload it saw and yields only
    when that changes. The clipboard content present at startup seeds the
    state and is not reported. A failed read (empty clipboard, or the
    clipboard holding the other channel's type) counts as "no content", so
    copying the same text again after an image is reported again.
    """

    def __init__(
        self,
        poll_interval: float = 0.5,
        image_mime: str = "image/png",
        commands: ClipboardCommands | None = None,
    ) -> None:
        """Initialize backend.

        Raises:
            ClipboardUnavailable: If no helper can read the clipboard.
        """
        self._poll_interval = poll_interval
        self._commands = commands or ClipboardCommands.discover(image_mime)
        if not self._commands.read_text and not self._commands.read_image:
            raise ClipboardUnavailable(
                "clipboard helpers missing; install wl-clipboard or xclip"
            )

    async def watch_text(self) -> AsyncIterator[str]:
        argv = self._commands.read_text
        if not argv:
            logger.warning("No text clipboard helper; text capture disabled")
            return
        async for data in self._poll(lambda: self._read(argv)):
            yield decode_clipboard_text(data)

    async def watch_image(self) -> AsyncIterator[bytes]:
        argv = self._commands.read_image
        if not argv:
            logger.warning("No image clipboard helper; image capture disabled")
            return
        async for data in self._poll(lambda: self._read(argv)):
            yield data

    async def _poll(self, read: Callable[[], Awaitable[bytes | None]]) -> AsyncIterator[bytes]:
        last: str | None = None
        seeded = False
        while True:
            data = await read()
            digest = hashlib.blake2b(data).hexdigest() if data else None
            if seeded and digest is not None and digest != last:
                yield data  # type: ignore[misc]
            last = digest
            seeded = True
            await asyncio.sleep(self._poll_interval)

    async def _read(self, argv: list[str]) -> bytes | None:
        try:
            result = await run_helper(argv)
        except TimeoutError:
            return None
        except OSError as e:
            logger.warning("Clipboard helper %s failed to start: %s", argv[0], e)
            return None
        if not result.ok:
            return None
        return result.stdout or None
