"""Cancellation support for the capture session."""

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CancellationToken:
    """Token for cooperative cancellation of async operations.

    The capture session waits on the token alongside its event sources, so a
    shutdown request (SIGINT/SIGTERM) is just another source that becomes
    ready. Work that is already running is never interrupted.

    Example:
        token = CancellationToken()
        loop.add_signal_handler(signal.SIGINT, token.cancel)

        await capture_loop.run(token)

    cancel() must be called from the thread running the event loop; use
    loop.call_soon_threadsafe(token.cancel) from anywhere else.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation has been requested."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation and notify callbacks."""
        if self._event.is_set():
            return
        self._event.set()
        for callback in self._callbacks:
            self._invoke(callback)

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Register a callback to be called when cancelled.

        If already cancelled, callback is invoked immediately.
        """
        self._callbacks.append(callback)
        if self._event.is_set():
            self._invoke(callback)

    async def wait(self) -> None:
        """Block until cancel() is called."""
        await self._event.wait()

    @staticmethod
    def _invoke(callback: Callable[[], None]) -> None:
        # A failing callback must not prevent cancellation
        try:
            callback()
        except Exception:
            logger.exception("Cancellation callback failed")
