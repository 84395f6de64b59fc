"""Unit tests for cancellation support."""

import asyncio
import logging

import pytest

from clipstash.core.cancel import CancellationToken


class TestCancellationToken:
    """Tests for CancellationToken."""

    @pytest.mark.asyncio
    async def test_not_cancelled_initially(self):
        """Token is not cancelled when created."""
        token = CancellationToken()
        assert token.is_cancelled is False

    @pytest.mark.asyncio
    async def test_cancel_sets_is_cancelled(self):
        """cancel() sets is_cancelled to True."""
        token = CancellationToken()
        token.cancel()
        assert token.is_cancelled is True

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent(self):
        """Calling cancel() multiple times runs callbacks once."""
        token = CancellationToken()
        called = []
        token.on_cancel(lambda: called.append(True))

        token.cancel()
        token.cancel()

        assert token.is_cancelled is True
        assert called == [True]

    @pytest.mark.asyncio
    async def test_on_cancel_callback_called_immediately_if_already_cancelled(self):
        """on_cancel() callback invoked immediately if token already cancelled."""
        token = CancellationToken()
        token.cancel()

        called = []
        token.on_cancel(lambda: called.append(True))
        assert len(called) == 1

    @pytest.mark.asyncio
    async def test_multiple_callbacks(self):
        """Multiple callbacks are all invoked in registration order."""
        token = CancellationToken()
        results = []
        token.on_cancel(lambda: results.append(1))
        token.on_cancel(lambda: results.append(2))

        token.cancel()
        assert results == [1, 2]

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_block_others(self, caplog):
        """A raising callback is logged and later callbacks still run."""
        token = CancellationToken()
        results = []

        def boom():
            raise RuntimeError("boom")

        token.on_cancel(boom)
        token.on_cancel(lambda: results.append("after"))

        with caplog.at_level(logging.ERROR, logger="clipstash"):
            token.cancel()

        assert token.is_cancelled is True
        assert results == ["after"]
        assert "Cancellation callback failed" in caplog.text

    @pytest.mark.asyncio
    async def test_wait_returns_after_cancel(self):
        """wait() unblocks once cancel() is called."""
        token = CancellationToken()
        waiter = asyncio.ensure_future(token.wait())
        await asyncio.sleep(0)
        assert not waiter.done()

        token.cancel()
        await asyncio.wait_for(waiter, timeout=1.0)
        assert waiter.done()
