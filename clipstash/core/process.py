"""Async helpers for short-lived external processes.

Clipboard helpers (wl-paste, xclip, xsel) are invoked many times per second
by the watchers, so every call is bounded by a timeout and a stuck helper is
torn down: SIGTERM -> wait -> SIGKILL.
"""

import asyncio
import logging
from asyncio.subprocess import Process
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

GRACEFUL_TIMEOUT: float = 1.0
HELPER_TIMEOUT: float = 2.0


@dataclass(frozen=True)
class HelperResult:
    """Outcome of one helper invocation."""

    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_helper(
    argv: Sequence[str],
    input: bytes | None = None,
    timeout: float = HELPER_TIMEOUT,
) -> HelperResult:
    """Run a helper to completion and capture its output.

    Args:
        argv: Command and arguments.
        input: Bytes fed to stdin, or None for no stdin.
        timeout: Seconds to wait before the helper is terminated.

    Returns:
        HelperResult with the exit status and captured streams.

    Raises:
        FileNotFoundError: If the helper binary does not exist.
        TimeoutError: If the helper did not finish within timeout.
    """
    process = await asyncio.create_subprocess_exec(
        *argv,
        stdin=asyncio.subprocess.PIPE if input is not None else asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(
            process.communicate(input), timeout=timeout
        )
    except TimeoutError:
        logger.debug("Helper %s timed out after %.1fs", argv[0], timeout)
        await terminate_process(process)
        raise
    except asyncio.CancelledError:
        await terminate_process(process)
        raise

    return HelperResult(
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=stdout,
        stderr=stderr,
    )


async def terminate_process(
    process: Process,
    graceful_timeout: float = GRACEFUL_TIMEOUT,
) -> None:
    """Terminate a helper, escalating to SIGKILL if it ignores SIGTERM."""
    if process.returncode is not None:
        return

    try:
        process.terminate()
    except ProcessLookupError:
        return

    try:
        await asyncio.wait_for(process.wait(), timeout=graceful_timeout)
        return
    except TimeoutError:
        pass

    try:
        process.kill()
        logger.debug("Sent SIGKILL to helper %d", process.pid)
    except ProcessLookupError:
        return

    await process.wait()
