"""Clipboard capture: notification backends and the capture loop."""
from clipstash.capture.backend import ClipboardBackend, QueueBackend, SystemClipboardBackend
from clipstash.capture.loop import CaptureLoop, CaptureStats, Channel, Outcome
from clipstash.capture.system_clipboard import (
    ClipboardCommands,
    ClipboardUnavailable,
    SystemClipboard,
)

__all__ = [
    "CaptureLoop",
    "CaptureStats",
    "Channel",
    "ClipboardBackend",
    "ClipboardCommands",
    "ClipboardUnavailable",
    "Outcome",
    "QueueBackend",
    "SystemClipboard",
    "SystemClipboardBackend",
]
