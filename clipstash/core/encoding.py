"""UTF-8 encoding constants and helpers for clipstash."""

import sys

# Encoding constants
ENCODING = "utf-8"
ENCODING_ERRORS = "replace"  # Preserve data, mark corruption


def configure_stdio() -> None:
    """Reconfigure stdin/stdout/stderr to use UTF-8 with replace error handling.

    Called at CLI startup so history previews print the same on every locale.
    """
    for stream in (sys.stdin, sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            stream.reconfigure(encoding=ENCODING, errors=ENCODING_ERRORS)


def decode_clipboard_text(data: bytes) -> str:
    """Decode raw clipboard bytes, replacing undecodable sequences."""
    return data.decode(ENCODING, errors=ENCODING_ERRORS)
