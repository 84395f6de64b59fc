"""System clipboard helpers (Wayland and X11).

The clipboard is reached through whichever command-line helper is installed:
wl-paste/wl-copy on Wayland, xclip or xsel on X11. Discovery happens once,
at construction.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from clipstash.core.errors import CaptureError, ExternalServiceError

SERVICE_NAME = "clipboard"


class ClipboardUnavailable(CaptureError):
    """No usable clipboard helper is installed."""


_TEXT_READERS: Sequence[tuple[str, Sequence[str]]] = (
    ("wl-paste", ("wl-paste", "--no-newline", "--type", "text")),
    ("xclip", ("xclip", "-selection", "clipboard", "-o")),
    ("xsel", ("xsel", "--clipboard", "--output")),
)
_TEXT_WRITERS: Sequence[tuple[str, Sequence[str]]] = (
    ("wl-copy", ("wl-copy",)),
    ("xclip", ("xclip", "-selection", "clipboard", "-in")),
    ("xsel", ("xsel", "--clipboard", "--input")),
)
# "{mime}" is replaced with the configured image MIME type
_IMAGE_READERS: Sequence[tuple[str, Sequence[str]]] = (
    ("wl-paste", ("wl-paste", "--type", "{mime}")),
    ("xclip", ("xclip", "-selection", "clipboard", "-t", "{mime}", "-o")),
)
_IMAGE_WRITERS: Sequence[tuple[str, Sequence[str]]] = (
    ("wl-copy", ("wl-copy", "--type", "{mime}")),
    ("xclip", ("xclip", "-selection", "clipboard", "-t", "{mime}", "-in")),
)


def _find_command(
    candidates: Sequence[tuple[str, Sequence[str]]], mime: str = ""
) -> list[str] | None:
    for name, cmd in candidates:
        if shutil.which(name):
            return [part.replace("{mime}", mime) for part in cmd]
    return None


@dataclass(frozen=True)
class ClipboardCommands:
    """Resolved helper command lines; None where no helper was found."""

    read_text: list[str] | None
    write_text: list[str] | None
    read_image: list[str] | None
    write_image: list[str] | None

    @classmethod
    def discover(cls, image_mime: str = "image/png") -> ClipboardCommands:
        return cls(
            read_text=_find_command(_TEXT_READERS),
            write_text=_find_command(_TEXT_WRITERS),
            read_image=_find_command(_IMAGE_READERS, image_mime),
            write_image=_find_command(_IMAGE_WRITERS, image_mime),
        )


class SystemClipboard:
    """Adapter that writes to the system clipboard for the paste step."""

    def __init__(self, commands: ClipboardCommands | None = None) -> None:
        self._commands = commands or ClipboardCommands.discover()
        if not self._commands.write_text:
            raise ClipboardUnavailable(
                "clipboard helpers missing; install wl-clipboard, xclip, or xsel"
            )

    def write_text(self, value: str) -> None:
        """Load text into the clipboard.

        Raises:
            ExternalServiceError: If the helper fails.
        """
        self._run(self._commands.write_text, value.encode("utf-8"))

    def write_image(self, path: Path | str) -> None:
        """Load an image file into the clipboard.

        Raises:
            ExternalServiceError: If the file cannot be read, no image helper
                is installed, or the helper fails.
        """
        if not self._commands.write_image:
            raise ExternalServiceError(SERVICE_NAME, "no helper can write images")
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise ExternalServiceError(SERVICE_NAME, f"cannot read image {path}: {e}") from e
        self._run(self._commands.write_image, data)

    def _run(self, argv: list[str] | None, data: bytes) -> None:
        if not argv:
            raise ExternalServiceError(SERVICE_NAME, "no helper available")
        # xclip and wl-copy fork a child that keeps serving the selection;
        # capturing its output would block until that child exits.
        try:
            subprocess.run(
                argv,
                input=data,
                check=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=5,
            )
        except FileNotFoundError as e:
            raise ExternalServiceError(SERVICE_NAME, f"{argv[0]} not found") from e
        except subprocess.TimeoutExpired as e:
            raise ExternalServiceError(SERVICE_NAME, f"{argv[0]} timed out") from e
        except subprocess.CalledProcessError as e:
            raise ExternalServiceError(
                SERVICE_NAME, f"{argv[0]} exited with {e.returncode}"
            ) from e
