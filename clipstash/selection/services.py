"""External services used by the selection flow.

Both services are thin wrappers around helper programs: rofi shows the menu,
the clipboard helpers plus xdotool perform the paste. Neither retries; a
failure is reported to the caller as ExternalServiceError.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from clipstash.capture.system_clipboard import SystemClipboard
from clipstash.core.constants import get_default_rofi_theme
from clipstash.core.errors import ExternalServiceError
from clipstash.history.types import Item, ItemKind

logger = logging.getLogger(__name__)

# rofi exits with 1 when the user dismisses the menu (Escape)
ROFI_CANCELLED = 1


@dataclass(frozen=True)
class Choice:
    """One menu row: a label and an optional icon path."""

    label: str
    icon: str | None = None


class Presenter(Protocol):
    """Shows choices and returns the picked index, or None."""

    def choose(self, choices: Sequence[Choice]) -> int | None: ...


class Paster(Protocol):
    """Pastes an item into the focused window."""

    def paste(self, item: Item) -> None: ...


class RofiPresenter:
    """Presents choices with `rofi -dmenu`."""

    def __init__(
        self,
        prompt: str = "Clipboard",
        message: str | None = "<b>History</b>",
        theme: str | None = None,
        case_insensitive: bool = True,
        show_icons: bool = True,
        binary: str = "rofi",
    ) -> None:
        self._prompt = prompt
        self._message = message
        self._theme = theme
        self._case_insensitive = case_insensitive
        self._show_icons = show_icons
        self._binary = binary

    def build_args(self) -> list[str]:
        """Command line for one menu invocation."""
        args = [self._binary, "-dmenu", "-p", self._prompt, "-format", "i"]
        if self._case_insensitive:
            args.append("-i")
        if self._show_icons:
            args.append("-show-icons")
        if self._message:
            args += ["-mesg", self._message]
        theme = self._resolve_theme()
        if theme:
            args += ["-theme", theme]
        return args

    def _resolve_theme(self) -> str | None:
        if self._theme:
            return self._theme
        fallback = get_default_rofi_theme()
        if fallback.is_file():
            return str(fallback)
        return None

    @staticmethod
    def encode_rows(choices: Sequence[Choice]) -> str:
        """Serialize rows in dmenu format, with rofi's icon row option."""
        lines = []
        for choice in choices:
            # Previews are single-line already; guard against old entries
            line = choice.label.replace("\n", " ")
            if choice.icon:
                line += f"\0icon\x1f{choice.icon}"
            lines.append(line)
        return "\n".join(lines) + "\n"

    def choose(self, choices: Sequence[Choice]) -> int | None:
        """Show the menu.

        Returns:
            The selected index, or None if the user cancelled or the output
            could not be understood.

        Raises:
            ExternalServiceError: If rofi is missing or fails.
        """
        if not choices:
            return None

        try:
            result = subprocess.run(
                self.build_args(),
                input=self.encode_rows(choices),
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise ExternalServiceError("rofi", f"{self._binary} not found") from e
        except OSError as e:
            raise ExternalServiceError("rofi", str(e)) from e

        if result.returncode == ROFI_CANCELLED:
            logger.debug("Menu dismissed")
            return None
        if result.returncode != 0:
            raise ExternalServiceError(
                "rofi", f"exited with {result.returncode}: {result.stderr.strip()}"
            )

        try:
            index = int(result.stdout.strip())
        except ValueError:
            logger.debug("Unrecognized menu output: %r", result.stdout)
            return None
        return index


class SystemPaster:
    """Loads an item into the clipboard, then sends a paste keystroke."""

    def __init__(
        self,
        clipboard: SystemClipboard,
        settle_delay: float = 0.15,
        paste_keys: str = "ctrl+v",
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize paster.

        Args:
            clipboard: Clipboard writer.
            settle_delay: Seconds to let focus return to the target window.
            paste_keys: xdotool key sequence that pastes.
            sleep: Sleep function (override for tests).
        """
        self._clipboard = clipboard
        self._settle_delay = settle_delay
        self._paste_keys = paste_keys
        self._sleep = sleep

    def paste(self, item: Item) -> None:
        """Paste item into the focused window.

        Raises:
            ExternalServiceError: If loading the clipboard or the keystroke fails.
        """
        if item.kind == ItemKind.TEXT:
            self._clipboard.write_text(item.content)
        else:
            self._clipboard.write_image(Path(item.content))

        self._sleep(self._settle_delay)

        try:
            subprocess.run(
                ["xdotool", "key", self._paste_keys],
                check=True,
                capture_output=True,
            )
        except FileNotFoundError as e:
            raise ExternalServiceError("xdotool", "xdotool not found") from e
        except subprocess.CalledProcessError as e:
            raise ExternalServiceError("xdotool", f"exited with {e.returncode}") from e
