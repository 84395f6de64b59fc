"""Pydantic models for clipstash configuration validation."""

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from clipstash.core.constants import DEFAULT_MAX_ITEMS, DEFAULT_PREVIEW_LENGTH


class HistoryConfig(BaseModel):
    """History store configuration.

    Example in config.json:
        "history": {"max_items": 50, "preview_length": 80}
    """

    model_config = ConfigDict(extra="forbid")

    max_items: int = Field(default=DEFAULT_MAX_ITEMS, ge=1, le=10000)
    """Capacity of the history. Older entries are evicted beyond this."""

    preview_length: int = Field(default=DEFAULT_PREVIEW_LENGTH, ge=8, le=500)
    """Characters of flattened text kept in a preview before truncation."""


class CaptureConfig(BaseModel):
    """Capture session configuration."""

    model_config = ConfigDict(extra="forbid")

    poll_interval: float = Field(default=0.5, gt=0, le=60)
    """Seconds between clipboard polls."""

    capture_text: bool = True
    """Watch the text channel."""

    capture_images: bool = True
    """Watch the image channel."""

    image_mime: str = "image/png"
    """MIME target requested from the clipboard for images."""

    @model_validator(mode="after")
    def validate_channels(self) -> "CaptureConfig":
        """Ensure at least one clipboard channel is watched."""
        if not (self.capture_text or self.capture_images):
            raise ValueError(
                "CaptureConfig: capture_text and capture_images cannot both be false"
            )
        return self


class SelectionConfig(BaseModel):
    """Selection menu and paste configuration."""

    model_config = ConfigDict(extra="forbid")

    prompt: str = "Clipboard"
    """Prompt shown by the menu."""

    message: str | None = "<b>History</b>"
    """Pango markup banner shown above the entries (None to hide)."""

    theme: str | None = None
    """Path to a rofi theme. None falls back to ~/.config/rofi/clipstash.rasi
    when it exists, else rofi's own default."""

    case_insensitive: bool = True
    """Case-insensitive filtering in the menu."""

    show_icons: bool = True
    """Show image thumbnails next to image entries."""

    settle_delay: float = Field(default=0.15, ge=0, le=5)
    """Seconds to wait for focus to return before sending the paste keystroke."""

    paste_keys: str = "ctrl+v"
    """xdotool key sequence that triggers a paste."""

    @field_validator("theme", mode="before")
    @classmethod
    def expand_theme(cls, v: str | None) -> str | None:
        """Expand ~ in the theme path."""
        if v is None:
            return None
        return os.path.expanduser(v)


class Config(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    history: HistoryConfig = HistoryConfig()
    capture: CaptureConfig = CaptureConfig()
    selection: SelectionConfig = SelectionConfig()
