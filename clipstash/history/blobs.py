"""Image blob files referenced by IMAGE history items."""
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from clipstash.core.errors import CaptureError
from clipstash.core.secure_io import secure_mkdir, secure_write_new

logger = logging.getLogger(__name__)

# Collisions need two captures in the same nanosecond; a few retries is plenty
MAX_NAME_ATTEMPTS = 100


class ImageBlobStore:
    """Writes image payloads to uniquely named files under one directory."""

    def __init__(
        self,
        images_dir: Path,
        suffix: str = ".png",
        clock_ns: Callable[[], int] = time.time_ns,
    ) -> None:
        """Initialize blob store.

        Args:
            images_dir: Directory holding the blobs (created on first save).
            suffix: File extension for new blobs.
            clock_ns: Nanosecond clock used to name files (override for tests).
        """
        self._images_dir = images_dir
        self._suffix = suffix
        self._clock_ns = clock_ns

    @property
    def images_dir(self) -> Path:
        return self._images_dir

    def save(self, data: bytes) -> Path:
        """Write data to a fresh file and return its path.

        Raises:
            CaptureError: If the payload is empty or the file cannot be written.
        """
        if not data:
            raise CaptureError("Empty image payload")

        try:
            secure_mkdir(self._images_dir)
        except OSError as e:
            raise CaptureError(f"Cannot create image directory {self._images_dir}: {e}") from e

        stamp = self._clock_ns()
        for attempt in range(MAX_NAME_ATTEMPTS):
            name = f"img_{stamp}{self._suffix}" if attempt == 0 else f"img_{stamp}_{attempt}{self._suffix}"
            path = self._images_dir / name
            try:
                secure_write_new(path, data)
            except FileExistsError:
                continue
            except OSError as e:
                # A partial file would be an orphan nobody references
                remove_blob(path)
                raise CaptureError(f"Failed to write image {path}: {e}") from e
            logger.debug("Saved image blob %s (%d bytes)", path, len(data))
            return path

        raise CaptureError(f"No free file name for image captured at {stamp}")

    def delete(self, path: Path | str) -> bool:
        """Best-effort removal of a blob this store wrote."""
        return remove_blob(path)


def remove_blob(path: Path | str) -> bool:
    """Delete a blob file, logging instead of raising.

    Returns:
        True if the file is gone afterwards (including "was already gone").
    """
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Failed to delete image blob %s: %s", path, e)
        return False
    logger.debug("Deleted image blob %s", path)
    return True
