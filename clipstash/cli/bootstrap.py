"""Object graph bootstrap for clipstash.

Builds the store, blob store and services from a Config in one place so the
capture session and the selection mode share the same wiring.

Usage:
    configure_logging(get_logs_dir())
    store = build_store(config)
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from clipstash.capture.backend import SystemClipboardBackend
from clipstash.capture.loop import CaptureLoop
from clipstash.capture.system_clipboard import SystemClipboard
from clipstash.config.schema import Config
from clipstash.core.constants import get_history_path, get_images_dir
from clipstash.core.secure_io import secure_mkdir
from clipstash.history.blobs import ImageBlobStore
from clipstash.history.store import HistoryStore
from clipstash.selection.flow import SelectionFlow
from clipstash.selection.services import RofiPresenter, SystemPaster

logger = logging.getLogger(__name__)

LOG_FILE_NAME = "clipstash.log"


def configure_logging(
    log_dir: Path | None,
    level: int = logging.INFO,
    console_level: int = logging.WARNING,
) -> Path | None:
    """Configure logging for the clipstash namespace.

    Sets up a rotating file handler at `{log_dir}/clipstash.log` (max 5MB per
    file, 3 backups) and a stderr handler. Pass log_dir=None for console-only
    logging (one-shot commands).

    Args:
        log_dir: Directory for the log file. Created if it doesn't exist.
        level: Logging level for file output (default INFO).
        console_level: Logging level for console output (default WARNING).

    Returns:
        Path to the log file, or None when file logging is off.
    """
    app_logger = logging.getLogger("clipstash")
    # Remove any existing handlers to avoid duplicates on reconfigure
    app_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    ))
    app_logger.addHandler(console_handler)

    log_file: Path | None = None
    effective_level = console_level
    if log_dir is not None:
        secure_mkdir(log_dir)
        log_file = log_dir / LOG_FILE_NAME
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        app_logger.addHandler(file_handler)
        effective_level = min(level, console_level)

    app_logger.setLevel(effective_level)
    # Don't propagate to root logger
    app_logger.propagate = False

    if log_file is not None:
        logger.info("Logging configured: %s", log_file)
    return log_file


def build_store(config: Config, history_path: Path | None = None) -> HistoryStore:
    """Create the history store.

    Raises:
        SetupError: If the data directory cannot be created.
    """
    return HistoryStore(
        history_path or get_history_path(),
        max_items=config.history.max_items,
    )


def build_capture_loop(
    config: Config,
    store: HistoryStore,
    images_dir: Path | None = None,
) -> CaptureLoop:
    """Create a capture loop watching the system clipboard.

    Raises:
        ClipboardUnavailable: If no clipboard helper is installed.
    """
    backend = SystemClipboardBackend(
        poll_interval=config.capture.poll_interval,
        image_mime=config.capture.image_mime,
    )
    return CaptureLoop(
        store,
        backend,
        ImageBlobStore(images_dir or get_images_dir()),
        preview_length=config.history.preview_length,
        capture_text=config.capture.capture_text,
        capture_images=config.capture.capture_images,
    )


def build_selection_flow(config: Config, store: HistoryStore) -> SelectionFlow:
    """Create the selection flow backed by rofi, the clipboard helpers and xdotool.

    Raises:
        ClipboardUnavailable: If no clipboard helper is installed.
    """
    selection = config.selection
    presenter = RofiPresenter(
        prompt=selection.prompt,
        message=selection.message,
        theme=selection.theme,
        case_insensitive=selection.case_insensitive,
        show_icons=selection.show_icons,
    )
    paster = SystemPaster(
        SystemClipboard(),
        settle_delay=selection.settle_delay,
        paste_keys=selection.paste_keys,
    )
    return SelectionFlow(store, presenter, paster)
