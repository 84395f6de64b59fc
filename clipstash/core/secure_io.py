"""Secure file I/O utilities for clipstash.

Clipboard history can hold passwords and tokens, so every file and directory
written here is owner-only. Writes of the history file are atomic: a reader
(or a crashed writer) never sees a half-written document.
"""

import os
import stat
from pathlib import Path

# Owner-only directory permissions
SECURE_DIR_MODE: int = stat.S_IRWXU  # 0o700

# Owner read/write only
SECURE_FILE_MODE: int = stat.S_IRUSR | stat.S_IWUSR  # 0o600


def secure_mkdir(path: Path, parents: bool = True) -> None:
    """Create directory with secure permissions (0o700).

    Unlike Path.mkdir(), this ensures the final directory has secure
    permissions even when it already exists. Parents that already exist
    are left alone.

    Args:
        path: Directory path to create.
        parents: If True, create parent directories as needed.
    """
    if parents:
        for parent in reversed(list(path.parents)):
            if not parent.exists():
                parent.mkdir(mode=SECURE_DIR_MODE)
                # Re-apply in case umask interfered
                os.chmod(parent, SECURE_DIR_MODE)

    if not path.exists():
        path.mkdir(mode=SECURE_DIR_MODE)

    os.chmod(path, SECURE_DIR_MODE)


def secure_write_new(path: Path, content: str | bytes) -> None:
    """Atomically create a new file with secure permissions.

    O_CREAT | O_EXCL makes creation fail if the file exists, and the mode is
    applied at creation time rather than after.

    Args:
        path: Path to the file to create.
        content: Content to write (str or bytes).

    Raises:
        FileExistsError: If the file already exists.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    fd = os.open(
        str(path),
        os.O_CREAT | os.O_EXCL | os.O_WRONLY,
        SECURE_FILE_MODE,
    )
    try:
        _write_all(fd, content)
        os.fsync(fd)
    finally:
        os.close(fd)


def secure_write_atomic(path: Path, content: str | bytes) -> None:
    """Write a file (new or existing) via temp file + rename.

    The temp file lives next to the target so os.replace() stays on one
    filesystem. On any failure the temp file is removed and the target is
    left untouched.

    Args:
        path: Path to the file to write.
        content: Content to write (str or bytes).
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    temp_path = path.with_suffix(path.suffix + ".tmp")
    if temp_path.exists():
        # Leftover from a crashed writer
        temp_path.unlink()

    try:
        secure_write_new(temp_path, content)
        os.replace(temp_path, path)
        # Some filesystems do not preserve the mode across replace
        os.chmod(path, SECURE_FILE_MODE)
    except BaseException:
        if temp_path.exists():
            temp_path.unlink()
        raise


def _write_all(fd: int, content: bytes) -> None:
    """os.write() may write less than asked; loop until done."""
    view = memoryview(content)
    while view:
        written = os.write(fd, view)
        view = view[written:]
