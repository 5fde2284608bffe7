"""Filesystem helpers used while installing Composer."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

PathLike = Union[str, "os.PathLike[str]"]


def check_write_permission(directory: PathLike) -> None:
    """Make sure ``directory`` exists and that a file can be created in it.

    Raises ``OSError`` if the directory cannot be created or written to.
    """
    try:
        os.makedirs(directory, mode=0o755, exist_ok=True)
    except OSError as exc:
        raise OSError(f"cannot create directory {directory}: {exc}") from exc

    probe = Path(directory) / f".write-test-{os.getpid()}"
    try:
        with open(probe, "w", encoding="utf-8"):
            pass
    except OSError as exc:
        raise OSError(f"directory {directory} is not writable: {exc}") from exc
    try:
        probe.unlink()
    except OSError:
        pass


def ensure_directory_exists(directory: PathLike) -> None:
    """Create ``directory`` (and its parents) unless it already exists."""
    if not os.path.exists(directory):
        os.makedirs(directory, mode=0o755, exist_ok=True)


def create_file_with_content(
    file_path: PathLike, content: Union[bytes, str], mode: int = 0o644
) -> None:
    """Write ``content`` to ``file_path``, creating parent directories as needed.

    ``mode`` is applied when the file is newly created.
    """
    parent = os.path.dirname(os.fspath(file_path)) or "."
    try:
        ensure_directory_exists(parent)
    except OSError as exc:
        raise OSError(f"cannot ensure directory {parent} exists: {exc}") from exc

    data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
    fd = os.open(file_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)