"""Utility functions for virt-lease-hosts."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from vmhosts.constants import _LOG_VERBOSE, HOSTS_FILE_MODE


def log(level: str, message: str) -> None:
    """Lightweight structured logging with a coloured level prefix."""
    if level == "DEBUG" and not _LOG_VERBOSE:
        return
    colours = {
        "INFO": "\033[0;34m",
        "WARN": "\033[1;33m",
        "ERROR": "\033[0;31m",
        "SUCCESS": "\033[0;32m",
        "DEBUG": "\033[0;90m",
    }
    colour = colours.get(level, "")
    reset = "\033[0m" if colour else ""
    print(f"{colour}[{level}]{reset} {message}", flush=True)


def write_file_atomic(destination: Path, content: str, mode: int = HOSTS_FILE_MODE) -> None:
    """Replace ``destination`` with ``content`` via a temporary file in the same directory.

    Readers see either the old or the new file, never a partial write.
    """
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        delete=False,
        dir=destination.parent,
        prefix=f".{destination.name}.",
        suffix=".tmp",
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
        except Exception:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise
    try:
        os.chmod(tmp_path, mode)
        tmp_path.replace(destination)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise
