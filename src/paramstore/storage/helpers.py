"""Helper functions for whole-file writes."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path

from paramstore.storage.errors import StorageError, StoragePermissionError

logger = logging.getLogger(__name__)


def atomic_write(path: Path, content: bytes | str) -> None:
    """Write a file atomically (temp file in the same directory, then rename).

    The target is never left partially written: readers see either the old
    content or the new one.

    Args:
        path: Destination path (parent directories are created)
        content: Content to write; strings are encoded as UTF-8

    Raises:
        StoragePermissionError: If write permission denied
        StorageError: If operation fails
    """
    content_bytes = content.encode("utf-8") if isinstance(content, str) else content

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        raise StoragePermissionError(
            f"Cannot create directory {path.parent}: permission denied"
        ) from e
    except OSError as e:
        raise StorageError(f"Failed to create directory {path.parent}: {e}") from e

    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            delete=False,
            prefix=f".{path.name}.",
            suffix=".tmp",
        ) as tmp_file:
            tmp_path = Path(tmp_file.name)
            tmp_file.write(content_bytes)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

        tmp_path.replace(path)
        logger.debug(f"Saved {len(content_bytes)} bytes to {path}")

    except PermissionError as e:
        raise StoragePermissionError(f"Cannot write to {path}: permission denied") from e
    except OSError as e:
        raise StorageError(f"Failed to write {path}: {e}") from e
    finally:
        # rename did not happen
        if tmp_path is not None and tmp_path.exists():
            with contextlib.suppress(OSError):
                tmp_path.unlink()
