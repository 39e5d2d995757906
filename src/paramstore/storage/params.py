"""File-backed parameter store.

Parameters live in one UTF-8 text file, one ``name$payload`` line each, where
the payload is the value encoded by the store's :class:`DataMode`. The file is
read on every :meth:`ParamStore.get` and rewritten in full on every
:meth:`ParamStore.set` and :meth:`ParamStore.delete`; it is never held open
between calls. This suits small, rarely changing parameter sets.

The first entry of a new file is the reserved ``CurrentDataTypeForParameters``
record stamping the mode, so a file written in one mode cannot later be read in
another.

Example:
    ```python
    from paramstore.storage import DataMode, ParamStore

    store = ParamStore("service.params", DataMode.ENCRYPTED, "s3cret")
    store.set("api_token", "abc123")
    token = store.get("api_token")
    store.delete("api_token")
    ```
"""

from __future__ import annotations

import contextlib
import logging
import os
import re
from collections.abc import Iterator
from pathlib import Path
from typing import IO

from paramstore.security.crypto import derive_key
from paramstore.storage.codec import DataMode, decode_value, encode_value
from paramstore.storage.errors import (
    StorageCreateError,
    StorageDecodeError,
    StorageDecryptionError,
    StorageEmptyValueError,
    StorageError,
    StorageModeMismatchError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageValidationError,
)
from paramstore.storage.locking import ReadWriteLock

logger = logging.getLogger(__name__)

RESERVED_NAME = "CurrentDataTypeForParameters"
SEPARATOR = "$"

_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*")


def check_name(name: str) -> bool:
    """Check a parameter name.

    A name starts with an ASCII letter or underscore and continues with
    letters, digits, underscores or hyphens.
    """
    return isinstance(name, str) and _NAME_PATTERN.fullmatch(name) is not None


def _line_name(line: str) -> str | None:
    """Name part of a line, or None if the line has no separator."""
    name, sep, _ = line.partition(SEPARATOR)
    return name if sep else None


def _split_lines(content: str) -> list[str]:
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _mode_matches(stamped: str, mode: DataMode) -> bool:
    text = stamped.strip()
    return text.isascii() and text.isdigit() and int(text) == mode


class ParamStore:
    """Named string parameters persisted in a single flat file.

    Opening a store creates the file if needed (stamping ``mode``) or checks
    that an existing file was stamped with the same ``mode``.

    Reads take a shared lock and mutations an exclusive one, each held from
    file open to file close, so threads sharing one instance never observe a
    half-rewritten file. Separate processes are not coordinated.

    Args:
        path: Parameter file location (relative paths resolve against the
            current working directory at open time)
        mode: Encoding for every value, as a DataMode or its name
        passphrase: Encryption password, only used in ENCRYPTED mode

    Raises:
        StorageValidationError: If path is empty or mode is unknown
        StorageCreateError: If a new file cannot be created or stamped
        StorageModeMismatchError: If an existing file has another (or no) mode
        StoragePermissionError: If the file cannot be accessed
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        mode: DataMode | str | int = DataMode.PLAIN,
        passphrase: str = "",
    ) -> None:
        raw_path = os.fspath(path) if path is not None else ""
        if not raw_path.strip():
            raise StorageValidationError("Empty parameter file path")

        try:
            self._mode = DataMode.parse(mode)
        except ValueError as e:
            raise StorageValidationError(str(e)) from e

        self._path = Path(raw_path).absolute()
        self._key = derive_key(passphrase)
        self._lock = ReadWriteLock()

        try:
            self._path.stat()
        except FileNotFoundError:
            self._create()
        except PermissionError as e:
            raise StoragePermissionError(
                f"Cannot access parameter file {self._path}: permission denied"
            ) from e
        except OSError as e:
            raise StorageError(f"Cannot access parameter file {self._path}: {e}") from e

        self._check_mode()
        logger.debug(f"Opened parameter file {self._path} (mode={self._mode.name})")

    @property
    def path(self) -> Path:
        """Absolute location of the parameter file."""
        return self._path

    @property
    def mode(self) -> DataMode:
        """Encoding mode stamped into the file."""
        return self._mode

    def __repr__(self) -> str:
        return f"ParamStore(path={str(self._path)!r}, mode={self._mode.name})"

    def get(self, name: str) -> str:
        """Read and decode a parameter.

        Raises:
            StorageValidationError: If name is invalid
            StorageNotFoundError: If no line carries this name
            StorageEmptyValueError: If the line has an empty payload
            StorageDecodeError: If the payload is malformed
            StorageDecryptionError: If an encrypted payload fails authentication
        """
        if not check_name(name):
            raise StorageValidationError(f'Wrong parameter name: "{name}"')
        return self._read_value(name)

    def set(self, name: str, value: str) -> None:
        """Write a parameter, replacing an existing line or appending a new one.

        Raises:
            StorageValidationError: If value is empty or name is invalid or reserved
        """
        if not value:
            raise StorageValidationError(f'Empty value for parameter "{name}"')
        self._check_writable_name(name)
        self._write_value(name, value)

    def delete(self, name: str) -> None:
        """Remove every line of a parameter. Absent names are not an error.

        Raises:
            StorageValidationError: If name is invalid or reserved
        """
        self._check_writable_name(name)

        with self._lock.write_locked(), self._io_errors("rewrite"):
            with self._path.open("r+", encoding="utf-8", newline="") as f:
                lines = self._read_lines(f)
                kept = [line for line in lines if _line_name(line) != name]
                if len(kept) == len(lines):
                    logger.debug(f'Parameter "{name}" not present, nothing to delete')
                    return
                self._rewrite(f, kept)

        logger.debug(f'Deleted parameter "{name}" from {self._path}')

    def _check_writable_name(self, name: str) -> None:
        if not check_name(name):
            raise StorageValidationError(f'Wrong parameter name: "{name}"')
        if name == RESERVED_NAME:
            raise StorageValidationError(f'Parameter name "{name}" is reserved')

    def _create(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("x", encoding="utf-8"):
                pass
        except FileExistsError:
            # created concurrently; treat as an existing file
            return
        except OSError as e:
            raise StorageCreateError(f"Cannot create parameter file {self._path}: {e}") from e

        try:
            self._write_value(RESERVED_NAME, str(int(self._mode)))
        except StorageError as e:
            # an unstamped file would fail every later open
            with contextlib.suppress(OSError):
                self._path.unlink()
            raise StorageCreateError(
                f"Cannot write data mode into new parameter file {self._path}: {e}"
            ) from e

        logger.info(f"Created parameter file {self._path} (mode={self._mode.name})")

    def _check_mode(self) -> None:
        try:
            stamped = self._read_value(RESERVED_NAME)
        except StorageDecryptionError as e:
            raise StorageModeMismatchError(
                f"Cannot read data mode of {self._path}: wrong passphrase or not encrypted"
            ) from e
        except StorageError as e:
            raise StorageModeMismatchError(f"Cannot read data mode of {self._path}: {e}") from e

        if not _mode_matches(stamped, self._mode):
            raise StorageModeMismatchError(
                f"Parameter file {self._path} holds data mode {stamped!r}, "
                f"expected {int(self._mode)} ({self._mode.name})"
            )

    def _read_value(self, name: str) -> str:
        prefix_len = len(name) + len(SEPARATOR)

        with self._lock.read_locked(), self._io_errors("read"):
            with self._path.open("r", encoding="utf-8", newline="") as f:
                lines = self._read_lines(f)

        for line in lines:
            if not line or _line_name(line) != name:
                continue
            payload = line[prefix_len:].strip()
            if not payload:
                raise StorageEmptyValueError(
                    f'Parameter "{name}" was found, but value is empty'
                )
            return decode_value(self._mode, self._key, payload)

        raise StorageNotFoundError(f'Parameter "{name}" not found')

    def _write_value(self, name: str, value: str) -> None:
        new_line = f"{name}{SEPARATOR}{encode_value(self._mode, self._key, value)}"

        with self._lock.write_locked(), self._io_errors("rewrite"):
            with self._path.open("r+", encoding="utf-8", newline="") as f:
                lines = self._read_lines(f)
                for i, line in enumerate(lines):
                    if _line_name(line) == name:
                        lines[i] = new_line
                        break
                else:
                    lines.append(new_line)
                self._rewrite(f, lines)

        logger.debug(f'Stored parameter "{name}" in {self._path}')

    def _read_lines(self, f: IO[str]) -> list[str]:
        try:
            return _split_lines(f.read())
        except UnicodeDecodeError as e:
            raise StorageDecodeError(f"Parameter file {self._path} is not valid UTF-8") from e

    @staticmethod
    def _rewrite(f: IO[str], lines: list[str]) -> None:
        # Not crash-atomic: a failure after truncate leaves a partial file.
        f.seek(0)
        f.truncate()
        if lines:
            f.write("\n".join(lines) + "\n")
        f.flush()

    @contextlib.contextmanager
    def _io_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except PermissionError as e:
            raise StoragePermissionError(
                f"Cannot {action} {self._path}: permission denied"
            ) from e
        except OSError as e:
            raise StorageError(f"Failed to {action} {self._path}: {e}") from e
