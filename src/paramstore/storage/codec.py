"""Value codecs for the three storage modes.

Every value in a parameter file goes through exactly one codec, chosen by the
store's :class:`DataMode`:

- PLAIN: base64 of the UTF-8 text
- COMPRESSED: base64 of the gzip-compressed text
- ENCRYPTED: base64 of the AES-GCM sealed text
"""

from __future__ import annotations

import base64
import binascii
import gzip
import logging
import zlib
from enum import IntEnum

from paramstore.security.crypto import decrypt, encrypt
from paramstore.storage.errors import StorageDecodeError, StorageValidationError

logger = logging.getLogger(__name__)


class DataMode(IntEnum):
    """Store-wide encoding discipline. The integer value is stamped into the file."""

    PLAIN = 0
    COMPRESSED = 1
    ENCRYPTED = 2

    @classmethod
    def parse(cls, value: str | int | DataMode) -> DataMode:
        """Parse a mode from its name ("plain") or decimal form ("0").

        Raises:
            ValueError: If value names no mode
        """
        if isinstance(value, DataMode):
            return value
        if isinstance(value, int):
            return cls(value)

        text = value.strip()
        if text.isdigit():
            return cls(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            valid = ", ".join(m.name.lower() for m in cls)
            raise ValueError(f"Unknown data mode: {value!r}. Must be one of: {valid}") from None


def compress(data: bytes) -> bytes:
    """Compress data with gzip at best compression."""
    return gzip.compress(data, compresslevel=9)


def decompress(data: bytes) -> bytes:
    """Decompress gzip data.

    Raises:
        StorageDecodeError: If the stream is not valid or truncated gzip
    """
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as e:
        raise StorageDecodeError(f"Failed to decompress value: {e}") from e


def _b64decode(text: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise StorageDecodeError(f"Malformed base64 payload: {e}") from e


def _to_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise StorageDecodeError(f"Decoded value is not valid UTF-8: {e}") from e


def encode_value(mode: DataMode, key: bytes | str, plaintext: str) -> str:
    """Transform plaintext into its stored representation.

    Args:
        mode: Encoding mode of the store
        key: Passphrase or derived key (used only for ENCRYPTED)
        plaintext: Value to store

    Returns:
        ASCII text safe to place after the ``$`` separator

    Raises:
        StorageValidationError: If plaintext cannot be encoded as UTF-8
    """
    mode = DataMode(mode)
    try:
        raw = plaintext.encode("utf-8")
    except UnicodeEncodeError as e:
        raise StorageValidationError(f"Value is not valid UTF-8 text: {e}") from e

    if mode is DataMode.COMPRESSED:
        raw = compress(raw)
    elif mode is DataMode.ENCRYPTED:
        raw = encrypt(raw, key)

    return base64.b64encode(raw).decode("ascii")


def decode_value(mode: DataMode, key: bytes | str, stored: str) -> str:
    """Reverse :func:`encode_value`.

    Raises:
        StorageDecodeError: If the payload is malformed
        StorageMalformedNonceError: If an encrypted payload is too short
        StorageDecryptionError: If an encrypted payload fails authentication
    """
    mode = DataMode(mode)
    raw = _b64decode(stored)

    if mode is DataMode.COMPRESSED:
        raw = decompress(raw)
    elif mode is DataMode.ENCRYPTED:
        raw = decrypt(raw, key)

    return _to_text(raw)
