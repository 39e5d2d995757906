"""Storage layer for parameter files.

Provides:
- ParamStore: get/set/delete of named values in one flat file
- Codecs for plain (base64), compressed and encrypted values
- A reader/writer lock serializing file access per store
- Centralized error handling

Example:
    ```python
    from paramstore.storage import DataMode, ParamStore

    store = ParamStore("app.params", DataMode.COMPRESSED)
    store.set("greeting", "hello")
    assert store.get("greeting") == "hello"
    ```
"""

from __future__ import annotations

from paramstore.storage.errors import (
    StorageCreateError,
    StorageDecodeError,
    StorageDecryptionError,
    StorageEmptyValueError,
    StorageError,
    StorageMalformedNonceError,
    StorageModeMismatchError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageValidationError,
)
from paramstore.storage.codec import DataMode, decode_value, encode_value
from paramstore.storage.helpers import atomic_write
from paramstore.storage.locking import ReadWriteLock
from paramstore.storage.params import RESERVED_NAME, ParamStore, check_name

__all__ = [
    # Store
    "ParamStore",
    "DataMode",
    "RESERVED_NAME",
    "check_name",
    # Codecs
    "encode_value",
    "decode_value",
    # Helpers
    "atomic_write",
    "ReadWriteLock",
    # Exceptions
    "StorageError",
    "StorageValidationError",
    "StorageNotFoundError",
    "StorageEmptyValueError",
    "StoragePermissionError",
    "StorageDecodeError",
    "StorageMalformedNonceError",
    "StorageDecryptionError",
    "StorageCreateError",
    "StorageModeMismatchError",
]
