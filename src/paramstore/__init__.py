"""paramstore - named string parameters in a single flat file.

Values are stored plain (base64), gzip-compressed or AES-GCM encrypted,
uniformly per file.
"""

from paramstore.storage import (
    RESERVED_NAME,
    DataMode,
    ParamStore,
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
    check_name,
)

__version__ = "0.3.0"

__all__ = [
    "__version__",
    "ParamStore",
    "DataMode",
    "RESERVED_NAME",
    "check_name",
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
