"""Storage layer exceptions."""

from __future__ import annotations


class StorageError(Exception):
    """Base exception for parameter store operations."""


class StorageValidationError(StorageError):
    """Raised when a name, value or path is rejected before touching the file."""


class StorageNotFoundError(StorageError):
    """Raised when a parameter is not present in the file."""


class StorageEmptyValueError(StorageError):
    """Raised when a parameter line exists but carries no payload."""


class StoragePermissionError(StorageError):
    """Raised when operation fails due to insufficient permissions."""


class StorageDecodeError(StorageError):
    """Raised when a stored payload is not valid base64, gzip or UTF-8."""


class StorageMalformedNonceError(StorageDecodeError):
    """Raised when an encrypted payload is too short to hold its nonce."""


class StorageDecryptionError(StorageError):
    """Raised when decryption fails (wrong key, tampered data)."""


class StorageCreateError(StorageError):
    """Raised when a new parameter file cannot be created or stamped."""


class StorageModeMismatchError(StorageError):
    """Raised when an existing file was stamped with a different mode."""
