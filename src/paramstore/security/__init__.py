"""Security module for paramstore.

Provides passphrase key derivation and authenticated encryption of values.
"""

from paramstore.security.crypto import KEY_SIZE, NONCE_SIZE, decrypt, derive_key, encrypt

__all__ = [
    "derive_key",
    "encrypt",
    "decrypt",
    "KEY_SIZE",
    "NONCE_SIZE",
]
