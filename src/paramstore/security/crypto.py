"""Passphrase-keyed authenticated encryption for stored values.

Values are sealed with AES-256-GCM. The key is a SHA-256 digest of the
passphrase, so passphrases of any length or complexity are usable. Every call
to :func:`encrypt` draws a fresh random nonce and prepends it to the output:

    [NONCE:12][ciphertext][TAG:16]
"""

from __future__ import annotations

import hashlib
import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from paramstore.storage.errors import StorageDecryptionError, StorageMalformedNonceError

logger = logging.getLogger(__name__)

KEY_SIZE = 32
NONCE_SIZE = 12


def derive_key(passphrase: str) -> bytes:
    """Derive a fixed-length AES-256 key from a passphrase.

    Args:
        passphrase: Password of any length (empty allowed)

    Returns:
        32-byte key
    """
    return hashlib.sha256(passphrase.encode("utf-8")).digest()


def _resolve_key(key: bytes | str) -> bytes:
    if isinstance(key, str):
        return derive_key(key)
    if len(key) != KEY_SIZE:
        raise ValueError(f"Encryption key must be {KEY_SIZE} bytes, got {len(key)}")
    return key


def encrypt(plaintext: bytes, key: bytes | str) -> bytes:
    """Encrypt data with a fresh random nonce.

    Args:
        plaintext: Data to seal
        key: 32-byte key or a passphrase to derive one from

    Returns:
        nonce followed by ciphertext and authentication tag
    """
    nonce = os.urandom(NONCE_SIZE)
    sealed = AESGCM(_resolve_key(key)).encrypt(nonce, plaintext, None)
    return nonce + sealed


def decrypt(blob: bytes, key: bytes | str) -> bytes:
    """Decrypt data produced by :func:`encrypt`.

    Args:
        blob: nonce followed by ciphertext and tag
        key: 32-byte key or a passphrase to derive one from

    Returns:
        Original plaintext

    Raises:
        StorageMalformedNonceError: If blob is shorter than the nonce
        StorageDecryptionError: If the tag does not verify (wrong key, tampering)
    """
    if len(blob) < NONCE_SIZE:
        raise StorageMalformedNonceError(
            f"Encrypted payload too short: {len(blob)} bytes (nonce is {NONCE_SIZE})"
        )

    nonce, sealed = blob[:NONCE_SIZE], blob[NONCE_SIZE:]
    try:
        return AESGCM(_resolve_key(key)).decrypt(nonce, sealed, None)
    except InvalidTag as e:
        logger.debug(f"Authentication failed for {len(blob)}-byte payload")
        raise StorageDecryptionError(
            "Decryption failed. Value may be corrupted or encrypted with a different key."
        ) from e
