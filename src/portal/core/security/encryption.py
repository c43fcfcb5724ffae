"""Authenticated encryption for secrets stored at rest (env var values).

Each value gets its own random salt and IV. The AES-256-GCM key is derived
from the master key with PBKDF2-SHA256. Stored format, all parts base64:

    salt:iv:tag:ciphertext
"""

import asyncio
import base64
import binascii
import os
from collections.abc import Sequence

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from src.portal.core.config import get_settings

SALT_LENGTH = 64
IV_LENGTH = 16
TAG_LENGTH = 16
KEY_LENGTH = 32


class EncryptionError(ValueError):
    """Raised when a value cannot be encrypted or decrypted."""


def _derive_key(master_key: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(master_key.encode())


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def encrypt(plaintext: str, master_key: str | None = None) -> str:
    """Encrypt a non-empty string into the `salt:iv:tag:ciphertext` format."""
    if not plaintext:
        raise EncryptionError("Cannot encrypt empty value")

    settings = get_settings()
    key_material = master_key or settings.effective_encryption_key
    salt = os.urandom(SALT_LENGTH)
    iv = os.urandom(IV_LENGTH)
    key = _derive_key(key_material, salt, settings.encryption_kdf_iterations)

    # AESGCM appends the tag to the ciphertext
    sealed = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), None)
    ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
    return ":".join([_b64(salt), _b64(iv), _b64(tag), _b64(ciphertext)])


def decrypt(encrypted: str, master_key: str | None = None) -> str:
    """Decrypt a value produced by `encrypt`.

    Raises:
        EncryptionError: If the format is wrong, the key differs or the
            ciphertext was tampered with.
    """
    if not encrypted:
        raise EncryptionError("Cannot decrypt empty value")

    parts = encrypted.split(":")
    if len(parts) != 4:
        raise EncryptionError("Invalid encrypted data format")

    try:
        salt, iv, tag, ciphertext = (base64.b64decode(p, validate=True) for p in parts)
    except (binascii.Error, ValueError) as e:
        raise EncryptionError("Invalid encrypted data format") from e

    settings = get_settings()
    key = _derive_key(
        master_key or settings.effective_encryption_key,
        salt,
        settings.encryption_kdf_iterations,
    )
    try:
        plaintext = AESGCM(key).decrypt(iv, ciphertext + tag, None)
    except InvalidTag as e:
        raise EncryptionError("Decryption failed: data is corrupted or key is wrong") from e
    return plaintext.decode("utf-8")


def is_encrypted(value: str) -> bool:
    """Cheap format check, does not attempt decryption."""
    return bool(value) and len(value.split(":")) == 4


async def encrypt_in_thread(plaintext: str) -> str:
    """`encrypt` on a worker thread. Key derivation must not block the event loop."""
    return await asyncio.to_thread(encrypt, plaintext)


async def decrypt_in_thread(values: Sequence[str]) -> list[str]:
    """Decrypt a batch on one worker thread, preserving order."""
    return await asyncio.to_thread(lambda: [decrypt(value) for value in values])
