"""Security utilities - hashing, tokens and at-rest encryption."""

from src.portal.core.security.crypto import (
    DUMMY_PASSWORD_HASH,
    TokenType,
    create_access_token,
    create_email_verification_token,
    create_invitation_token,
    create_refresh_token,
    decode_token,
    hash_password,
    hash_token,
    token_ttl_seconds,
    verify_password,
)
from src.portal.core.security.encryption import (
    EncryptionError,
    decrypt,
    decrypt_in_thread,
    encrypt,
    encrypt_in_thread,
    is_encrypted,
)

__all__ = [
    # Crypto
    "DUMMY_PASSWORD_HASH",
    "TokenType",
    "create_access_token",
    "create_email_verification_token",
    "create_invitation_token",
    "create_refresh_token",
    "decode_token",
    "hash_password",
    "hash_token",
    "token_ttl_seconds",
    "verify_password",
    # Encryption
    "EncryptionError",
    "decrypt",
    "decrypt_in_thread",
    "encrypt",
    "encrypt_in_thread",
    "is_encrypted",
]
