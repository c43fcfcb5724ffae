"""Password hashing, signed tokens and token hashing."""

from datetime import UTC, datetime, timedelta
from hashlib import sha256
from typing import Any
from uuid import UUID, uuid4

import argon2
from jose import JWTError, jwt

from src.portal.core.config import get_settings


class TokenType:
    """Values of the `type` claim."""

    ACCESS = "access"
    REFRESH = "refresh"
    EMAIL_VERIFICATION = "email_verification"
    INVITATION = "invitation"


def hash_token(token: str) -> str:
    """SHA256 of a token, used as its storage and blacklist key."""
    return sha256(token.encode()).hexdigest()


def _create_password_hasher() -> argon2.PasswordHasher:
    settings = get_settings()
    return argon2.PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


_password_hasher = _create_password_hasher()

# Verified against when the user does not exist so timing does not leak it
DUMMY_PASSWORD_HASH = _password_hasher.hash("dummy-password-for-timing")


def hash_password(password: str) -> str:
    """Hash password using Argon2id."""
    return _password_hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify password against hash. Returns False on any error."""
    try:
        return _password_hasher.verify(hashed, password)
    except (argon2.exceptions.VerifyMismatchError, argon2.exceptions.InvalidHashError):
        return False


def _encode(claims: dict[str, Any], expires_delta: timedelta) -> tuple[str, datetime]:
    settings = get_settings()
    expire = datetime.now(UTC) + expires_delta
    token: str = jwt.encode(  # type: ignore[assignment]
        {**claims, "exp": expire},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return token, expire


def create_access_token(
    subject: str | UUID,
    tenant_id: str | UUID,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create JWT access token bound to one tenant membership."""
    settings = get_settings()
    token, _ = _encode(
        {
            "sub": str(subject),
            "tenant_id": str(tenant_id),
            "role": role,
            "type": TokenType.ACCESS,
        },
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes),
    )
    return token


def create_refresh_token(subject: str | UUID, tenant_id: str | UUID) -> tuple[str, datetime]:
    """Create refresh token. Returns (token, expiry as naive UTC datetime).

    The jti claim keeps tokens issued in the same second distinct, which
    rotation relies on.
    """
    settings = get_settings()
    token, expire = _encode(
        {
            "sub": str(subject),
            "tenant_id": str(tenant_id),
            "type": TokenType.REFRESH,
            "jti": str(uuid4()),
        },
        timedelta(days=settings.refresh_token_expire_days),
    )
    return token, expire.replace(tzinfo=None)


def create_email_verification_token(user_id: str | UUID, email: str) -> str:
    settings = get_settings()
    token, _ = _encode(
        {"sub": str(user_id), "email": email, "type": TokenType.EMAIL_VERIFICATION},
        timedelta(hours=settings.email_verification_expire_hours),
    )
    return token


def create_invitation_token(
    tenant_id: str | UUID,
    email: str,
    role: str,
    invited_by: str | UUID,
) -> str:
    """Signed invitation to join a tenant with a given role."""
    settings = get_settings()
    token, _ = _encode(
        {
            "tenant_id": str(tenant_id),
            "email": email,
            "role": role,
            "invited_by": str(invited_by),
            "type": TokenType.INVITATION,
        },
        timedelta(days=settings.invite_expire_days),
    )
    return token


def decode_token(token: str, expected_type: str | None = None) -> dict[str, Any] | None:
    """Decode and validate a JWT. Returns None on any error or type mismatch."""
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
    if expected_type is not None and payload.get("type") != expected_type:
        return None
    return payload


def token_ttl_seconds(payload: dict[str, Any]) -> int:
    """Seconds until the token in `payload` expires (0 if already expired)."""
    exp = payload.get("exp")
    if exp is None:
        return 0
    return max(int(exp - datetime.now(UTC).timestamp()), 0)
