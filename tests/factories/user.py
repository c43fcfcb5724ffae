"""User, refresh token and personal env var factories."""

from datetime import timedelta

from polyfactory import Use

from src.portal.core.security import encrypt, hash_password, hash_token
from src.portal.models import RefreshToken, User, UserEnvVar
from src.portal.models.enums import AuthProvider
from tests.factories.base import BaseFactory, generate_uuid, short_id, utc_now

# Satisfies the signup password rules
DEFAULT_TEST_PASSWORD = "TestPassword123"


class UserFactory(BaseFactory):
    __model__ = User

    id = Use(generate_uuid)
    email = Use(lambda: f"user_{short_id()}@example.com")
    name = "Test User"
    avatar_url = None
    hashed_password = Use(lambda: hash_password(DEFAULT_TEST_PASSWORD))
    auth_provider = AuthProvider.EMAIL.value
    email_verified = True
    email_opt_in = True
    is_active = True
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def unverified(cls, **kwargs):
        return cls.build(email_verified=False, **kwargs)

    @classmethod
    def external(cls, **kwargs):
        """Account created through an external provider, without a password."""
        return cls.build(hashed_password=None, auth_provider=AuthProvider.GOOGLE.value, **kwargs)


class RefreshTokenFactory(BaseFactory):
    __model__ = RefreshToken

    id = Use(generate_uuid)
    user_id = None  # Required FK - must be set explicitly
    tenant_id = None  # Required FK - must be set explicitly
    token_hash = Use(lambda: hash_token(short_id()))
    expires_at = Use(lambda: utc_now() + timedelta(days=7))
    created_at = Use(utc_now)
    revoked = False


class UserEnvVarFactory(BaseFactory):
    __model__ = UserEnvVar

    id = Use(generate_uuid)
    user_id = None  # Required FK - must be set explicitly
    key = Use(lambda: f"MY_VAR_{short_id().upper()}")
    value = Use(lambda: encrypt("personal-secret"))
    created_at = Use(utc_now)
    updated_at = Use(utc_now)
