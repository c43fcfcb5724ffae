"""User account, refresh token and personal env var models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from src.portal.models.base import utc_now
from src.portal.models.enums import AuthProvider


class User(SQLModel, table=True):
    """A person; may belong to several tenants through TenantMember rows."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    name: str = Field(max_length=100)
    avatar_url: str | None = Field(default=None, max_length=500)
    # Null for accounts created through an external provider
    hashed_password: str | None = Field(default=None, max_length=255)
    auth_provider: str = Field(default=AuthProvider.EMAIL.value, max_length=20)
    email_verified: bool = Field(default=False)
    email_opt_in: bool = Field(default=False)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class RefreshToken(SQLModel, table=True):
    """Issued refresh tokens, stored by hash so they can be rotated and revoked."""

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True, ondelete="CASCADE")
    token_hash: str = Field(max_length=255, unique=True, index=True)
    expires_at: datetime
    created_at: datetime = Field(default_factory=utc_now)
    revoked: bool = Field(default=False)


class UserEnvVar(SQLModel, table=True):
    """Personal configuration entry. `value` holds ciphertext, never plaintext."""

    __tablename__ = "user_env_vars"
    __table_args__ = (UniqueConstraint("user_id", "key", name="uq_user_env_vars_user_key"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    key: str = Field(max_length=100)
    value: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
