"""Tenant and membership models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.portal.models.base import utc_now
from src.portal.models.enums import SubscriptionTier, UserRole


class Tenant(SQLModel, table=True):
    """Billing and organisational unit that owns projects and members."""

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    owner_id: UUID = Field(foreign_key="users.id", index=True)
    subscription_tier: str = Field(default=SubscriptionTier.FREE.value, max_length=20)
    max_projects: int = Field(default=1)
    max_team_members: int = Field(default=1)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class TenantMember(SQLModel, table=True):
    """A user's role within a tenant."""

    __tablename__ = "tenant_members"

    tenant_id: UUID = Field(foreign_key="tenants.id", primary_key=True, ondelete="CASCADE")
    user_id: UUID = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    role: str = Field(default=UserRole.DEVELOPER.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)
