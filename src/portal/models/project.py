"""Project and environment variable models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from src.portal.models.base import utc_now
from src.portal.models.enums import ProjectStatus


class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True, ondelete="CASCADE")
    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=500)
    status: str = Field(default=ProjectStatus.ACTIVE.value, max_length=20)
    public_bug_tracking: bool = Field(default=False)
    public_feature_requests: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class EnvVar(SQLModel, table=True):
    """Project configuration entry. `value` holds ciphertext, never plaintext."""

    __tablename__ = "env_vars"
    __table_args__ = (
        UniqueConstraint("project_id", "key", "environment", name="uq_env_vars_project_key_env"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    key: str = Field(max_length=100)
    value: str
    environment: str = Field(max_length=20)
    created_by_id: UUID = Field(foreign_key="users.id")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
