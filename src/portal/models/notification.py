"""In-app notifications."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from src.portal.models.base import utc_now


class Notification(SQLModel, table=True):
    """One message in a user's inbox, scoped to the tenant it came from."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index(
            "ix_notifications_user_tenant_created",
            "user_id",
            "tenant_id",
            "created_at",
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE")
    tenant_id: UUID = Field(foreign_key="tenants.id", ondelete="CASCADE")
    type: str = Field(max_length=30)
    title: str = Field(max_length=200)
    message: str = Field(max_length=1000)
    # What the notification links to, e.g. ("bug", <bug id>)
    resource_type: str | None = Field(default=None, max_length=20)
    resource_id: UUID | None = None
    project_id: UUID | None = Field(default=None, foreign_key="projects.id", ondelete="CASCADE")
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
