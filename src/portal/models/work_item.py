"""Tracked work items (bugs, features, tasks) with assignments and votes."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index, Text
from sqlmodel import Field, SQLModel

from src.portal.models.base import utc_now
from src.portal.models.enums import BugStatus, FeatureStatus, TaskStatus


class WorkItemBase(SQLModel):
    """Columns shared by every work item table."""

    project_id: UUID = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    title: str = Field(max_length=200)
    priority: int = Field(default=0)
    owner_id: UUID = Field(foreign_key="users.id")
    created_by_id: UUID = Field(foreign_key="users.id")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Bug(WorkItemBase, table=True):
    __tablename__ = "bugs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    description: str = Field(sa_type=Text)
    url: str | None = Field(default=None, max_length=500)
    status: str = Field(default=BugStatus.OPEN.value, max_length=20)
    votes: int = Field(default=0)


class Feature(WorkItemBase, table=True):
    __tablename__ = "features"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    description: str = Field(sa_type=Text)
    status: str = Field(default=FeatureStatus.PROPOSED.value, max_length=20)
    votes: int = Field(default=0)


class Task(WorkItemBase, table=True):
    __tablename__ = "tasks"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    description: str | None = Field(default=None, max_length=2000)
    category: str | None = Field(default=None, max_length=50)
    status: str = Field(default=TaskStatus.TODO.value, max_length=20)
    milestone_id: UUID | None = Field(
        default=None, foreign_key="milestones.id", index=True, ondelete="SET NULL"
    )


class WorkItemAssignment(SQLModel, table=True):
    """Users assigned to a work item. `item_type` selects the item table."""

    __tablename__ = "work_item_assignments"

    item_type: str = Field(max_length=20, primary_key=True)
    item_id: UUID = Field(primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    created_at: datetime = Field(default_factory=utc_now)


class WorkItemVote(SQLModel, table=True):
    """One vote per user (or per IP for anonymous public voting)."""

    __tablename__ = "work_item_votes"
    __table_args__ = (Index("ix_work_item_votes_item", "item_type", "item_id"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    item_type: str = Field(max_length=20)
    item_id: UUID
    user_id: UUID | None = Field(default=None, foreign_key="users.id", ondelete="CASCADE")
    ip_address: str = Field(max_length=45)
    created_at: datetime = Field(default_factory=utc_now)
