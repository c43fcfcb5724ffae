from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.portal.models.base import utc_now
from src.portal.models.enums import MilestoneStatus


class Milestone(SQLModel, table=True):
    """Project milestone. A locked milestone cannot be edited or deleted."""

    __tablename__ = "milestones"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    estimated_completion_date: datetime
    actual_completion_date: datetime | None = Field(default=None)
    status: str = Field(default=MilestoneStatus.PLANNED.value, max_length=20)
    order: int = Field(default=0)
    is_locked: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
