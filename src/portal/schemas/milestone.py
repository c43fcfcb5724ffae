"""Milestone schemas."""

from datetime import datetime
from typing import Annotated, ClassVar
from uuid import UUID

from pydantic import BaseModel, Field

from src.portal.models.enums import MilestoneStatus
from src.portal.schemas.common import InputSchema, UpdateSchema, datetime_rule, one_of, text_rule

MilestoneName = Annotated[
    str, text_rule(100, "Milestone name is too long", required="Milestone name is required")
]
MilestoneDescription = Annotated[str, text_rule(1000, "Description is too long")]
CompletionDate = Annotated[datetime, datetime_rule()]
MilestoneStatusField = Annotated[
    MilestoneStatus, one_of(MilestoneStatus, "Status must be planned, in-progress, or completed")
]
Order = Annotated[int, Field(ge=0, strict=True)]


class MilestoneCreate(InputSchema):
    name: MilestoneName
    description: MilestoneDescription | None = None
    estimated_completion_date: CompletionDate
    status: MilestoneStatusField = MilestoneStatus.PLANNED.value
    order: Order = 0


class MilestoneUpdate(UpdateSchema):
    nullable_fields: ClassVar[frozenset[str]] = frozenset(
        {"description", "actual_completion_date"}
    )

    name: MilestoneName | None = None
    description: MilestoneDescription | None = None
    estimated_completion_date: CompletionDate | None = None
    actual_completion_date: CompletionDate | None = None
    status: MilestoneStatusField | None = None
    order: Order | None = None


class MilestoneLock(InputSchema):
    is_locked: bool = True


class MilestoneRead(BaseModel):
    id: UUID
    project_id: UUID
    name: str
    description: str | None
    estimated_completion_date: datetime
    actual_completion_date: datetime | None
    status: str
    order: int
    is_locked: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
