"""Bug, feature and task schemas."""

from datetime import datetime
from typing import Annotated, ClassVar
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field

from src.portal.models.enums import BugStatus, FeatureStatus, TaskStatus
from src.portal.schemas.common import (
    InputSchema,
    UpdateSchema,
    min_items,
    one_of,
    text_rule,
    url_rule,
)

Priority = Annotated[int, Field(ge=0, le=100, strict=True)]
BugUrl = Annotated[str, url_rule("Invalid URL", max_length=500, too_long="URL is too long")]


def _title(kind: str) -> AfterValidator:
    return text_rule(200, f"{kind} title is too long", required=f"{kind} title is required")


def _description(kind: str) -> AfterValidator:
    return text_rule(5000, "Description is too long", required=f"{kind} description is required")


BugStatusField = Annotated[
    BugStatus, one_of(BugStatus, "Status must be open, in-progress, resolved, or closed")
]
FeatureStatusField = Annotated[
    FeatureStatus,
    one_of(FeatureStatus, "Status must be proposed, planned, in-progress, completed, or rejected"),
]
TaskStatusField = Annotated[
    TaskStatus, one_of(TaskStatus, "Status must be todo, in-progress, or done")
]


# --- Bugs ---


class BugCreate(InputSchema):
    title: Annotated[str, _title("Bug")]
    description: Annotated[str, _description("Bug")]
    url: BugUrl | None = None
    priority: Priority = 0
    status: BugStatusField = BugStatus.OPEN.value
    owner_id: UUID | None = None
    assigned_user_ids: list[UUID] = Field(default_factory=list)


class BugUpdate(UpdateSchema):
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"url"})

    title: Annotated[str, _title("Bug")] | None = None
    description: Annotated[str, _description("Bug")] | None = None
    url: BugUrl | None = None
    priority: Priority | None = None
    status: BugStatusField | None = None
    owner_id: UUID | None = None


# --- Features ---


class FeatureCreate(InputSchema):
    title: Annotated[str, _title("Feature")]
    description: Annotated[str, _description("Feature")]
    priority: Priority = 0
    status: FeatureStatusField = FeatureStatus.PROPOSED.value
    owner_id: UUID | None = None
    assigned_user_ids: list[UUID] = Field(default_factory=list)


class FeatureUpdate(UpdateSchema):
    title: Annotated[str, _title("Feature")] | None = None
    description: Annotated[str, _description("Feature")] | None = None
    priority: Priority | None = None
    status: FeatureStatusField | None = None
    owner_id: UUID | None = None


# --- Tasks ---

TaskDescription = Annotated[str, text_rule(2000, "Description is too long")]
TaskCategory = Annotated[str, text_rule(50, "Category is too long")]


class TaskCreate(InputSchema):
    title: Annotated[str, _title("Task")]
    description: TaskDescription | None = None
    category: TaskCategory | None = None
    priority: Priority = 0
    status: TaskStatusField = TaskStatus.TODO.value
    milestone_id: UUID | None = None
    owner_id: UUID | None = None
    assigned_user_ids: list[UUID] = Field(default_factory=list)


class TaskUpdate(UpdateSchema):
    nullable_fields: ClassVar[frozenset[str]] = frozenset(
        {"description", "category", "milestone_id"}
    )

    title: Annotated[str, _title("Task")] | None = None
    description: TaskDescription | None = None
    category: TaskCategory | None = None
    priority: Priority | None = None
    status: TaskStatusField | None = None
    milestone_id: UUID | None = None
    owner_id: UUID | None = None


class AssignUsers(InputSchema):
    user_ids: Annotated[list[UUID], min_items(1, "At least one user must be assigned")]


# --- Responses ---


class WorkItemRead(BaseModel):
    id: UUID
    project_id: UUID
    title: str
    description: str | None
    priority: int
    status: str
    owner_id: UUID
    created_by_id: UUID
    assigned_user_ids: list[UUID] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class BugRead(WorkItemRead):
    url: str | None
    votes: int


class FeatureRead(WorkItemRead):
    votes: int


class TaskRead(WorkItemRead):
    category: str | None
    milestone_id: UUID | None


class VoteResponse(BaseModel):
    id: UUID
    votes: int
