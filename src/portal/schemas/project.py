"""Project schemas for API request/response."""

from datetime import datetime
from typing import Annotated, ClassVar
from uuid import UUID

from pydantic import BaseModel

from src.portal.models.enums import ProjectStatus
from src.portal.schemas.common import InputSchema, UpdateSchema, one_of, text_rule

ProjectName = Annotated[
    str, text_rule(100, "Project name is too long", required="Project name is required")
]
ProjectDescription = Annotated[str, text_rule(500, "Description is too long")]


class ProjectCreate(InputSchema):
    name: ProjectName
    description: ProjectDescription | None = None
    public_bug_tracking: bool = False
    public_feature_requests: bool = False


class ProjectUpdate(UpdateSchema):
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"description"})

    name: ProjectName | None = None
    description: ProjectDescription | None = None
    status: (
        Annotated[
            ProjectStatus,
            one_of(ProjectStatus, "Status must be active, completed, or archived"),
        ]
        | None
    ) = None
    public_bug_tracking: bool | None = None
    public_feature_requests: bool | None = None


class ProjectRead(BaseModel):
    id: UUID
    tenant_id: UUID
    name: str
    description: str | None
    status: str
    public_bug_tracking: bool
    public_feature_requests: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
