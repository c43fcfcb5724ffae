"""Channel, permission and message schemas."""

from datetime import datetime
from typing import Annotated, ClassVar
from uuid import UUID

from pydantic import BaseModel

from src.portal.schemas.common import InputSchema, UpdateSchema, text_rule

ChannelName = Annotated[
    str, text_rule(100, "Channel name is too long", required="Channel name is required")
]
ChannelDescription = Annotated[str, text_rule(500, "Description is too long")]


class ChannelCreate(InputSchema):
    name: ChannelName
    description: ChannelDescription | None = None
    is_private: bool = False


class ChannelUpdate(UpdateSchema):
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"description"})

    name: ChannelName | None = None
    description: ChannelDescription | None = None
    is_private: bool | None = None


class PermissionEntry(InputSchema):
    user_id: UUID
    can_view: bool
    can_post: bool


class ChannelPermissionsUpdate(InputSchema):
    permissions: list[PermissionEntry]


class MessageCreate(InputSchema):
    content: Annotated[
        str, text_rule(5000, "Message is too long", required="Message content is required")
    ]


class ChannelAccess(BaseModel):
    can_view: bool
    can_post: bool


class ChannelRead(BaseModel):
    id: UUID
    project_id: UUID
    name: str
    description: str | None
    is_private: bool
    created_by_id: UUID
    created_at: datetime
    updated_at: datetime
    # Effective access of the requesting user
    user_permissions: ChannelAccess


class ChannelPermissionRead(BaseModel):
    user_id: UUID
    can_view: bool
    can_post: bool

    model_config = {"from_attributes": True}


class MessageRead(BaseModel):
    id: UUID
    channel_id: UUID
    user_id: UUID
    author_name: str | None = None
    content: str
    created_at: datetime
