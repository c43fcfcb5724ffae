"""Tenant and membership schemas."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel

from src.portal.models.enums import INVITABLE_ROLES, UserRole
from src.portal.schemas.common import InputSchema, UpdateSchema, email_rule, one_of, text_rule

# Owner is never assignable, so this is narrower than UserRole
InvitableRole = Annotated[
    UserRole, one_of(INVITABLE_ROLES, "Role must be admin, developer, or auditor")
]

TenantName = Annotated[
    str, text_rule(100, "Tenant name is too long", required="Tenant name is required")
]


class TenantUpdate(UpdateSchema):
    name: TenantName | None = None


class MemberInvite(InputSchema):
    email: Annotated[str, email_rule()]
    role: InvitableRole


class MemberRoleUpdate(InputSchema):
    role: InvitableRole


class InvitationAccept(InputSchema):
    token: Annotated[str, text_rule(4096, "Token is too long", required="Token is required")]


class TenantRead(BaseModel):
    id: UUID
    name: str
    owner_id: UUID
    subscription_tier: str
    max_projects: int
    max_team_members: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MemberRead(BaseModel):
    """A membership joined with the member's profile."""

    user_id: UUID
    email: str
    name: str
    avatar_url: str | None
    role: str
    joined_at: datetime


class TenantDetail(TenantRead):
    members: list[MemberRead]
    project_count: int
    member_count: int


class InvitationResponse(BaseModel):
    email: str
    role: str
    invitation_token: str
    email_sent: bool
