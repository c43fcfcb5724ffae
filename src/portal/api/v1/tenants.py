"""Tenant settings and membership endpoints.

The tenant is always the one the access token was issued for.
"""

from uuid import UUID

from fastapi import APIRouter, status

from src.portal.api.dependencies import CurrentActor, CurrentUser, TenantServiceDep
from src.portal.schemas.tenant import (
    InvitationAccept,
    InvitationResponse,
    MemberInvite,
    MemberRead,
    MemberRoleUpdate,
    TenantDetail,
    TenantRead,
    TenantUpdate,
)

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.get("/current", response_model=TenantDetail)
async def get_current_tenant(actor: CurrentActor, service: TenantServiceDep) -> TenantDetail:
    return await service.get_tenant(actor.tenant_id)


@router.patch(
    "/current",
    response_model=TenantRead,
    responses={403: {"description": "Only the tenant owner can update settings"}},
)
async def update_current_tenant(
    data: TenantUpdate, actor: CurrentActor, service: TenantServiceDep
) -> TenantRead:
    tenant = await service.update_tenant(actor, data.changes().get("name"))
    return TenantRead.model_validate(tenant)


@router.get("/current/members", response_model=list[MemberRead])
async def list_members(actor: CurrentActor, service: TenantServiceDep) -> list[MemberRead]:
    return await service.get_members(actor.tenant_id)


@router.post(
    "/current/invitations",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Insufficient role or member limit reached"},
        409: {"description": "User is already a member"},
    },
)
async def invite_member(
    data: MemberInvite, actor: CurrentActor, service: TenantServiceDep
) -> InvitationResponse:
    return await service.invite_user(actor, data.email, data.role)


@router.post(
    "/invitations/accept",
    response_model=MemberRead,
    responses={403: {"description": "Invalid invitation or email mismatch"}},
)
async def accept_invitation(
    data: InvitationAccept, user: CurrentUser, service: TenantServiceDep
) -> MemberRead:
    """Join the inviting tenant. Sign in again with that tenant to use it."""
    membership = await service.accept_invitation(user, data.token)
    return MemberRead(
        user_id=user.id,
        email=user.email,
        name=user.name,
        avatar_url=user.avatar_url,
        role=membership.role,
        joined_at=membership.created_at,
    )


@router.patch("/current/members/{user_id}", response_model=MemberRead)
async def update_member_role(
    user_id: UUID, data: MemberRoleUpdate, actor: CurrentActor, service: TenantServiceDep
) -> MemberRead:
    return await service.update_member_role(actor, user_id, data.role)


@router.delete("/current/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(user_id: UUID, actor: CurrentActor, service: TenantServiceDep) -> None:
    await service.remove_member(actor, user_id)
