"""Tenant management: settings, members, invitations and limits."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.exceptions import (
    ConflictError,
    ForbiddenError,
    LimitExceededError,
    NotFoundError,
)
from src.portal.core.logging import get_logger
from src.portal.core.notifications import send_invitation_email
from src.portal.core.security import TokenType, create_invitation_token, decode_token
from src.portal.models import Tenant, TenantMember, User
from src.portal.models.base import utc_now
from src.portal.models.enums import INVITABLE_ROLES, UserRole
from src.portal.repositories import MembershipRepository, TenantRepository, UserRepository
from src.portal.schemas.tenant import (
    InvitationResponse,
    MemberRead,
    TenantDetail,
    TenantRead,
)
from src.portal.services.context import Actor

logger = get_logger(__name__)

_INVITABLE = frozenset(role.value for role in INVITABLE_ROLES)


async def ensure_project_capacity(tenant_repo: TenantRepository, tenant: Tenant) -> None:
    """Raise LimitExceededError when the tenant has used all its project slots."""
    if await tenant_repo.count_projects(tenant.id) >= tenant.max_projects:
        raise LimitExceededError(
            "Project limit reached for your subscription", "LIMIT_EXCEEDED_PROJECTS"
        )


async def ensure_member_capacity(tenant_repo: TenantRepository, tenant: Tenant) -> None:
    if await tenant_repo.count_members(tenant.id) >= tenant.max_team_members:
        raise LimitExceededError(
            "Team member limit reached for your subscription", "LIMIT_EXCEEDED_TEAM_MEMBERS"
        )


class TenantService:
    """Tenant operations. Authorization uses the actor's current membership role."""

    def __init__(
        self,
        tenant_repo: TenantRepository,
        membership_repo: MembershipRepository,
        user_repo: UserRepository,
        session: AsyncSession,
    ):
        self.tenant_repo = tenant_repo
        self.membership_repo = membership_repo
        self.user_repo = user_repo
        self.session = session

    async def _get_tenant(self, tenant_id: UUID) -> Tenant:
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            raise NotFoundError("Tenant not found", "TENANT_NOT_FOUND")
        return tenant

    # --- Queries ---

    async def get_tenant(self, tenant_id: UUID) -> TenantDetail:
        """Tenant with its members and usage counts."""
        tenant = await self._get_tenant(tenant_id)
        members = await self.get_members(tenant_id)
        project_count = await self.tenant_repo.count_projects(tenant_id)
        return TenantDetail(
            **TenantRead.model_validate(tenant).model_dump(),
            members=members,
            project_count=project_count,
            member_count=len(members),
        )

    async def get_members(self, tenant_id: UUID) -> list[MemberRead]:
        rows = await self.membership_repo.list_members(tenant_id)
        return [
            MemberRead(
                user_id=user.id,
                email=user.email,
                name=user.name,
                avatar_url=user.avatar_url,
                role=member.role,
                joined_at=member.created_at,
            )
            for member, user in rows
        ]

    # --- Commands ---

    async def update_tenant(self, actor: Actor, name: str | None) -> Tenant:
        """Rename the tenant. Only the owner may do this."""
        try:
            tenant = await self._get_tenant(actor.tenant_id)
            if tenant.owner_id != actor.user_id:
                raise ForbiddenError(
                    "Only the tenant owner can update tenant settings", "FORBIDDEN_NOT_OWNER"
                )
            if name is not None:
                tenant.name = name
            tenant.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(tenant)
            return tenant
        except Exception:
            await self.session.rollback()
            raise

    async def invite_user(self, actor: Actor, email: str, role: str) -> InvitationResponse:
        """Issue a signed invitation and email it.

        Raises:
            ForbiddenError: Actor is not owner/admin.
            LimitExceededError: Tenant is at its member limit.
            ConflictError: The email already belongs to a member.
        """
        actor.require_manager("Only owners and admins can invite members")
        if role not in _INVITABLE:
            raise ForbiddenError("Role cannot be assigned", "INVALID_ROLE")
        tenant = await self._get_tenant(actor.tenant_id)
        await ensure_member_capacity(self.tenant_repo, tenant)

        existing_user = await self.user_repo.get_by_email(email)
        if existing_user is not None:
            membership = await self.membership_repo.get_membership(
                existing_user.id, actor.tenant_id
            )
            if membership is not None:
                raise ConflictError(
                    "User is already a member of this tenant", "USER_ALREADY_MEMBER"
                )

        inviter = await self.user_repo.get_by_id(actor.user_id)
        token = create_invitation_token(actor.tenant_id, email, role, actor.user_id)
        sent = send_invitation_email(
            to=email,
            token=token,
            tenant_name=tenant.name,
            inviter_name=inviter.name if inviter else "A team member",
            role=role,
        )
        logger.info(
            "Member invited",
            tenant_id=str(actor.tenant_id),
            invited_by=str(actor.user_id),
            role=role,
            existing_user=existing_user is not None,
        )
        return InvitationResponse(email=email, role=role, invitation_token=token, email_sent=sent)

    async def add_member(self, tenant_id: UUID, user_id: UUID, role: str) -> TenantMember:
        """Add a user to a tenant, enforcing the member limit (commits)."""
        try:
            await ensure_member_capacity(self.tenant_repo, await self._get_tenant(tenant_id))
            if await self.membership_repo.get_membership(user_id, tenant_id) is not None:
                raise ConflictError(
                    "User is already a member of this tenant", "USER_ALREADY_MEMBER"
                )
            membership = self.membership_repo.create_membership(user_id, tenant_id, role)
            await self.session.commit()
            logger.info("Member added", tenant_id=str(tenant_id), user_id=str(user_id), role=role)
            return membership
        except Exception:
            await self.session.rollback()
            raise

    async def accept_invitation(self, user: User, token: str) -> TenantMember:
        """Join the tenant named in an invitation addressed to this user's email."""
        payload = decode_token(token, TokenType.INVITATION)
        if payload is None:
            raise ForbiddenError("Invalid or expired invitation", "INVALID_INVITATION")
        if str(payload.get("email", "")).lower() != user.email.lower():
            raise ForbiddenError(
                "This invitation was sent to a different email address", "EMAIL_MISMATCH"
            )
        role = payload.get("role")
        if role not in _INVITABLE:
            raise ForbiddenError("Invalid or expired invitation", "INVALID_INVITATION")
        try:
            tenant_id = UUID(str(payload.get("tenant_id")))
        except ValueError as e:
            raise ForbiddenError("Invalid or expired invitation", "INVALID_INVITATION") from e
        return await self.add_member(tenant_id, user.id, role)

    async def update_member_role(self, actor: Actor, member_user_id: UUID, role: str) -> MemberRead:
        try:
            actor.require_manager("Only owners and admins can change roles")
            if role not in _INVITABLE:
                raise ForbiddenError("Role cannot be assigned", "INVALID_ROLE")
            membership = await self.membership_repo.get_membership(member_user_id, actor.tenant_id)
            if membership is None:
                raise NotFoundError("Member not found", "MEMBER_NOT_FOUND")
            if membership.role == UserRole.OWNER.value:
                raise ForbiddenError("Cannot change the owner's role", "CANNOT_CHANGE_OWNER_ROLE")

            previous = membership.role
            membership.role = role
            await self.session.commit()
            logger.info(
                "Member role changed",
                tenant_id=str(actor.tenant_id),
                member_id=str(member_user_id),
                changed_by=str(actor.user_id),
                old_role=previous,
                new_role=role,
            )
        except Exception:
            await self.session.rollback()
            raise

        user = await self.user_repo.get_by_id(member_user_id)
        return MemberRead(
            user_id=member_user_id,
            email=user.email if user else "",
            name=user.name if user else "",
            avatar_url=user.avatar_url if user else None,
            role=membership.role,
            joined_at=membership.created_at,
        )

    async def remove_member(self, actor: Actor, member_user_id: UUID) -> None:
        try:
            actor.require_manager("Only owners and admins can remove members")
            membership = await self.membership_repo.get_membership(member_user_id, actor.tenant_id)
            if membership is None:
                raise NotFoundError("Member not found", "MEMBER_NOT_FOUND")
            if membership.role == UserRole.OWNER.value:
                raise ForbiddenError("Cannot remove the tenant owner", "CANNOT_REMOVE_OWNER")

            await self.membership_repo.delete(membership)
            await self.session.commit()
            logger.info(
                "Member removed",
                tenant_id=str(actor.tenant_id),
                member_id=str(member_user_id),
                removed_by=str(actor.user_id),
            )
        except Exception:
            await self.session.rollback()
            raise
