"""Repositories for tenants and memberships."""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import select

from src.portal.models import MANAGER_ROLES, Project, Tenant, TenantMember, User
from src.portal.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    model = Tenant

    async def count_projects(self, tenant_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Project).where(Project.tenant_id == tenant_id)
        )
        return int(result.scalar_one())

    async def count_members(self, tenant_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(TenantMember)
            .where(TenantMember.tenant_id == tenant_id)
        )
        return int(result.scalar_one())


class MembershipRepository(BaseRepository[TenantMember]):
    model = TenantMember

    async def get_membership(self, user_id: UUID, tenant_id: UUID) -> TenantMember | None:
        result = await self.session.execute(
            select(TenantMember).where(
                TenantMember.user_id == user_id,
                TenantMember.tenant_id == tenant_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_first_for_user(self, user_id: UUID) -> TenantMember | None:
        """Oldest membership of a user, the tenant they land in after login."""
        result = await self.session.execute(
            select(TenantMember)
            .where(TenantMember.user_id == user_id)
            .order_by(TenantMember.created_at)  # type: ignore[arg-type]
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_members(self, tenant_id: UUID) -> list[tuple[TenantMember, User]]:
        """Memberships of a tenant joined with the user rows, oldest first."""
        result = await self.session.execute(
            select(TenantMember, User)
            .join(User, User.id == TenantMember.user_id)  # type: ignore[arg-type]
            .where(TenantMember.tenant_id == tenant_id)
            .order_by(TenantMember.created_at)  # type: ignore[arg-type]
        )
        return [(member, user) for member, user in result.all()]

    async def member_ids(self, tenant_id: UUID, user_ids: list[UUID]) -> set[UUID]:
        """Subset of `user_ids` that belong to the tenant."""
        if not user_ids:
            return set()
        result = await self.session.execute(
            select(TenantMember.user_id).where(
                TenantMember.tenant_id == tenant_id,
                TenantMember.user_id.in_(user_ids),  # type: ignore[attr-defined]
            )
        )
        return set(result.scalars().all())

    async def manager_ids(self, tenant_id: UUID) -> list[UUID]:
        """Owners and admins of the tenant."""
        result = await self.session.execute(
            select(TenantMember.user_id)
            .where(
                TenantMember.tenant_id == tenant_id,
                TenantMember.role.in_(MANAGER_ROLES),  # type: ignore[attr-defined]
            )
            .order_by(TenantMember.created_at)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())

    def create_membership(self, user_id: UUID, tenant_id: UUID, role: str) -> TenantMember:
        """Create a new membership (add to session, no commit)."""
        membership = TenantMember(user_id=user_id, tenant_id=tenant_id, role=role)
        self.session.add(membership)
        return membership
