"""Repositories for projects and their environment variables."""

from uuid import UUID

from sqlmodel import select

from src.portal.models import EnvVar, Project
from src.portal.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Projects, always filtered by the owning tenant."""

    model = Project

    async def get_for_tenant(self, project_id: UUID, tenant_id: UUID) -> Project | None:
        result = await self.session.execute(
            select(Project).where(Project.id == project_id, Project.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def list_for_tenant(
        self,
        tenant_id: UUID,
        cursor: str | None = None,
        limit: int = 100,
    ) -> tuple[list[Project], str | None, bool]:
        """List a tenant's projects newest first with cursor pagination."""
        query = select(Project).where(Project.tenant_id == tenant_id)
        return await self.paginate(query, cursor, limit, Project.created_at)

    async def get_latest_for_tenant(self, tenant_id: UUID) -> Project | None:
        """Most recently created project, the default page selection."""
        result = await self.session.execute(
            select(Project)
            .where(Project.tenant_id == tenant_id)
            .order_by(Project.created_at.desc())  # type: ignore[attr-defined]
            .limit(1)
        )
        return result.scalar_one_or_none()


class EnvVarRepository(BaseRepository[EnvVar]):
    model = EnvVar

    async def list_for_project(self, project_id: UUID) -> list[EnvVar]:
        """Env vars of a project ordered by environment, then key."""
        result = await self.session.execute(
            select(EnvVar)
            .where(EnvVar.project_id == project_id)
            .order_by(EnvVar.environment, EnvVar.key)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())

    async def get_for_project(self, env_var_id: UUID, project_id: UUID) -> EnvVar | None:
        result = await self.session.execute(
            select(EnvVar).where(EnvVar.id == env_var_id, EnvVar.project_id == project_id)
        )
        return result.scalar_one_or_none()

    async def get_by_key(self, project_id: UUID, key: str, environment: str) -> EnvVar | None:
        result = await self.session.execute(
            select(EnvVar).where(
                EnvVar.project_id == project_id,
                EnvVar.key == key,
                EnvVar.environment == environment,
            )
        )
        return result.scalar_one_or_none()
