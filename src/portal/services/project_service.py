"""Project management within a tenant."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.exceptions import NotFoundError
from src.portal.core.logging import get_logger
from src.portal.models import Project
from src.portal.models.base import utc_now
from src.portal.repositories import ProjectRepository, TenantRepository
from src.portal.schemas.project import ProjectCreate, ProjectUpdate
from src.portal.services.context import Actor
from src.portal.services.tenant_service import ensure_project_capacity

logger = get_logger(__name__)


class ProjectService:
    def __init__(
        self,
        project_repo: ProjectRepository,
        tenant_repo: TenantRepository,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.tenant_repo = tenant_repo
        self.session = session

    async def get_project(self, tenant_id: UUID, project_id: UUID) -> Project:
        """Fetch a project of the tenant.

        Raises:
            NotFoundError: Unknown id, or the project belongs to another tenant.
        """
        project = await self.project_repo.get_for_tenant(project_id, tenant_id)
        if project is None:
            raise NotFoundError("Project not found", "PROJECT_NOT_FOUND")
        return project

    async def list_projects(
        self, tenant_id: UUID, cursor: str | None = None, limit: int = 50
    ) -> tuple[list[Project], str | None, bool]:
        return await self.project_repo.list_for_tenant(tenant_id, cursor, limit)

    async def create_project(self, actor: Actor, data: ProjectCreate) -> Project:
        try:
            tenant = await self.tenant_repo.get_by_id(actor.tenant_id)
            if tenant is None:
                raise NotFoundError("Tenant not found", "TENANT_NOT_FOUND")
            await ensure_project_capacity(self.tenant_repo, tenant)

            project = Project(tenant_id=actor.tenant_id, **data.model_dump())
            self.project_repo.add(project)
            await self.session.commit()
            await self.session.refresh(project)
            logger.info(
                "Project created",
                project_id=str(project.id),
                tenant_id=str(actor.tenant_id),
                created_by=str(actor.user_id),
            )
            return project
        except Exception:
            await self.session.rollback()
            raise

    async def update_project(self, actor: Actor, project_id: UUID, data: ProjectUpdate) -> Project:
        try:
            project = await self.get_project(actor.tenant_id, project_id)
            for field, value in data.changes().items():
                setattr(project, field, value)
            project.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(project)
            return project
        except Exception:
            await self.session.rollback()
            raise

    async def delete_project(self, actor: Actor, project_id: UUID) -> None:
        try:
            project = await self.get_project(actor.tenant_id, project_id)
            await self.project_repo.delete(project)
            await self.session.commit()
            logger.info(
                "Project deleted",
                project_id=str(project_id),
                tenant_id=str(actor.tenant_id),
                deleted_by=str(actor.user_id),
            )
        except Exception:
            await self.session.rollback()
            raise
