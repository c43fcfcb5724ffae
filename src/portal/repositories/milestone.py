"""Repository for project milestones."""

from uuid import UUID

from sqlmodel import select

from src.portal.models import Milestone
from src.portal.repositories.base import BaseRepository


class MilestoneRepository(BaseRepository[Milestone]):
    model = Milestone

    async def list_for_project(self, project_id: UUID) -> list[Milestone]:
        """Milestones in display order."""
        result = await self.session.execute(
            select(Milestone)
            .where(Milestone.project_id == project_id)
            .order_by(Milestone.order, Milestone.estimated_completion_date)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())

    async def get_for_project(self, milestone_id: UUID, project_id: UUID) -> Milestone | None:
        result = await self.session.execute(
            select(Milestone).where(
                Milestone.id == milestone_id,
                Milestone.project_id == project_id,
            )
        )
        return result.scalar_one_or_none()
