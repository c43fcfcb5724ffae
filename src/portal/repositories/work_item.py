"""Repositories for bugs, features, tasks and their assignments and votes."""

from collections import defaultdict
from uuid import UUID

from sqlalchemy import delete, or_
from sqlmodel import select

from src.portal.models import (
    Bug,
    Feature,
    Task,
    WorkItemAssignment,
    WorkItemType,
    WorkItemVote,
)
from src.portal.repositories.base import BaseRepository


class WorkItemRepository[ItemType: (Bug, Feature, Task)](BaseRepository[ItemType]):
    """Shared queries over one work item table."""

    item_type: WorkItemType

    async def list_for_project(self, project_id: UUID) -> list[ItemType]:
        """Highest priority first, then newest."""
        result = await self.session.execute(
            select(self.model)
            .where(self.model.project_id == project_id)
            .order_by(self.model.priority.desc(), self.model.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    async def get_for_project(self, item_id: UUID, project_id: UUID) -> ItemType | None:
        result = await self.session.execute(
            select(self.model).where(
                self.model.id == item_id,
                self.model.project_id == project_id,
            )
        )
        return result.scalar_one_or_none()


class BugRepository(WorkItemRepository[Bug]):
    model = Bug
    item_type = WorkItemType.BUG


class FeatureRepository(WorkItemRepository[Feature]):
    model = Feature
    item_type = WorkItemType.FEATURE


class TaskRepository(WorkItemRepository[Task]):
    model = Task
    item_type = WorkItemType.TASK


class AssignmentRepository(BaseRepository[WorkItemAssignment]):
    model = WorkItemAssignment

    async def user_ids_for(self, item_type: str, item_ids: list[UUID]) -> dict[UUID, list[UUID]]:
        """Assigned user ids keyed by item id."""
        assigned: dict[UUID, list[UUID]] = defaultdict(list)
        if not item_ids:
            return assigned
        result = await self.session.execute(
            select(WorkItemAssignment).where(
                WorkItemAssignment.item_type == item_type,
                WorkItemAssignment.item_id.in_(item_ids),  # type: ignore[attr-defined]
            )
        )
        for row in result.scalars().all():
            assigned[row.item_id].append(row.user_id)
        return assigned

    async def replace(self, item_type: str, item_id: UUID, user_ids: list[UUID]) -> None:
        """Replace the assignee set of one item (no commit)."""
        await self.session.execute(
            delete(WorkItemAssignment).where(
                WorkItemAssignment.item_type == item_type,  # type: ignore[arg-type]
                WorkItemAssignment.item_id == item_id,  # type: ignore[arg-type]
            )
        )
        for user_id in dict.fromkeys(user_ids):
            self.session.add(
                WorkItemAssignment(item_type=item_type, item_id=item_id, user_id=user_id)
            )

    async def clear(self, item_type: str, item_id: UUID) -> None:
        await self.replace(item_type, item_id, [])


class VoteRepository(BaseRepository[WorkItemVote]):
    model = WorkItemVote

    async def has_voted(
        self,
        item_type: str,
        item_id: UUID,
        user_id: UUID | None,
        ip_address: str,
    ) -> bool:
        """True if this user, or this IP when anonymous, already voted."""
        voter = (
            or_(WorkItemVote.user_id == user_id, WorkItemVote.ip_address == ip_address)  # type: ignore[arg-type]
            if user_id is not None
            else WorkItemVote.ip_address == ip_address
        )
        result = await self.session.execute(
            select(WorkItemVote.id)
            .where(
                WorkItemVote.item_type == item_type,
                WorkItemVote.item_id == item_id,
                voter,
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def clear(self, item_type: str, item_id: UUID) -> None:
        await self.session.execute(
            delete(WorkItemVote).where(
                WorkItemVote.item_type == item_type,  # type: ignore[arg-type]
                WorkItemVote.item_id == item_id,  # type: ignore[arg-type]
            )
        )
