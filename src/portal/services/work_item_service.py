"""Bugs, features and tasks.

The three item kinds share one service implementation parameterised by
repository and response model. Bugs and features can also be voted on,
including anonymously through public endpoints when the project allows it.
"""

from typing import Any, ClassVar
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.exceptions import ConflictError, ForbiddenError, NotFoundError, PortalError
from src.portal.core.logging import get_logger
from src.portal.models import Bug, Feature, Project, Task, WorkItemVote
from src.portal.models.base import utc_now
from src.portal.repositories import (
    AssignmentRepository,
    BugRepository,
    FeatureRepository,
    MembershipRepository,
    MilestoneRepository,
    ProjectRepository,
    TaskRepository,
    VoteRepository,
    WorkItemRepository,
)
from src.portal.schemas.work_item import BugRead, FeatureRead, TaskRead, VoteResponse
from src.portal.services.context import Actor
from src.portal.services.notification_service import NotificationService

logger = get_logger(__name__)


class WorkItemService[ItemType: (Bug, Feature, Task)]:
    """CRUD and assignment for one kind of work item."""

    read_model: ClassVar[type[BaseModel]]
    label: ClassVar[str]

    def __init__(
        self,
        repo: WorkItemRepository[ItemType],
        project_repo: ProjectRepository,
        membership_repo: MembershipRepository,
        assignment_repo: AssignmentRepository,
        notifier: NotificationService,
        session: AsyncSession,
    ):
        self.repo = repo
        self.project_repo = project_repo
        self.membership_repo = membership_repo
        self.assignment_repo = assignment_repo
        self.notifier = notifier
        self.session = session

    @property
    def item_type(self) -> str:
        return self.repo.item_type.value

    # --- Helpers ---

    async def _project(self, actor: Actor, project_id: UUID) -> Project:
        project = await self.project_repo.get_for_tenant(project_id, actor.tenant_id)
        if project is None:
            raise NotFoundError("Project not found", "PROJECT_NOT_FOUND")
        return project

    async def _get(self, project_id: UUID, item_id: UUID) -> ItemType:
        item = await self.repo.get_for_project(item_id, project_id)
        if item is None:
            raise NotFoundError(
                f"{self.label.capitalize()} not found", f"{self.label.upper()}_NOT_FOUND"
            )
        return item

    async def _check_owner(self, tenant_id: UUID, owner_id: UUID) -> None:
        if await self.membership_repo.get_membership(owner_id, tenant_id) is None:
            raise PortalError(
                "Owner must be a member of this tenant", "OWNER_NOT_TENANT_MEMBER"
            )

    async def _check_assignees(self, tenant_id: UUID, user_ids: list[UUID]) -> None:
        members = await self.membership_repo.member_ids(tenant_id, user_ids)
        if any(user_id not in members for user_id in user_ids):
            raise PortalError(
                "All assigned users must be members of this tenant",
                "ASSIGNED_USER_NOT_TENANT_MEMBER",
            )

    async def _validate_fields(
        self, actor: Actor, project_id: UUID, fields: dict[str, Any]
    ) -> None:
        """Kind-specific checks on create/update fields."""

    async def to_read(self, item: ItemType, assigned: list[UUID] | None = None) -> Any:
        if assigned is None:
            mapping = await self.assignment_repo.user_ids_for(self.item_type, [item.id])
            assigned = mapping.get(item.id, [])
        return self.read_model.model_validate(
            {**item.model_dump(), "assigned_user_ids": assigned}
        )

    async def _to_read_many(self, items: list[ItemType]) -> list[Any]:
        mapping = await self.assignment_repo.user_ids_for(self.item_type, [i.id for i in items])
        return [await self.to_read(item, mapping.get(item.id, [])) for item in items]

    # --- Queries ---

    async def list_items(self, actor: Actor, project_id: UUID) -> list[Any]:
        await self._project(actor, project_id)
        return await self._to_read_many(await self.repo.list_for_project(project_id))

    async def get_item(self, actor: Actor, project_id: UUID, item_id: UUID) -> Any:
        await self._project(actor, project_id)
        return await self.to_read(await self._get(project_id, item_id))

    # --- Commands ---

    async def create_item(self, actor: Actor, project_id: UUID, data: BaseModel) -> Any:
        """Create an item owned by `owner_id` (the creator when omitted).

        Raises:
            NotFoundError: Project missing or outside the tenant.
            PortalError: Owner or an assignee is not a tenant member.
        """
        try:
            project = await self._project(actor, project_id)
            fields = data.model_dump()
            assigned: list[UUID] = fields.pop("assigned_user_ids", [])
            owner_id = fields.pop("owner_id", None) or actor.user_id

            await self._check_owner(actor.tenant_id, owner_id)
            await self._check_assignees(actor.tenant_id, assigned)
            await self._validate_fields(actor, project_id, fields)

            item = self.repo.model(
                project_id=project_id,
                owner_id=owner_id,
                created_by_id=actor.user_id,
                **fields,
            )
            self.repo.add(item)
            await self.session.flush()
            if assigned:
                await self.assignment_repo.replace(self.item_type, item.id, assigned)
            await self.notifier.item_created(actor, self.item_type, item.id, item.title, project)
            await self.notifier.item_assigned(
                actor, self.item_type, item.id, item.title, project, assigned
            )
            await self.session.commit()
            await self.session.refresh(item)
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            f"{self.label.capitalize()} created",
            item_id=str(item.id),
            project_id=str(project_id),
            created_by=str(actor.user_id),
        )
        return await self.to_read(item, list(dict.fromkeys(assigned)))

    async def update_item(
        self, actor: Actor, project_id: UUID, item_id: UUID, data: Any
    ) -> Any:
        try:
            await self._project(actor, project_id)
            item = await self._get(project_id, item_id)
            changes = data.changes()
            if "owner_id" in changes:
                await self._check_owner(actor.tenant_id, changes["owner_id"])
            await self._validate_fields(actor, project_id, changes)

            for field, value in changes.items():
                setattr(item, field, value)
            item.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(item)
        except Exception:
            await self.session.rollback()
            raise
        return await self.to_read(item)

    async def delete_item(self, actor: Actor, project_id: UUID, item_id: UUID) -> None:
        try:
            await self._project(actor, project_id)
            item = await self._get(project_id, item_id)
            await self.assignment_repo.clear(self.item_type, item.id)
            await self._cleanup(item)
            await self.repo.delete(item)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(
            f"{self.label.capitalize()} deleted",
            item_id=str(item_id),
            project_id=str(project_id),
            deleted_by=str(actor.user_id),
        )

    async def _cleanup(self, item: ItemType) -> None:
        """Remove rows that reference the item without a foreign key."""

    async def assign_users(
        self, actor: Actor, project_id: UUID, item_id: UUID, user_ids: list[UUID]
    ) -> Any:
        """Replace the item's assignees. Only newly added users are notified."""
        try:
            project = await self._project(actor, project_id)
            item = await self._get(project_id, item_id)
            await self._check_assignees(actor.tenant_id, user_ids)
            previous = await self.assignment_repo.user_ids_for(self.item_type, [item.id])
            await self.assignment_repo.replace(self.item_type, item.id, user_ids)
            added = [u for u in user_ids if u not in previous.get(item.id, [])]
            await self.notifier.item_assigned(
                actor, self.item_type, item.id, item.title, project, added
            )
            item.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(item)
        except Exception:
            await self.session.rollback()
            raise
        return await self.to_read(item, list(dict.fromkeys(user_ids)))


class VotableWorkItemService[ItemType: (Bug, Feature)](WorkItemService[ItemType]):
    """Adds one-vote-per-voter counting and public access."""

    public_flag: ClassVar[str]

    def __init__(
        self,
        repo: WorkItemRepository[ItemType],
        project_repo: ProjectRepository,
        membership_repo: MembershipRepository,
        assignment_repo: AssignmentRepository,
        vote_repo: VoteRepository,
        notifier: NotificationService,
        session: AsyncSession,
    ):
        super().__init__(repo, project_repo, membership_repo, assignment_repo, notifier, session)
        self.vote_repo = vote_repo

    async def _cleanup(self, item: ItemType) -> None:
        await self.vote_repo.clear(self.item_type, item.id)

    async def _public_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project not found", "PROJECT_NOT_FOUND")
        if not getattr(project, self.public_flag):
            raise ForbiddenError(
                f"Public {self.label} access is disabled for this project",
                "PUBLIC_ACCESS_DISABLED",
            )
        return project

    async def _record_vote(
        self, item: ItemType, user_id: UUID | None, ip_address: str
    ) -> VoteResponse:
        try:
            if await self.vote_repo.has_voted(self.item_type, item.id, user_id, ip_address):
                raise ConflictError(
                    f"You have already voted for this {self.label}", "ALREADY_VOTED"
                )
            self.vote_repo.add(
                WorkItemVote(
                    item_type=self.item_type,
                    item_id=item.id,
                    user_id=user_id,
                    ip_address=ip_address,
                )
            )
            item.votes += 1
            await self.session.commit()
            await self.session.refresh(item)
        except Exception:
            await self.session.rollback()
            raise
        logger.info(
            "Vote recorded",
            item_type=self.item_type,
            item_id=str(item.id),
            anonymous=user_id is None,
        )
        return VoteResponse(id=item.id, votes=item.votes)

    async def vote(
        self, actor: Actor, project_id: UUID, item_id: UUID, ip_address: str
    ) -> VoteResponse:
        """Vote as a tenant member."""
        await self._project(actor, project_id)
        item = await self._get(project_id, item_id)
        return await self._record_vote(item, actor.user_id, ip_address)

    async def public_vote(
        self, project_id: UUID, item_id: UUID, ip_address: str, user_id: UUID | None = None
    ) -> VoteResponse:
        """Vote through the public page, one vote per IP for anonymous visitors."""
        await self._public_project(project_id)
        item = await self._get(project_id, item_id)
        return await self._record_vote(item, user_id, ip_address)

    async def list_public(self, project_id: UUID) -> list[Any]:
        await self._public_project(project_id)
        return await self._to_read_many(await self.repo.list_for_project(project_id))

    async def get_public(self, project_id: UUID, item_id: UUID) -> Any:
        await self._public_project(project_id)
        return await self.to_read(await self._get(project_id, item_id))


class BugService(VotableWorkItemService[Bug]):
    read_model = BugRead
    label = "bug"
    public_flag = "public_bug_tracking"

    repo: BugRepository


class FeatureService(VotableWorkItemService[Feature]):
    read_model = FeatureRead
    label = "feature"
    public_flag = "public_feature_requests"

    repo: FeatureRepository


class TaskService(WorkItemService[Task]):
    read_model = TaskRead
    label = "task"

    repo: TaskRepository

    def __init__(
        self,
        repo: TaskRepository,
        project_repo: ProjectRepository,
        membership_repo: MembershipRepository,
        assignment_repo: AssignmentRepository,
        milestone_repo: MilestoneRepository,
        notifier: NotificationService,
        session: AsyncSession,
    ):
        super().__init__(repo, project_repo, membership_repo, assignment_repo, notifier, session)
        self.milestone_repo = milestone_repo

    async def _validate_fields(
        self, actor: Actor, project_id: UUID, fields: dict[str, Any]
    ) -> None:
        milestone_id = fields.get("milestone_id")
        if milestone_id is None:
            return
        if await self.milestone_repo.get_for_project(milestone_id, project_id) is None:
            raise NotFoundError("Milestone not found", "MILESTONE_NOT_FOUND")
