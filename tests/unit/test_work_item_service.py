"""Unit tests for bug, feature and task services."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.portal.core.exceptions import ConflictError, ForbiddenError, NotFoundError, PortalError
from src.portal.models import Bug, Feature, Task
from src.portal.models.enums import WorkItemType
from src.portal.schemas import BugCreate, FeatureCreate, TaskCreate, TaskUpdate
from src.portal.services import BugService, FeatureService, NotificationService, TaskService
from tests.factories import BugFactory, ProjectFactory, TaskFactory, UserFactory

pytestmark = pytest.mark.unit


def item_repo(model, item_type: WorkItemType) -> AsyncMock:
    repo = AsyncMock()
    repo.model = model
    repo.item_type = item_type
    repo.add = MagicMock()
    return repo


@pytest.fixture
def project(tenant_id):
    return ProjectFactory.build(tenant_id=tenant_id)


@pytest.fixture
def project_repo(project) -> AsyncMock:
    repo = AsyncMock()
    repo.get_for_tenant.return_value = project
    repo.get_by_id.return_value = project
    return repo


@pytest.fixture
def member_ids() -> set:
    """User ids the mocked membership repository treats as tenant members."""
    return set()


@pytest.fixture
def membership_repo(member_ids) -> AsyncMock:
    repo = AsyncMock()

    async def get_membership(user_id, tenant_id):
        return object() if user_id in member_ids else None

    async def filter_members(tenant_id, user_ids):
        return {user_id for user_id in user_ids if user_id in member_ids}

    repo.get_membership.side_effect = get_membership
    repo.member_ids.side_effect = filter_members
    repo.manager_ids.return_value = []
    return repo


@pytest.fixture
def assignment_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.user_ids_for.return_value = {}
    return repo


@pytest.fixture
def vote_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.add = MagicMock()
    repo.has_voted.return_value = False
    return repo


@pytest.fixture
def notification_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.add_all = MagicMock()
    return repo


@pytest.fixture
def notifier(notification_repo, membership_repo, mock_session) -> NotificationService:
    user_repo = AsyncMock()
    user_repo.get_by_id.return_value = UserFactory.build(name="Ada Admin")
    return NotificationService(notification_repo, membership_repo, user_repo, mock_session)


@pytest.fixture
def bug_repo() -> AsyncMock:
    return item_repo(Bug, WorkItemType.BUG)


@pytest.fixture
def bugs(
    bug_repo, project_repo, membership_repo, assignment_repo, vote_repo, notifier, mock_session
):
    return BugService(
        bug_repo, project_repo, membership_repo, assignment_repo, vote_repo, notifier, mock_session
    )


class TestCreate:
    async def test_owner_defaults_to_creator(
        self, bugs, developer, project, bug_repo, assignment_repo, member_ids
    ):
        member_ids.add(developer.user_id)

        result = await bugs.create_item(
            developer, project.id, BugCreate(title="Crash", description="On save")
        )

        created = bug_repo.add.call_args.args[0]
        assert created.owner_id == developer.user_id
        assert created.created_by_id == developer.user_id
        assert created.project_id == project.id
        assert result.votes == 0
        assert result.assigned_user_ids == []
        assignment_repo.replace.assert_not_awaited()

    async def test_assignees_saved_once(
        self, bugs, developer, project, assignment_repo, member_ids
    ):
        teammate = uuid4()
        member_ids.update({developer.user_id, teammate})

        result = await bugs.create_item(
            developer,
            project.id,
            BugCreate(
                title="Crash", description="On save", assigned_user_ids=[teammate, teammate]
            ),
        )

        assert result.assigned_user_ids == [teammate]
        assert assignment_repo.replace.await_args.args[0] == "bug"

    async def test_owner_must_be_member(self, bugs, developer, project, member_ids, mock_session):
        member_ids.add(developer.user_id)

        with pytest.raises(PortalError) as exc_info:
            await bugs.create_item(
                developer,
                project.id,
                BugCreate(title="Crash", description="On save", owner_id=uuid4()),
            )

        assert exc_info.value.code == "OWNER_NOT_TENANT_MEMBER"
        mock_session.rollback.assert_awaited_once()

    async def test_assignees_must_be_members(self, bugs, developer, project, member_ids):
        member_ids.add(developer.user_id)

        with pytest.raises(PortalError) as exc_info:
            await bugs.create_item(
                developer,
                project.id,
                BugCreate(title="Crash", description="On save", assigned_user_ids=[uuid4()]),
            )

        assert exc_info.value.code == "ASSIGNED_USER_NOT_TENANT_MEMBER"

    async def test_project_of_other_tenant(self, bugs, developer, project_repo):
        project_repo.get_for_tenant.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await bugs.list_items(developer, uuid4())

        assert exc_info.value.code == "PROJECT_NOT_FOUND"


class TestReadAndDelete:
    async def test_missing_item_code_names_kind(self, bugs, developer, project, bug_repo):
        bug_repo.get_for_project.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await bugs.get_item(developer, project.id, uuid4())

        assert exc_info.value.code == "BUG_NOT_FOUND"
        assert str(exc_info.value) == "Bug not found"

    async def test_list_attaches_assignees(
        self, bugs, developer, project, bug_repo, assignment_repo
    ):
        first, second = BugFactory.batch(2, project_id=project.id)
        assignee = uuid4()
        bug_repo.list_for_project.return_value = [first, second]
        assignment_repo.user_ids_for.return_value = {first.id: [assignee]}

        result = await bugs.list_items(developer, project.id)

        assert [r.assigned_user_ids for r in result] == [[assignee], []]

    async def test_delete_clears_assignments_and_votes(
        self, bugs, developer, project, bug_repo, assignment_repo, vote_repo
    ):
        bug = BugFactory.build(project_id=project.id)
        bug_repo.get_for_project.return_value = bug

        await bugs.delete_item(developer, project.id, bug.id)

        assignment_repo.clear.assert_awaited_once_with("bug", bug.id)
        vote_repo.clear.assert_awaited_once_with("bug", bug.id)
        bug_repo.delete.assert_awaited_once_with(bug)


class TestVoting:
    async def test_vote_increments(self, bugs, developer, project, bug_repo, vote_repo):
        bug = BugFactory.build(project_id=project.id, votes=3)
        bug_repo.get_for_project.return_value = bug

        result = await bugs.vote(developer, project.id, bug.id, "10.0.0.1")

        assert result.votes == 4
        recorded = vote_repo.add.call_args.args[0]
        assert recorded.user_id == developer.user_id
        assert recorded.item_type == "bug"

    async def test_second_vote_conflicts(
        self, bugs, developer, project, bug_repo, vote_repo, mock_session
    ):
        bug = BugFactory.build(project_id=project.id, votes=1)
        bug_repo.get_for_project.return_value = bug
        vote_repo.has_voted.return_value = True

        with pytest.raises(ConflictError) as exc_info:
            await bugs.vote(developer, project.id, bug.id, "10.0.0.1")

        assert exc_info.value.code == "ALREADY_VOTED"
        assert bug.votes == 1
        mock_session.rollback.assert_awaited_once()

    async def test_public_vote_disabled(self, bugs, project, bug_repo):
        project.public_bug_tracking = False

        with pytest.raises(ForbiddenError) as exc_info:
            await bugs.public_vote(project.id, uuid4(), "10.0.0.1")

        assert exc_info.value.code == "PUBLIC_ACCESS_DISABLED"
        bug_repo.get_for_project.assert_not_awaited()

    async def test_public_vote_anonymous(self, bugs, project, bug_repo, vote_repo):
        project.public_bug_tracking = True
        bug = BugFactory.build(project_id=project.id)
        bug_repo.get_for_project.return_value = bug

        result = await bugs.public_vote(project.id, bug.id, "203.0.113.9")

        assert result.votes == 1
        vote_repo.has_voted.assert_awaited_once_with("bug", bug.id, None, "203.0.113.9")

    async def test_feature_flag_is_separate(
        self,
        project,
        project_repo,
        membership_repo,
        assignment_repo,
        vote_repo,
        notifier,
        mock_session,
    ):
        """Public bug tracking does not open the feature board."""
        project.public_bug_tracking = True
        project.public_feature_requests = False
        features = FeatureService(
            item_repo(Feature, WorkItemType.FEATURE),
            project_repo,
            membership_repo,
            assignment_repo,
            vote_repo,
            notifier,
            mock_session,
        )

        with pytest.raises(ForbiddenError):
            await features.list_public(project.id)

    async def test_feature_create(
        self,
        project,
        project_repo,
        membership_repo,
        assignment_repo,
        vote_repo,
        notifier,
        mock_session,
        owner,
        member_ids,
    ):
        member_ids.add(owner.user_id)
        repo = item_repo(Feature, WorkItemType.FEATURE)
        features = FeatureService(
            repo, project_repo, membership_repo, assignment_repo, vote_repo, notifier, mock_session
        )

        result = await features.create_item(
            owner, project.id, FeatureCreate(title="Dark mode", description="Please")
        )

        assert result.status == "proposed"


class TestTasks:
    @pytest.fixture
    def milestone_repo(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def task_repo(self) -> AsyncMock:
        return item_repo(Task, WorkItemType.TASK)

    @pytest.fixture
    def tasks(
        self,
        task_repo,
        project_repo,
        membership_repo,
        assignment_repo,
        milestone_repo,
        notifier,
        mock_session,
    ):
        return TaskService(
            task_repo,
            project_repo,
            membership_repo,
            assignment_repo,
            milestone_repo,
            notifier,
            mock_session,
        )

    async def test_unknown_milestone(self, tasks, developer, project, milestone_repo, member_ids):
        member_ids.add(developer.user_id)
        milestone_repo.get_for_project.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await tasks.create_item(
                developer, project.id, TaskCreate(title="Ship", milestone_id=uuid4())
            )

        assert exc_info.value.code == "MILESTONE_NOT_FOUND"

    async def test_clear_milestone(self, tasks, developer, project, task_repo, milestone_repo):
        task = TaskFactory.build(project_id=project.id, milestone_id=uuid4())
        task_repo.get_for_project.return_value = task

        result = await tasks.update_item(
            developer, project.id, task.id, TaskUpdate.model_validate({"milestone_id": None})
        )

        assert result.milestone_id is None
        milestone_repo.get_for_project.assert_not_awaited()

    async def test_create_notifies_managers(
        self, tasks, developer, owner, project, membership_repo, notification_repo, member_ids
    ):
        member_ids.add(developer.user_id)
        membership_repo.manager_ids.return_value = [owner.user_id]

        await tasks.create_item(developer, project.id, TaskCreate(title="Ship"))

        (notification,) = notification_repo.add_all.call_args.args[0]
        assert notification.user_id == owner.user_id
        assert notification.type == "task_created"
        assert notification.title == "New Task Created"
        assert notification.message == f'A new task "Ship" was created in project "{project.name}"'


class TestNotifications:
    async def test_creator_is_not_notified(
        self, bugs, admin, owner, project, membership_repo, notification_repo, member_ids
    ):
        member_ids.add(admin.user_id)
        membership_repo.manager_ids.return_value = [owner.user_id, admin.user_id]

        result = await bugs.create_item(
            admin, project.id, BugCreate(title="Crash", description="On save")
        )

        notification_repo.add_all.assert_called_once()
        (notification,) = notification_repo.add_all.call_args.args[0]
        assert notification.user_id == owner.user_id
        assert notification.tenant_id == admin.tenant_id
        assert notification.type == "bug_created"
        assert notification.title == "New Bug Reported"
        assert (notification.resource_type, notification.resource_id) == ("bug", result.id)
        assert notification.project_id == project.id

    async def test_assignees_told_who_assigned_them(
        self, bugs, admin, project, notification_repo, member_ids
    ):
        teammate = uuid4()
        member_ids.update({admin.user_id, teammate})

        await bugs.create_item(
            admin,
            project.id,
            BugCreate(
                title="Crash", description="On save", assigned_user_ids=[teammate, admin.user_id]
            ),
        )

        (notification,) = notification_repo.add_all.call_args.args[0]
        assert notification.user_id == teammate
        assert notification.type == "bug_assigned"
        assert notification.title == "Bug Assigned"
        assert notification.message == 'You were assigned to bug "Crash" by Ada Admin'

    async def test_reassignment_notifies_only_new_assignees(
        self, bugs, admin, project, bug_repo, assignment_repo, notification_repo, member_ids
    ):
        bug = BugFactory.build(project_id=project.id)
        bug_repo.get_for_project.return_value = bug
        existing, newcomer = uuid4(), uuid4()
        member_ids.update({existing, newcomer})
        assignment_repo.user_ids_for.return_value = {bug.id: [existing]}

        await bugs.assign_users(admin, project.id, bug.id, [existing, newcomer])

        (notification,) = notification_repo.add_all.call_args.args[0]
        assert notification.user_id == newcomer

    async def test_rejected_item_stages_nothing(
        self, bugs, developer, project, notification_repo, member_ids
    ):
        member_ids.add(developer.user_id)

        with pytest.raises(PortalError):
            await bugs.create_item(
                developer,
                project.id,
                BugCreate(title="Crash", description="On save", assigned_user_ids=[uuid4()]),
            )

        notification_repo.add_all.assert_not_called()
