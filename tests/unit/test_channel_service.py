"""Unit tests for channel visibility, permissions and messages."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.portal.core.exceptions import ForbiddenError, NotFoundError, PortalError
from src.portal.models import Message
from src.portal.schemas import ChannelCreate, ChannelPermissionsUpdate, ChannelUpdate
from src.portal.services import ChannelService
from src.portal.services.channel_service import MAX_MESSAGE_PAGE, effective_access
from tests.factories import (
    ChannelFactory,
    ChannelPermissionFactory,
    ProjectFactory,
    utc_now,
)

pytestmark = pytest.mark.unit


class TestEffectiveAccess:
    def test_public_channel_without_grant(self):
        access = effective_access(ChannelFactory.build(project_id=uuid4()), None)

        assert (access.can_view, access.can_post) == (True, True)

    def test_private_channel_without_grant(self):
        access = effective_access(ChannelFactory.private(project_id=uuid4()), None)

        assert (access.can_view, access.can_post) == (False, False)

    def test_explicit_grant_wins(self):
        channel = ChannelFactory.build(project_id=uuid4())
        grant = ChannelPermissionFactory.build(
            channel_id=channel.id, user_id=uuid4(), can_view=True, can_post=False
        )

        access = effective_access(channel, grant)

        assert (access.can_view, access.can_post) == (True, False)


@pytest.fixture
def project(tenant_id):
    return ProjectFactory.build(tenant_id=tenant_id)


@pytest.fixture
def channel_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.add = MagicMock()
    return repo


@pytest.fixture
def permission_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.add = MagicMock()
    repo.get.return_value = None
    return repo


@pytest.fixture
def message_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.add = MagicMock()
    repo.list_recent.return_value = []
    return repo


@pytest.fixture
def membership_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.member_ids.return_value = set()
    return repo


@pytest.fixture
def service(
    channel_repo, permission_repo, message_repo, project, membership_repo, mock_session
) -> ChannelService:
    project_repo = AsyncMock()
    project_repo.get_for_tenant.return_value = project
    return ChannelService(
        channel_repo, permission_repo, message_repo, project_repo, membership_repo, mock_session
    )


class TestVisibility:
    async def test_private_channel_looks_missing(self, service, developer, project, channel_repo):
        channel = ChannelFactory.private(project_id=project.id)
        channel_repo.get_for_project.return_value = channel

        with pytest.raises(NotFoundError) as exc_info:
            await service.get_channel(developer, project.id, channel.id)

        assert exc_info.value.code == "CHANNEL_NOT_FOUND"

    async def test_managers_do_not_bypass_private_channels(
        self, service, owner, project, channel_repo
    ):
        channel_repo.get_for_project.return_value = ChannelFactory.private(project_id=project.id)

        with pytest.raises(NotFoundError):
            await service.list_messages(owner, project.id, uuid4())

    async def test_granted_member_sees_private_channel(
        self, service, developer, project, channel_repo, permission_repo
    ):
        channel = ChannelFactory.private(project_id=project.id)
        channel_repo.get_for_project.return_value = channel
        permission_repo.get.return_value = ChannelPermissionFactory.build(
            channel_id=channel.id, user_id=developer.user_id, can_post=False
        )

        result = await service.get_channel(developer, project.id, channel.id)

        assert result.user_permissions.can_view is True
        assert result.user_permissions.can_post is False

    async def test_list_annotates_access(self, service, developer, project, channel_repo):
        public = ChannelFactory.build(project_id=project.id)
        private = ChannelFactory.private(project_id=project.id)
        grant = ChannelPermissionFactory.build(
            channel_id=private.id, user_id=developer.user_id, can_post=False
        )
        channel_repo.list_visible.return_value = [(public, None), (private, grant)]

        result = await service.list_channels(developer, project.id)

        assert [c.user_permissions.can_post for c in result] == [True, False]


class TestChannelCommands:
    async def test_private_creator_gets_grant(
        self, service, developer, project, permission_repo, mock_session
    ):
        result = await service.create_channel(
            developer, project.id, ChannelCreate(name="leads", is_private=True)
        )

        grant = permission_repo.add.call_args.args[0]
        assert grant.user_id == developer.user_id
        assert (grant.can_view, grant.can_post) == (True, True)
        assert result.user_permissions.can_post is True
        mock_session.commit.assert_awaited_once()

    async def test_public_channel_has_no_grant(self, service, developer, project, permission_repo):
        await service.create_channel(developer, project.id, ChannelCreate(name="general"))

        permission_repo.add.assert_not_called()

    async def test_only_creator_or_manager_updates(
        self, service, developer, admin, project, channel_repo
    ):
        channel = ChannelFactory.build(project_id=project.id, created_by_id=uuid4())
        channel_repo.get_for_project.return_value = channel

        with pytest.raises(ForbiddenError):
            await service.update_channel(
                developer, project.id, channel.id, ChannelUpdate(name="renamed")
            )
        result = await service.update_channel(
            admin, project.id, channel.id, ChannelUpdate(name="renamed")
        )

        assert result.name == "renamed"

    async def test_creator_deletes(self, service, developer, project, channel_repo):
        channel = ChannelFactory.build(project_id=project.id, created_by_id=developer.user_id)
        channel_repo.get_for_project.return_value = channel

        await service.delete_channel(developer, project.id, channel.id)

        channel_repo.delete.assert_awaited_once_with(channel)

    async def test_permissions_require_members(
        self, service, owner, project, channel_repo, permission_repo, mock_session
    ):
        channel_repo.get_for_project.return_value = ChannelFactory.build(project_id=project.id)
        data = ChannelPermissionsUpdate.model_validate(
            {"permissions": [{"user_id": str(uuid4()), "can_view": True, "can_post": True}]}
        )

        with pytest.raises(PortalError) as exc_info:
            await service.set_permissions(owner, project.id, uuid4(), data)

        assert exc_info.value.code == "USER_NOT_TENANT_MEMBER"
        permission_repo.replace_all.assert_not_awaited()
        mock_session.rollback.assert_awaited_once()

    async def test_replace_permissions(
        self, service, owner, project, channel_repo, permission_repo, membership_repo
    ):
        channel = ChannelFactory.build(project_id=project.id)
        channel_repo.get_for_project.return_value = channel
        member = uuid4()
        membership_repo.member_ids.return_value = {member}
        data = ChannelPermissionsUpdate.model_validate(
            {"permissions": [{"user_id": str(member), "can_view": True, "can_post": False}]}
        )

        await service.set_permissions(owner, project.id, channel.id, data)

        permission_repo.replace_all.assert_awaited_once_with(channel.id, [(member, True, False)])


class TestMessages:
    async def test_read_only_member_cannot_post(
        self, service, developer, project, channel_repo, permission_repo, message_repo
    ):
        channel = ChannelFactory.build(project_id=project.id)
        channel_repo.get_for_project.return_value = channel
        permission_repo.get.return_value = ChannelPermissionFactory.build(
            channel_id=channel.id, user_id=developer.user_id, can_post=False
        )

        with pytest.raises(ForbiddenError) as exc_info:
            await service.post_message(developer, project.id, channel.id, "hello")

        assert exc_info.value.code == "FORBIDDEN_CANNOT_POST"
        message_repo.add.assert_not_called()

    async def test_post(self, service, developer, project, channel_repo, message_repo):
        channel = ChannelFactory.build(project_id=project.id)
        channel_repo.get_for_project.return_value = channel

        result = await service.post_message(developer, project.id, channel.id, "hello")

        assert result.content == "hello"
        assert result.user_id == developer.user_id
        message_repo.add.assert_called_once()

    async def test_page_size_clamped(self, service, developer, project, channel_repo, message_repo):
        channel = ChannelFactory.build(project_id=project.id)
        channel_repo.get_for_project.return_value = channel
        message = Message(
            channel_id=channel.id, user_id=developer.user_id, content="hi", created_at=utc_now()
        )
        message_repo.list_recent.return_value = [(message, "Dev")]

        result = await service.list_messages(developer, project.id, channel.id, limit=1000)

        assert message_repo.list_recent.await_args.kwargs["limit"] == MAX_MESSAGE_PAGE
        assert result[0].author_name == "Dev"
