"""Unit tests for page payloads."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.portal.core.exceptions import NotFoundError
from src.portal.schemas import EnvVarRead
from src.portal.services import PageService
from src.portal.services.page_service import CHANNELS_EMPTY_STATE, CHAT_EMPTY_STATE
from tests.factories import ProjectFactory, utc_now

pytestmark = pytest.mark.unit


@pytest.fixture
def project(tenant_id):
    return ProjectFactory.build(tenant_id=tenant_id)


@pytest.fixture
def project_repo(project) -> AsyncMock:
    repo = AsyncMock()
    repo.get_for_tenant.return_value = project
    repo.get_latest_for_tenant.return_value = project
    return repo


@pytest.fixture
def env_var_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def channel_service() -> AsyncMock:
    service = AsyncMock()
    service.list_channels.return_value = []
    return service


@pytest.fixture
def pages(project_repo, env_var_service, channel_service) -> PageService:
    return PageService(project_repo, env_var_service, channel_service)


def env_var(project_id, key: str, environment: str) -> EnvVarRead:
    now = utc_now()
    return EnvVarRead(
        id=uuid4(),
        project_id=project_id,
        key=key,
        value="v",
        environment=environment,
        created_by_id=uuid4(),
        created_at=now,
        updated_at=now,
    )


class TestSelectProject:
    async def test_explicit_project_must_be_in_tenant(self, pages, owner, project_repo):
        project_repo.get_for_tenant.return_value = None

        with pytest.raises(NotFoundError):
            await pages.select_project(owner, uuid4())

    async def test_defaults_to_latest(self, pages, owner, project, project_repo):
        assert await pages.select_project(owner, None) is project
        project_repo.get_latest_for_tenant.assert_awaited_once_with(owner.tenant_id)


class TestEnvVarsPage:
    async def test_groups_by_environment(self, pages, admin, project, env_var_service):
        env_var_service.list_env_vars.return_value = [
            env_var(project.id, "API_KEY", "development"),
            env_var(project.id, "API_KEY", "production"),
            env_var(project.id, "DEBUG", "development"),
        ]

        page = await pages.env_vars_page(admin, project.id)

        assert page.title == "Environment Variables"
        assert page.back_link == "/projects"
        assert [(g.environment, g.label) for g in page.environments] == [
            ("development", "Development"),
            ("production", "Production"),
        ]
        assert [v.key for v in page.environments[0].variables] == ["API_KEY", "DEBUG"]
        assert page.project.id == project.id

    async def test_unknown_project_is_not_found(
        self, pages, admin, project_repo, env_var_service
    ):
        project_repo.get_for_tenant.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await pages.env_vars_page(admin, uuid4())

        assert exc_info.value.code == "PROJECT_NOT_FOUND"
        project_repo.get_latest_for_tenant.assert_not_awaited()
        env_var_service.list_env_vars.assert_not_awaited()


class TestChatPages:
    async def test_empty_state_without_projects(self, pages, developer, project_repo):
        project_repo.get_latest_for_tenant.return_value = None

        chat = await pages.chat_page(developer, None)
        channels = await pages.channels_page(developer, None)

        assert chat.project is None
        assert chat.empty_state == CHAT_EMPTY_STATE
        assert channels.empty_state == CHANNELS_EMPTY_STATE
        assert channels.title == "Channels"

    async def test_lists_channels_of_selected_project(
        self, pages, developer, project, channel_service
    ):
        page = await pages.chat_page(developer, project.id)

        assert page.title == "Team Chat"
        assert page.empty_state is None
        channel_service.list_channels.assert_awaited_once_with(developer, project.id)
