"""Page payloads: the selected project plus the data its widget needs."""

from uuid import UUID

from src.portal.core.exceptions import NotFoundError
from src.portal.models import Project
from src.portal.models.enums import Environment
from src.portal.repositories import ProjectRepository
from src.portal.schemas.page import ChatPage, EnvVarGroup, EnvVarsPage
from src.portal.schemas.project import ProjectRead
from src.portal.services.channel_service import ChannelService
from src.portal.services.context import Actor
from src.portal.services.env_var_service import EnvVarService

CHAT_EMPTY_STATE = "Please select a project to start chatting with your team"
CHANNELS_EMPTY_STATE = "Please select a project to view channels"


class PageService:
    def __init__(
        self,
        project_repo: ProjectRepository,
        env_var_service: EnvVarService,
        channel_service: ChannelService,
    ):
        self.project_repo = project_repo
        self.env_var_service = env_var_service
        self.channel_service = channel_service

    async def _tenant_project(self, actor: Actor, project_id: UUID) -> Project:
        project = await self.project_repo.get_for_tenant(project_id, actor.tenant_id)
        if project is None:
            raise NotFoundError("Project not found", "PROJECT_NOT_FOUND")
        return project

    async def select_project(self, actor: Actor, project_id: UUID | None) -> Project | None:
        """Resolve the page's project.

        An explicit id must belong to the actor's tenant. Without one the
        tenant's newest project is used, or None when it has no projects.
        """
        if project_id is not None:
            return await self._tenant_project(actor, project_id)
        return await self.project_repo.get_latest_for_tenant(actor.tenant_id)

    async def env_vars_page(self, actor: Actor, project_id: UUID) -> EnvVarsPage:
        project = await self._tenant_project(actor, project_id)
        variables = await self.env_var_service.list_env_vars(actor, project.id)
        groups = [
            EnvVarGroup(
                environment=env.value,
                label=env.value.capitalize(),
                variables=[v for v in variables if v.environment == env.value],
            )
            for env in Environment
        ]
        return EnvVarsPage(
            title="Environment Variables",
            subtitle="Manage project environment variables for development and production",
            back_link="/projects",
            project=ProjectRead.model_validate(project),
            environments=groups,
        )

    async def _chat(
        self, actor: Actor, project_id: UUID | None, title: str, empty_state: str
    ) -> ChatPage:
        project = await self.select_project(actor, project_id)
        if project is None:
            return ChatPage(title=title, project=None, empty_state=empty_state)
        channels = await self.channel_service.list_channels(actor, project.id)
        return ChatPage(
            title=title, project=ProjectRead.model_validate(project), channels=channels
        )

    async def chat_page(self, actor: Actor, project_id: UUID | None) -> ChatPage:
        return await self._chat(actor, project_id, "Team Chat", CHAT_EMPTY_STATE)

    async def channels_page(self, actor: Actor, project_id: UUID | None) -> ChatPage:
        return await self._chat(actor, project_id, "Channels", CHANNELS_EMPTY_STATE)
