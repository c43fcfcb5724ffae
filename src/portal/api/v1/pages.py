"""Page endpoints: the data a screen needs, resolved against the selected project."""

from uuid import UUID

from fastapi import APIRouter

from src.portal.api.dependencies import (
    CurrentActor,
    ManagerActor,
    PageServiceDep,
    SelectedProjectId,
)
from src.portal.schemas.page import ChatPage, EnvVarsPage

router = APIRouter(prefix="/pages", tags=["pages"])


@router.get("/projects/{project_id}/env-vars", response_model=EnvVarsPage)
async def env_vars_page(
    project_id: UUID, actor: ManagerActor, service: PageServiceDep
) -> EnvVarsPage:
    """Environment variables of a project grouped by environment."""
    return await service.env_vars_page(actor, project_id)


@router.get("/chat", response_model=ChatPage)
async def chat_page(
    actor: CurrentActor, project_id: SelectedProjectId, service: PageServiceDep
) -> ChatPage:
    """Team chat for the X-Project-ID project, else the newest project."""
    return await service.chat_page(actor, project_id)


@router.get("/channels", response_model=ChatPage)
async def channels_page(
    actor: CurrentActor, project_id: SelectedProjectId, service: PageServiceDep
) -> ChatPage:
    return await service.channels_page(actor, project_id)
