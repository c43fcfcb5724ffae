"""Project endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.portal.api.dependencies import CurrentActor, ProjectServiceDep
from src.portal.schemas.pagination import PaginatedResponse
from src.portal.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=PaginatedResponse[ProjectRead])
async def list_projects(
    actor: CurrentActor,
    service: ProjectServiceDep,
    cursor: Annotated[str | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> PaginatedResponse[ProjectRead]:
    """Projects of the current tenant, newest first."""
    projects, next_cursor, has_more = await service.list_projects(actor.tenant_id, cursor, limit)
    return PaginatedResponse(
        items=[ProjectRead.model_validate(p) for p in projects],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"description": "Project limit reached for the subscription"}},
)
async def create_project(
    data: ProjectCreate, actor: CurrentActor, service: ProjectServiceDep
) -> ProjectRead:
    return ProjectRead.model_validate(await service.create_project(actor, data))


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: UUID, actor: CurrentActor, service: ProjectServiceDep
) -> ProjectRead:
    return ProjectRead.model_validate(await service.get_project(actor.tenant_id, project_id))


@router.patch("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: UUID, data: ProjectUpdate, actor: CurrentActor, service: ProjectServiceDep
) -> ProjectRead:
    return ProjectRead.model_validate(await service.update_project(actor, project_id, data))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: UUID, actor: CurrentActor, service: ProjectServiceDep) -> None:
    await service.delete_project(actor, project_id)
