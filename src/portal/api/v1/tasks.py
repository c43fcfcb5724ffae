"""Task endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from src.portal.api.dependencies import CurrentActor, TaskServiceDep
from src.portal.schemas.work_item import AssignUsers, TaskCreate, TaskRead, TaskUpdate

router = APIRouter(prefix="/projects/{project_id}/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskRead])
async def list_tasks(
    project_id: UUID, actor: CurrentActor, service: TaskServiceDep
) -> list[TaskRead]:
    return await service.list_items(actor, project_id)


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    project_id: UUID, data: TaskCreate, actor: CurrentActor, service: TaskServiceDep
) -> TaskRead:
    return await service.create_item(actor, project_id, data)


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    project_id: UUID, task_id: UUID, actor: CurrentActor, service: TaskServiceDep
) -> TaskRead:
    return await service.get_item(actor, project_id, task_id)


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task(
    project_id: UUID, task_id: UUID, data: TaskUpdate, actor: CurrentActor, service: TaskServiceDep
) -> TaskRead:
    return await service.update_item(actor, project_id, task_id, data)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    project_id: UUID, task_id: UUID, actor: CurrentActor, service: TaskServiceDep
) -> None:
    await service.delete_item(actor, project_id, task_id)


@router.put("/{task_id}/assignees", response_model=TaskRead)
async def assign_task(
    project_id: UUID,
    task_id: UUID,
    data: AssignUsers,
    actor: CurrentActor,
    service: TaskServiceDep,
) -> TaskRead:
    return await service.assign_users(actor, project_id, task_id, data.user_ids)
