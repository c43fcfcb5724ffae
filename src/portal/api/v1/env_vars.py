"""Environment variable endpoints. Owner and admin only."""

from uuid import UUID

from fastapi import APIRouter, status

from src.portal.api.dependencies import EnvVarServiceDep, ManagerActor
from src.portal.schemas.env_var import EnvVarCreate, EnvVarRead, EnvVarUpdate

router = APIRouter(prefix="/projects/{project_id}/env-vars", tags=["env-vars"])


@router.get("", response_model=list[EnvVarRead])
async def list_env_vars(
    project_id: UUID, actor: ManagerActor, service: EnvVarServiceDep
) -> list[EnvVarRead]:
    return await service.list_env_vars(actor, project_id)


@router.post(
    "",
    response_model=EnvVarRead,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Key already exists in this environment"}},
)
async def create_env_var(
    project_id: UUID, data: EnvVarCreate, actor: ManagerActor, service: EnvVarServiceDep
) -> EnvVarRead:
    return await service.create_env_var(actor, project_id, data)


@router.get("/{env_var_id}", response_model=EnvVarRead)
async def get_env_var(
    project_id: UUID, env_var_id: UUID, actor: ManagerActor, service: EnvVarServiceDep
) -> EnvVarRead:
    return await service.get_env_var(actor, project_id, env_var_id)


@router.patch("/{env_var_id}", response_model=EnvVarRead)
async def update_env_var(
    project_id: UUID,
    env_var_id: UUID,
    data: EnvVarUpdate,
    actor: ManagerActor,
    service: EnvVarServiceDep,
) -> EnvVarRead:
    return await service.update_env_var(actor, project_id, env_var_id, data)


@router.delete("/{env_var_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_env_var(
    project_id: UUID, env_var_id: UUID, actor: ManagerActor, service: EnvVarServiceDep
) -> None:
    await service.delete_env_var(actor, project_id, env_var_id)
