"""Current user profile and personal env var endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from src.portal.api.dependencies import CurrentUser, UserEnvVarServiceDep, UserServiceDep
from src.portal.schemas.env_var import UserEnvVarCreate, UserEnvVarRead, UserEnvVarUpdate
from src.portal.schemas.user import PasswordChange, ProfileUpdate, UserRead

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
async def get_me(user: CurrentUser) -> UserRead:
    return UserRead.model_validate(user)


@router.patch("/me", response_model=UserRead)
async def update_me(data: ProfileUpdate, user: CurrentUser, service: UserServiceDep) -> UserRead:
    return UserRead.model_validate(await service.update_profile(user.id, data))


@router.post("/me/password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    data: PasswordChange, user: CurrentUser, service: UserServiceDep
) -> None:
    """Change the password. Every session of the user is signed out."""
    await service.change_password(user.id, data)


@router.get("/me/env-vars", response_model=list[UserEnvVarRead])
async def list_my_env_vars(
    user: CurrentUser, service: UserEnvVarServiceDep
) -> list[UserEnvVarRead]:
    return await service.list_env_vars(user.id)


@router.post(
    "/me/env-vars",
    response_model=UserEnvVarRead,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Key already exists"}},
)
async def create_my_env_var(
    data: UserEnvVarCreate, user: CurrentUser, service: UserEnvVarServiceDep
) -> UserEnvVarRead:
    return await service.create_env_var(user.id, data)


@router.patch("/me/env-vars/{env_var_id}", response_model=UserEnvVarRead)
async def update_my_env_var(
    env_var_id: UUID, data: UserEnvVarUpdate, user: CurrentUser, service: UserEnvVarServiceDep
) -> UserEnvVarRead:
    return await service.update_env_var(user.id, env_var_id, data)


@router.delete("/me/env-vars/{env_var_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_env_var(
    env_var_id: UUID, user: CurrentUser, service: UserEnvVarServiceDep
) -> None:
    await service.delete_env_var(user.id, env_var_id)
