"""Personal encrypted environment variables of the signed-in user.

Lookups always filter by owner, so another user's variable is reported as
not found rather than forbidden.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.exceptions import ConflictError, NotFoundError
from src.portal.core.logging import get_logger
from src.portal.core.security import decrypt_in_thread, encrypt_in_thread
from src.portal.models import UserEnvVar
from src.portal.models.base import utc_now
from src.portal.repositories import UserEnvVarRepository
from src.portal.schemas.env_var import UserEnvVarCreate, UserEnvVarRead, UserEnvVarUpdate

logger = get_logger(__name__)


async def to_read_many(env_vars: list[UserEnvVar]) -> list[UserEnvVarRead]:
    values = await decrypt_in_thread([env_var.value for env_var in env_vars])
    return [
        UserEnvVarRead(
            id=env_var.id,
            key=env_var.key,
            value=value,
            created_at=env_var.created_at,
            updated_at=env_var.updated_at,
        )
        for env_var, value in zip(env_vars, values, strict=True)
    ]


class UserEnvVarService:
    def __init__(self, env_var_repo: UserEnvVarRepository, session: AsyncSession):
        self.env_var_repo = env_var_repo
        self.session = session

    async def _get(self, user_id: UUID, env_var_id: UUID) -> UserEnvVar:
        env_var = await self.env_var_repo.get_for_user(env_var_id, user_id)
        if env_var is None:
            raise NotFoundError("User environment variable not found", "USER_ENV_VAR_NOT_FOUND")
        return env_var

    async def _ensure_unique(
        self, user_id: UUID, key: str, exclude_id: UUID | None = None
    ) -> None:
        existing = await self.env_var_repo.get_by_key(user_id, key)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(
                "An environment variable with this key already exists", "DUPLICATE_ENV_VAR"
            )

    async def list_env_vars(self, user_id: UUID) -> list[UserEnvVarRead]:
        """The user's variables ordered by key."""
        return await to_read_many(await self.env_var_repo.list_for_user(user_id))

    async def create_env_var(self, user_id: UUID, data: UserEnvVarCreate) -> UserEnvVarRead:
        """Store a new variable encrypted.

        Raises:
            ConflictError: The user already has a variable with this key.
        """
        try:
            await self._ensure_unique(user_id, data.key)
            env_var = UserEnvVar(
                user_id=user_id, key=data.key, value=await encrypt_in_thread(data.value)
            )
            self.env_var_repo.add(env_var)
            await self.session.commit()
            await self.session.refresh(env_var)
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "User env var created",
            user_id=str(user_id),
            env_var_id=str(env_var.id),
            key=env_var.key,
        )
        return (await to_read_many([env_var]))[0]

    async def update_env_var(
        self, user_id: UUID, env_var_id: UUID, data: UserEnvVarUpdate
    ) -> UserEnvVarRead:
        try:
            env_var = await self._get(user_id, env_var_id)
            changes = data.changes()
            if changes.get("key", env_var.key) != env_var.key:
                await self._ensure_unique(user_id, changes["key"], exclude_id=env_var.id)
            if "value" in changes:
                changes["value"] = await encrypt_in_thread(changes["value"])

            for field, value in changes.items():
                setattr(env_var, field, value)
            env_var.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(env_var)
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "User env var updated",
            user_id=str(user_id),
            env_var_id=str(env_var_id),
            key=env_var.key,
            fields=sorted(changes),
        )
        return (await to_read_many([env_var]))[0]

    async def delete_env_var(self, user_id: UUID, env_var_id: UUID) -> None:
        try:
            env_var = await self._get(user_id, env_var_id)
            key = env_var.key
            await self.env_var_repo.delete(env_var)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "User env var deleted", user_id=str(user_id), env_var_id=str(env_var_id), key=key
        )
