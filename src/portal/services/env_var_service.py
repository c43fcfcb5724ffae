"""Encrypted environment variables of a project.

Values are encrypted before they reach the repository and decrypted only
when building responses. Log lines name keys, never values.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.exceptions import ConflictError, NotFoundError
from src.portal.core.logging import get_logger
from src.portal.core.security import decrypt_in_thread, encrypt_in_thread
from src.portal.models import EnvVar
from src.portal.models.base import utc_now
from src.portal.repositories import EnvVarRepository, ProjectRepository
from src.portal.schemas.env_var import EnvVarCreate, EnvVarRead, EnvVarUpdate
from src.portal.services.context import Actor

logger = get_logger(__name__)

_MANAGE_MESSAGE = "Only owners and admins can manage environment variables"


async def to_read_many(env_vars: list[EnvVar]) -> list[EnvVarRead]:
    """Response models with the stored ciphertext decrypted."""
    values = await decrypt_in_thread([env_var.value for env_var in env_vars])
    return [
        EnvVarRead(
            id=env_var.id,
            project_id=env_var.project_id,
            key=env_var.key,
            value=value,
            environment=env_var.environment,
            created_by_id=env_var.created_by_id,
            created_at=env_var.created_at,
            updated_at=env_var.updated_at,
        )
        for env_var, value in zip(env_vars, values, strict=True)
    ]


async def to_read(env_var: EnvVar) -> EnvVarRead:
    return (await to_read_many([env_var]))[0]


class EnvVarService:
    def __init__(
        self,
        env_var_repo: EnvVarRepository,
        project_repo: ProjectRepository,
        session: AsyncSession,
    ):
        self.env_var_repo = env_var_repo
        self.project_repo = project_repo
        self.session = session

    async def _authorize(self, actor: Actor, project_id: UUID) -> None:
        actor.require_manager(_MANAGE_MESSAGE)
        if await self.project_repo.get_for_tenant(project_id, actor.tenant_id) is None:
            raise NotFoundError("Project not found", "PROJECT_NOT_FOUND")

    async def _get(self, project_id: UUID, env_var_id: UUID) -> EnvVar:
        env_var = await self.env_var_repo.get_for_project(env_var_id, project_id)
        if env_var is None:
            raise NotFoundError("Environment variable not found", "ENV_VAR_NOT_FOUND")
        return env_var

    async def _ensure_unique(
        self, project_id: UUID, key: str, environment: str, exclude_id: UUID | None = None
    ) -> None:
        existing = await self.env_var_repo.get_by_key(project_id, key, environment)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(
                f"Environment variable {key} already exists in {environment}",
                "ENV_VAR_ALREADY_EXISTS",
            )

    async def list_env_vars(self, actor: Actor, project_id: UUID) -> list[EnvVarRead]:
        """All variables of a project ordered by environment, then key."""
        await self._authorize(actor, project_id)
        return await to_read_many(await self.env_var_repo.list_for_project(project_id))

    async def get_env_var(self, actor: Actor, project_id: UUID, env_var_id: UUID) -> EnvVarRead:
        await self._authorize(actor, project_id)
        return await to_read(await self._get(project_id, env_var_id))

    async def create_env_var(
        self, actor: Actor, project_id: UUID, data: EnvVarCreate
    ) -> EnvVarRead:
        try:
            await self._authorize(actor, project_id)
            await self._ensure_unique(project_id, data.key, data.environment)

            env_var = EnvVar(
                project_id=project_id,
                key=data.key,
                value=await encrypt_in_thread(data.value),
                environment=data.environment,
                created_by_id=actor.user_id,
            )
            self.env_var_repo.add(env_var)
            await self.session.commit()
            await self.session.refresh(env_var)
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Env var created",
            project_id=str(project_id),
            env_var_id=str(env_var.id),
            key=env_var.key,
            environment=env_var.environment,
            user_id=str(actor.user_id),
        )
        return await to_read(env_var)

    async def update_env_var(
        self, actor: Actor, project_id: UUID, env_var_id: UUID, data: EnvVarUpdate
    ) -> EnvVarRead:
        try:
            await self._authorize(actor, project_id)
            env_var = await self._get(project_id, env_var_id)
            changes = data.changes()

            key = changes.get("key", env_var.key)
            environment = changes.get("environment", env_var.environment)
            if (key, environment) != (env_var.key, env_var.environment):
                await self._ensure_unique(project_id, key, environment, exclude_id=env_var.id)

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
            "Env var updated",
            project_id=str(project_id),
            env_var_id=str(env_var_id),
            key=env_var.key,
            environment=env_var.environment,
            fields=sorted(changes),
            user_id=str(actor.user_id),
        )
        return await to_read(env_var)

    async def delete_env_var(self, actor: Actor, project_id: UUID, env_var_id: UUID) -> None:
        try:
            await self._authorize(actor, project_id)
            env_var = await self._get(project_id, env_var_id)
            key, environment = env_var.key, env_var.environment
            await self.env_var_repo.delete(env_var)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Env var deleted",
            project_id=str(project_id),
            env_var_id=str(env_var_id),
            key=key,
            environment=environment,
            user_id=str(actor.user_id),
        )
