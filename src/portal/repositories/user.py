"""Repositories for users, their refresh tokens and personal env vars."""

from uuid import UUID

from sqlalchemy import update
from sqlmodel import select

from src.portal.models import RefreshToken, User, UserEnvVar
from src.portal.models.base import utc_now
from src.portal.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address (case-insensitive)."""
        result = await self.session.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        return await self.get_by_email(email) is not None


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    model = RefreshToken

    async def get_valid_by_hash(
        self, token_hash: str, for_update: bool = False
    ) -> RefreshToken | None:
        """Get a non-revoked, unexpired token by hash.

        Args:
            token_hash: SHA256 of the token.
            for_update: Lock the row so concurrent refreshes cannot both rotate it.
        """
        query = select(RefreshToken).where(
            RefreshToken.token_hash == token_hash,
            RefreshToken.revoked == False,  # noqa: E712
            RefreshToken.expires_at > utc_now(),
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def revoke_all_for_user(self, user_id: UUID) -> int:
        """Revoke every active token of a user. Returns the number revoked."""
        result = await self.session.execute(
            update(RefreshToken)
            .where(
                RefreshToken.user_id == user_id,  # type: ignore[arg-type]
                RefreshToken.revoked == False,  # type: ignore[arg-type]  # noqa: E712
            )
            .values(revoked=True)
        )
        return result.rowcount or 0  # type: ignore[attr-defined]


class UserEnvVarRepository(BaseRepository[UserEnvVar]):
    model = UserEnvVar

    async def list_for_user(self, user_id: UUID) -> list[UserEnvVar]:
        result = await self.session.execute(
            select(UserEnvVar)
            .where(UserEnvVar.user_id == user_id)
            .order_by(UserEnvVar.key)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())

    async def get_for_user(self, env_var_id: UUID, user_id: UUID) -> UserEnvVar | None:
        result = await self.session.execute(
            select(UserEnvVar).where(UserEnvVar.id == env_var_id, UserEnvVar.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_key(self, user_id: UUID, key: str) -> UserEnvVar | None:
        result = await self.session.execute(
            select(UserEnvVar).where(UserEnvVar.user_id == user_id, UserEnvVar.key == key)
        )
        return result.scalar_one_or_none()
