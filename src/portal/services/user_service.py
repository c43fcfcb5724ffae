"""User profile operations."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.exceptions import NotFoundError, PortalError
from src.portal.core.logging import get_logger
from src.portal.core.security import hash_password, verify_password
from src.portal.models import User
from src.portal.models.base import utc_now
from src.portal.repositories import RefreshTokenRepository, UserRepository
from src.portal.schemas.user import PasswordChange, ProfileUpdate

logger = get_logger(__name__)


class UserService:
    def __init__(
        self,
        user_repo: UserRepository,
        token_repo: RefreshTokenRepository,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.token_repo = token_repo
        self.session = session

    async def get_user(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", "USER_NOT_FOUND")
        return user

    async def update_profile(self, user_id: UUID, data: ProfileUpdate) -> User:
        try:
            user = await self.get_user(user_id)
            for field, value in data.changes().items():
                setattr(user, field, value)
            user.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(user)
            return user
        except Exception:
            await self.session.rollback()
            raise

    async def change_password(self, user_id: UUID, data: PasswordChange) -> None:
        """Replace the password and revoke every refresh token of the user.

        Raises:
            PortalError: No password set, or the current password is wrong.
        """
        try:
            user = await self.get_user(user_id)
            if not user.hashed_password:
                raise PortalError(
                    "This account signs in through an external provider", "PASSWORD_NOT_SET"
                )
            if not verify_password(data.current_password, user.hashed_password):
                raise PortalError("Current password is incorrect", "INVALID_PASSWORD")

            user.hashed_password = hash_password(data.new_password)
            user.updated_at = utc_now()
            revoked = await self.token_repo.revoke_all_for_user(user.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Password changed", user_id=str(user_id), sessions_revoked=revoked)
