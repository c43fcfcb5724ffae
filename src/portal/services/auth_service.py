"""Signup, email verification, login and refresh token rotation."""

import hmac
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.cache import blacklist_token, is_token_blacklisted
from src.portal.core.config import get_settings
from src.portal.core.exceptions import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    PortalError,
)
from src.portal.core.logging import get_logger
from src.portal.core.notifications import send_verification_email
from src.portal.core.security import (
    DUMMY_PASSWORD_HASH,
    TokenType,
    create_access_token,
    create_email_verification_token,
    create_refresh_token,
    decode_token,
    hash_password,
    hash_token,
    verify_password,
)
from src.portal.models import RefreshToken, Tenant, User
from src.portal.models.base import utc_now
from src.portal.models.enums import AuthProvider, SubscriptionTier, UserRole
from src.portal.repositories import (
    MembershipRepository,
    RefreshTokenRepository,
    TenantRepository,
    UserRepository,
)
from src.portal.schemas.auth import LoginResponse, SignupRequest, SignupResponse, TokenPair
from src.portal.schemas.user import UserRead

logger = get_logger(__name__)

_INVALID_REFRESH = "Invalid or expired refresh token"


class AuthService:
    """Accounts and sessions.

    A user lands in their oldest tenant membership after login. Access
    tokens carry that tenant and the membership role; refresh tokens are
    stored by hash and rotated on every use.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        token_repo: RefreshTokenRepository,
        tenant_repo: TenantRepository,
        membership_repo: MembershipRepository,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.token_repo = token_repo
        self.tenant_repo = tenant_repo
        self.membership_repo = membership_repo
        self.session = session

    async def _blacklist(self, token_hash: str) -> None:
        # DB is authoritative; the Redis blacklist only speeds up rejection
        try:
            ttl = get_settings().refresh_token_expire_days * 86400
            await blacklist_token(token_hash, ttl)
        except Exception as e:
            logger.warning("Failed to blacklist token in Redis", error=str(e))

    async def _issue_tokens(self, user_id: UUID, tenant_id: UUID, role: str) -> TokenPair:
        """Create an access/refresh pair and stage the refresh token row (no commit)."""
        access_token = create_access_token(user_id, tenant_id, role)
        refresh_token, expires_at = create_refresh_token(user_id, tenant_id)
        self.token_repo.add(
            RefreshToken(
                user_id=user_id,
                tenant_id=tenant_id,
                token_hash=hash_token(refresh_token),
                expires_at=expires_at,
            )
        )
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    async def signup(self, data: SignupRequest) -> SignupResponse:
        """Create a user with their own free-tier workspace.

        Raises:
            ConflictError: The email is already registered.
        """
        settings = get_settings()
        try:
            if await self.user_repo.exists_by_email(data.email):
                raise ConflictError("Email already registered", "EMAIL_ALREADY_EXISTS")

            user = User(
                email=data.email.lower(),
                name=data.name,
                hashed_password=hash_password(data.password),
                auth_provider=AuthProvider.EMAIL.value,
                email_verified=settings.skip_email_verification,
                email_opt_in=data.agree_to_emails,
            )
            self.user_repo.add(user)
            await self.session.flush()

            max_projects, max_members = settings.tier_limits(SubscriptionTier.FREE.value)
            tenant = Tenant(
                name=f"{data.name}'s Workspace",
                owner_id=user.id,
                subscription_tier=SubscriptionTier.FREE.value,
                max_projects=max_projects,
                max_team_members=max_members,
            )
            self.tenant_repo.add(tenant)
            await self.session.flush()
            self.membership_repo.create_membership(user.id, tenant.id, UserRole.OWNER.value)

            await self.session.commit()
            await self.session.refresh(user)
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User signed up", user_id=str(user.id), tenant_id=str(tenant.id))

        token = None
        if not settings.skip_email_verification:
            token = create_email_verification_token(user.id, user.email)
            send_verification_email(user.email, token, user.name)

        return SignupResponse(
            user=UserRead.model_validate(user),
            tenant_id=tenant.id,
            email_verification_required=not settings.skip_email_verification,
            # Without a mail provider the token is the only way to verify
            verification_token=token if token and not settings.resend_api_key else None,
        )

    async def verify_email(self, token: str) -> User:
        payload = decode_token(token, TokenType.EMAIL_VERIFICATION)
        if payload is None:
            raise PortalError("Invalid or expired verification token", "INVALID_TOKEN")
        try:
            user_id = UUID(str(payload.get("sub")))
        except ValueError as e:
            raise PortalError("Invalid or expired verification token", "INVALID_TOKEN") from e

        try:
            user = await self.user_repo.get_by_id(user_id)
            if user is None or user.email != str(payload.get("email", "")).lower():
                raise PortalError("Invalid or expired verification token", "INVALID_TOKEN")
            if not user.email_verified:
                user.email_verified = True
                user.updated_at = utc_now()
                await self.session.commit()
                logger.info("Email verified", user_id=str(user.id))
            return user
        except Exception:
            await self.session.rollback()
            raise

    async def login(self, email: str, password: str) -> LoginResponse:
        """Check credentials and issue tokens for the user's first tenant.

        Raises:
            AuthenticationError: Unknown email, wrong password or inactive user.
            ForbiddenError: Email not verified, or the user has no tenant.
        """
        try:
            user = await self.user_repo.get_by_email(email)

            # Always verify so response time does not reveal whether the email exists
            password_hash = (user.hashed_password if user else None) or DUMMY_PASSWORD_HASH
            password_valid = verify_password(password, password_hash)

            if user is None or not password_valid or not user.is_active:
                raise AuthenticationError("Invalid email or password", "INVALID_CREDENTIALS")
            if not user.email_verified:
                raise ForbiddenError(
                    "Please verify your email before logging in", "EMAIL_NOT_VERIFIED"
                )

            membership = await self.membership_repo.get_first_for_user(user.id)
            if membership is None:
                raise ForbiddenError(
                    "User is not a member of any tenant", "NO_TENANT_MEMBERSHIP"
                )

            tokens = await self._issue_tokens(user.id, membership.tenant_id, membership.role)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User logged in", user_id=str(user.id), tenant_id=str(membership.tenant_id))
        return LoginResponse(
            **tokens.model_dump(),
            user=UserRead.model_validate(user),
            tenant_id=membership.tenant_id,
            role=membership.role,
        )

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Rotate a refresh token.

        The old token is revoked in the database under a row lock, then
        blacklisted in Redis after commit. The new access token carries the
        current membership role.
        """
        payload = decode_token(refresh_token, TokenType.REFRESH)
        if payload is None:
            raise AuthenticationError(_INVALID_REFRESH, "INVALID_REFRESH_TOKEN")
        try:
            user_id = UUID(str(payload.get("sub")))
            tenant_id = UUID(str(payload.get("tenant_id")))
        except ValueError as e:
            raise AuthenticationError(_INVALID_REFRESH, "INVALID_REFRESH_TOKEN") from e

        token_hash = hash_token(refresh_token)
        if await is_token_blacklisted(token_hash) is True:
            raise AuthenticationError(_INVALID_REFRESH, "INVALID_REFRESH_TOKEN")

        try:
            db_token = await self.token_repo.get_valid_by_hash(token_hash, for_update=True)
            if db_token is None or not hmac.compare_digest(token_hash, db_token.token_hash):
                raise AuthenticationError(_INVALID_REFRESH, "INVALID_REFRESH_TOKEN")

            membership = await self.membership_repo.get_membership(user_id, tenant_id)
            if membership is None:
                raise AuthenticationError(
                    "User is no longer a member of this tenant", "NO_TENANT_MEMBERSHIP"
                )

            db_token.revoked = True
            tokens = await self._issue_tokens(user_id, tenant_id, membership.role)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self._blacklist(token_hash)
        return tokens

    async def logout(self, refresh_token: str) -> bool:
        """Revoke a refresh token. Returns False if it was unknown or already revoked."""
        token_hash = hash_token(refresh_token)
        try:
            db_token = await self.token_repo.get_valid_by_hash(token_hash)
            if db_token is None:
                return False
            db_token.revoked = True
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self._blacklist(token_hash)
        logger.info("User logged out", user_id=str(db_token.user_id))
        return True
