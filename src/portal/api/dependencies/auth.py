"""Authentication and authorization dependencies."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.portal.api.dependencies.repositories import MembershipRepo, UserRepo
from src.portal.core.logging import bind_user_context
from src.portal.core.security import TokenType, decode_token
from src.portal.models import User
from src.portal.services.context import Actor


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _parse_uuid(value: object, detail: str) -> UUID:
    try:
        return UUID(str(value))
    except ValueError as e:
        raise _unauthorized(detail) from e


async def _authenticate(
    authorization: str | None,
    user_repo: UserRepo,
    membership_repo: MembershipRepo,
) -> tuple[User, Actor]:
    """Validate the bearer access token against the current membership.

    The role comes from the database, so a role change or removal applies
    to tokens that were issued before it.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise _unauthorized("Missing or invalid authorization header")

    payload = decode_token(authorization[7:], TokenType.ACCESS)
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    user_id = _parse_uuid(payload.get("sub"), "Invalid token payload")
    tenant_id = _parse_uuid(payload.get("tenant_id"), "Invalid token payload")

    user = await user_repo.get_by_id(user_id)
    if user is None or not user.is_active:
        raise _unauthorized("User not found or inactive")

    membership = await membership_repo.get_membership(user_id, tenant_id)
    if membership is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is not a member of this tenant",
        )

    bind_user_context(user.id, tenant_id, role=membership.role, email=user.email)
    return user, Actor(user_id=user.id, tenant_id=tenant_id, role=membership.role)


async def get_current_identity(
    user_repo: UserRepo,
    membership_repo: MembershipRepo,
    authorization: Annotated[str | None, Header()] = None,
) -> tuple[User, Actor]:
    return await _authenticate(authorization, user_repo, membership_repo)


Identity = Annotated[tuple[User, Actor], Depends(get_current_identity)]


async def get_current_user(identity: Identity) -> User:
    return identity[0]


async def get_current_actor(identity: Identity) -> Actor:
    return identity[1]


async def get_optional_user(
    user_repo: UserRepo,
    membership_repo: MembershipRepo,
    authorization: Annotated[str | None, Header()] = None,
) -> User | None:
    """Signed-in user for public endpoints. Any invalid token counts as anonymous."""
    if not authorization:
        return None
    try:
        user, _ = await _authenticate(authorization, user_repo, membership_repo)
    except HTTPException:
        return None
    return user


async def require_manager(actor: Annotated[Actor, Depends(get_current_actor)]) -> Actor:
    """Require the owner or admin role."""
    if not actor.is_manager:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Owner or admin role required",
        )
    return actor


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentActor = Annotated[Actor, Depends(get_current_actor)]
ManagerActor = Annotated[Actor, Depends(require_manager)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]
