"""Authentication endpoints."""

from fastapi import APIRouter, status
from starlette.requests import Request

from src.portal.api.dependencies import AuthServiceDep
from src.portal.core.rate_limit import limiter
from src.portal.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    MessageResponse,
    RefreshRequest,
    SignupRequest,
    SignupResponse,
    TokenPair,
    VerifyEmailRequest,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Email already registered"}},
)
@limiter.limit("3/hour")
async def signup(request: Request, data: SignupRequest, service: AuthServiceDep) -> SignupResponse:
    """Create an account and its personal workspace."""
    return await service.signup(data)


@router.post(
    "/verify-email",
    response_model=MessageResponse,
    responses={400: {"description": "Invalid or expired verification token"}},
)
@limiter.limit("10/minute")
async def verify_email(
    request: Request, data: VerifyEmailRequest, service: AuthServiceDep
) -> MessageResponse:
    await service.verify_email(data.token)
    return MessageResponse(message="Email verified successfully")


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Email not verified or no tenant membership"},
    },
)
@limiter.limit("5/minute")
async def login(request: Request, data: LoginRequest, service: AuthServiceDep) -> LoginResponse:
    return await service.login(data.email, data.password)


@router.post(
    "/refresh",
    response_model=TokenPair,
    responses={401: {"description": "Invalid or expired refresh token"}},
)
@limiter.limit("10/minute")
async def refresh(request: Request, data: RefreshRequest, service: AuthServiceDep) -> TokenPair:
    """Exchange a refresh token for a new pair. The old refresh token is revoked."""
    return await service.refresh(data.refresh_token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("5/minute")
async def logout(request: Request, data: LogoutRequest, service: AuthServiceDep) -> None:
    await service.logout(data.refresh_token)
