"""Authentication schemas."""

from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field

from src.portal.schemas.common import (
    InputSchema,
    email_rule,
    must_be_true,
    password_rule,
    text_rule,
)
from src.portal.schemas.user import UserRead

Email = Annotated[str, email_rule()]


class SignupRequest(InputSchema):
    email: Email
    password: Annotated[str, password_rule()]
    name: Annotated[
        str,
        text_rule(
            100, "Name is too long", required="Name must be at least 2 characters", min_length=2
        ),
    ]
    agree_to_terms: Annotated[bool, must_be_true("You must agree to Terms and Conditions")]
    agree_to_emails: Annotated[
        bool, must_be_true("You must agree to receive email communications")
    ]


class LoginRequest(InputSchema):
    email: Email
    password: Annotated[
        str, text_rule(1000, "Password is too long", required="Password is required")
    ]


class VerifyEmailRequest(InputSchema):
    token: Annotated[
        str, text_rule(4096, "Token is too long", required="Verification token is required")
    ]


class RefreshRequest(InputSchema):
    refresh_token: Annotated[
        str, text_rule(4096, "Token is too long", required="Refresh token is required")
    ]


class LogoutRequest(RefreshRequest):
    pass


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginResponse(TokenPair):
    user: UserRead
    tenant_id: UUID
    role: str


class SignupResponse(BaseModel):
    user: UserRead
    tenant_id: UUID
    email_verification_required: bool
    # Only returned when verification is skipped or email delivery is disabled
    verification_token: str | None = Field(default=None)


class MessageResponse(BaseModel):
    message: str
