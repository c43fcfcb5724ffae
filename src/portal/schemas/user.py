"""User profile schemas."""

from datetime import datetime
from typing import Annotated, ClassVar
from uuid import UUID

from pydantic import BaseModel

from src.portal.schemas.common import (
    InputSchema,
    UpdateSchema,
    password_rule,
    text_rule,
    url_rule,
)


class UserRead(BaseModel):
    id: UUID
    email: str
    name: str
    avatar_url: str | None
    auth_provider: str
    email_verified: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfileUpdate(UpdateSchema):
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"avatar_url"})

    name: Annotated[str, text_rule(100, "Name is too long", required="Name is required")] | None = (
        None
    )
    avatar_url: Annotated[str, url_rule("Invalid avatar URL")] | None = None


class PasswordChange(InputSchema):
    current_password: Annotated[
        str, text_rule(1000, "Password is too long", required="Current password is required")
    ]
    new_password: Annotated[str, password_rule(max_length=100)]
