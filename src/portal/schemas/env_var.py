"""Project and personal environment variable schemas."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel

from src.portal.models.enums import Environment
from src.portal.schemas.common import InputSchema, UpdateSchema, one_of, text_rule

ENV_VAR_KEY_PATTERN = r"^[A-Z_][A-Z0-9_]*$"

EnvVarKey = Annotated[
    str,
    text_rule(
        100,
        "Key is too long",
        required="Key is required",
        pattern=ENV_VAR_KEY_PATTERN,
        pattern_message="Key must be uppercase with underscores",
    ),
]
EnvVarValue = Annotated[str, text_rule(5000, "Value is too long", required="Value is required")]
EnvironmentName = Annotated[
    Environment, one_of(Environment, "Environment must be development or production")
]


class EnvVarCreate(InputSchema):
    key: EnvVarKey
    value: EnvVarValue
    environment: EnvironmentName


class EnvVarUpdate(UpdateSchema):
    key: EnvVarKey | None = None
    value: EnvVarValue | None = None
    environment: EnvironmentName | None = None


class EnvVarRead(BaseModel):
    """Env var with its value decrypted."""

    id: UUID
    project_id: UUID
    key: str
    value: str
    environment: str
    created_by_id: UUID
    created_at: datetime
    updated_at: datetime


class UserEnvVarCreate(InputSchema):
    key: EnvVarKey
    value: EnvVarValue


class UserEnvVarUpdate(UpdateSchema):
    key: EnvVarKey | None = None
    value: EnvVarValue | None = None


class UserEnvVarRead(BaseModel):
    """Personal env var with its value decrypted."""

    id: UUID
    key: str
    value: str
    created_at: datetime
    updated_at: datetime
