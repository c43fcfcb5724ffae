"""Response bodies of the page endpoints."""

from pydantic import BaseModel, Field

from src.portal.schemas.channel import ChannelRead
from src.portal.schemas.env_var import EnvVarRead
from src.portal.schemas.project import ProjectRead


class EnvVarGroup(BaseModel):
    environment: str
    label: str
    variables: list[EnvVarRead] = Field(default_factory=list)


class EnvVarsPage(BaseModel):
    title: str
    subtitle: str
    back_link: str
    project: ProjectRead
    environments: list[EnvVarGroup]


class ChatPage(BaseModel):
    title: str
    project: ProjectRead | None
    channels: list[ChannelRead] = Field(default_factory=list)
    # Set when no project is selected
    empty_state: str | None = None
