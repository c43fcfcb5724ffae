"""Chat channel and message endpoints."""

from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.portal.api.dependencies import ChannelServiceDep, CurrentActor
from src.portal.schemas.channel import (
    ChannelCreate,
    ChannelPermissionRead,
    ChannelPermissionsUpdate,
    ChannelRead,
    ChannelUpdate,
    MessageCreate,
    MessageRead,
)

router = APIRouter(prefix="/projects/{project_id}/channels", tags=["channels"])


@router.get("", response_model=list[ChannelRead])
async def list_channels(
    project_id: UUID, actor: CurrentActor, service: ChannelServiceDep
) -> list[ChannelRead]:
    """Public channels plus private channels the caller may view."""
    return await service.list_channels(actor, project_id)


@router.post("", response_model=ChannelRead, status_code=status.HTTP_201_CREATED)
async def create_channel(
    project_id: UUID, data: ChannelCreate, actor: CurrentActor, service: ChannelServiceDep
) -> ChannelRead:
    return await service.create_channel(actor, project_id, data)


@router.get("/{channel_id}", response_model=ChannelRead)
async def get_channel(
    project_id: UUID, channel_id: UUID, actor: CurrentActor, service: ChannelServiceDep
) -> ChannelRead:
    return await service.get_channel(actor, project_id, channel_id)


@router.patch("/{channel_id}", response_model=ChannelRead)
async def update_channel(
    project_id: UUID,
    channel_id: UUID,
    data: ChannelUpdate,
    actor: CurrentActor,
    service: ChannelServiceDep,
) -> ChannelRead:
    return await service.update_channel(actor, project_id, channel_id, data)


@router.delete("/{channel_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_channel(
    project_id: UUID, channel_id: UUID, actor: CurrentActor, service: ChannelServiceDep
) -> None:
    await service.delete_channel(actor, project_id, channel_id)


@router.get("/{channel_id}/permissions", response_model=list[ChannelPermissionRead])
async def get_channel_permissions(
    project_id: UUID, channel_id: UUID, actor: CurrentActor, service: ChannelServiceDep
) -> list[ChannelPermissionRead]:
    permissions = await service.get_permissions(actor, project_id, channel_id)
    return [ChannelPermissionRead.model_validate(p) for p in permissions]


@router.put("/{channel_id}/permissions", response_model=list[ChannelPermissionRead])
async def set_channel_permissions(
    project_id: UUID,
    channel_id: UUID,
    data: ChannelPermissionsUpdate,
    actor: CurrentActor,
    service: ChannelServiceDep,
) -> list[ChannelPermissionRead]:
    """Replace the channel's explicit grants."""
    permissions = await service.set_permissions(actor, project_id, channel_id, data)
    return [ChannelPermissionRead.model_validate(p) for p in permissions]


@router.get("/{channel_id}/messages", response_model=list[MessageRead])
async def list_messages(
    project_id: UUID,
    channel_id: UUID,
    actor: CurrentActor,
    service: ChannelServiceDep,
    before: Annotated[datetime | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> list[MessageRead]:
    """Latest messages, oldest first. Pass `before` to page further back."""
    if before is not None and before.tzinfo is not None:
        before = before.astimezone(UTC).replace(tzinfo=None)
    return await service.list_messages(actor, project_id, channel_id, before=before, limit=limit)


@router.post(
    "/{channel_id}/messages",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"description": "No permission to post"}},
)
async def post_message(
    project_id: UUID,
    channel_id: UUID,
    data: MessageCreate,
    actor: CurrentActor,
    service: ChannelServiceDep,
) -> MessageRead:
    return await service.post_message(actor, project_id, channel_id, data.content)
