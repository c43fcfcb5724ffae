"""Notification inbox of the current user within the current tenant."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.portal.api.dependencies import CurrentActor, NotificationServiceDep
from src.portal.schemas.notification import MarkAllReadResponse, NotificationRead, UnreadCount

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationRead])
async def list_notifications(
    actor: CurrentActor,
    service: NotificationServiceDep,
    unread_only: Annotated[bool, Query()] = False,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> list[NotificationRead]:
    """Newest first."""
    return await service.list_notifications(actor, unread_only=unread_only, limit=limit)


@router.get("/unread-count", response_model=UnreadCount)
async def unread_count(actor: CurrentActor, service: NotificationServiceDep) -> UnreadCount:
    return UnreadCount(count=await service.unread_count(actor))


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    actor: CurrentActor, service: NotificationServiceDep
) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=await service.mark_all_read(actor))


@router.post("/{notification_id}/read", response_model=NotificationRead)
async def mark_read(
    notification_id: UUID, actor: CurrentActor, service: NotificationServiceDep
) -> NotificationRead:
    return await service.mark_read(actor, notification_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: UUID, actor: CurrentActor, service: NotificationServiceDep
) -> None:
    await service.delete_notification(actor, notification_id)
