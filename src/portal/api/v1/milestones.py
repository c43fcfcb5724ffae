"""Milestone endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from src.portal.api.dependencies import CurrentActor, MilestoneServiceDep
from src.portal.schemas.milestone import (
    MilestoneCreate,
    MilestoneLock,
    MilestoneRead,
    MilestoneUpdate,
)

router = APIRouter(prefix="/projects/{project_id}/milestones", tags=["milestones"])

_LOCKED = {423: {"description": "Milestone is locked"}}


@router.get("", response_model=list[MilestoneRead])
async def list_milestones(
    project_id: UUID, actor: CurrentActor, service: MilestoneServiceDep
) -> list[MilestoneRead]:
    milestones = await service.list_milestones(actor, project_id)
    return [MilestoneRead.model_validate(m) for m in milestones]


@router.post("", response_model=MilestoneRead, status_code=status.HTTP_201_CREATED)
async def create_milestone(
    project_id: UUID, data: MilestoneCreate, actor: CurrentActor, service: MilestoneServiceDep
) -> MilestoneRead:
    return MilestoneRead.model_validate(await service.create_milestone(actor, project_id, data))


@router.get("/{milestone_id}", response_model=MilestoneRead)
async def get_milestone(
    project_id: UUID, milestone_id: UUID, actor: CurrentActor, service: MilestoneServiceDep
) -> MilestoneRead:
    return MilestoneRead.model_validate(
        await service.get_milestone(actor, project_id, milestone_id)
    )


@router.patch("/{milestone_id}", response_model=MilestoneRead, responses=_LOCKED)
async def update_milestone(
    project_id: UUID,
    milestone_id: UUID,
    data: MilestoneUpdate,
    actor: CurrentActor,
    service: MilestoneServiceDep,
) -> MilestoneRead:
    return MilestoneRead.model_validate(
        await service.update_milestone(actor, project_id, milestone_id, data)
    )


@router.delete(
    "/{milestone_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_LOCKED
)
async def delete_milestone(
    project_id: UUID, milestone_id: UUID, actor: CurrentActor, service: MilestoneServiceDep
) -> None:
    await service.delete_milestone(actor, project_id, milestone_id)


@router.put("/{milestone_id}/lock", response_model=MilestoneRead)
async def set_milestone_lock(
    project_id: UUID,
    milestone_id: UUID,
    data: MilestoneLock,
    actor: CurrentActor,
    service: MilestoneServiceDep,
) -> MilestoneRead:
    """Lock or unlock a milestone."""
    return MilestoneRead.model_validate(
        await service.set_locked(actor, project_id, milestone_id, data.is_locked)
    )
