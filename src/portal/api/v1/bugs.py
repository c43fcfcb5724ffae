"""Bug tracker endpoints."""

from uuid import UUID

from fastapi import APIRouter, Request, status

from src.portal.api.dependencies import BugServiceDep, CurrentActor
from src.portal.core.rate_limit import get_rate_limit_key
from src.portal.schemas.work_item import AssignUsers, BugCreate, BugRead, BugUpdate, VoteResponse

router = APIRouter(prefix="/projects/{project_id}/bugs", tags=["bugs"])


@router.get("", response_model=list[BugRead])
async def list_bugs(project_id: UUID, actor: CurrentActor, service: BugServiceDep) -> list[BugRead]:
    """Bugs of a project, highest priority first."""
    return await service.list_items(actor, project_id)


@router.post("", response_model=BugRead, status_code=status.HTTP_201_CREATED)
async def create_bug(
    project_id: UUID, data: BugCreate, actor: CurrentActor, service: BugServiceDep
) -> BugRead:
    return await service.create_item(actor, project_id, data)


@router.get("/{bug_id}", response_model=BugRead)
async def get_bug(
    project_id: UUID, bug_id: UUID, actor: CurrentActor, service: BugServiceDep
) -> BugRead:
    return await service.get_item(actor, project_id, bug_id)


@router.patch("/{bug_id}", response_model=BugRead)
async def update_bug(
    project_id: UUID, bug_id: UUID, data: BugUpdate, actor: CurrentActor, service: BugServiceDep
) -> BugRead:
    return await service.update_item(actor, project_id, bug_id, data)


@router.delete("/{bug_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bug(
    project_id: UUID, bug_id: UUID, actor: CurrentActor, service: BugServiceDep
) -> None:
    await service.delete_item(actor, project_id, bug_id)


@router.put("/{bug_id}/assignees", response_model=BugRead)
async def assign_bug(
    project_id: UUID,
    bug_id: UUID,
    data: AssignUsers,
    actor: CurrentActor,
    service: BugServiceDep,
) -> BugRead:
    return await service.assign_users(actor, project_id, bug_id, data.user_ids)


@router.post(
    "/{bug_id}/vote",
    response_model=VoteResponse,
    responses={409: {"description": "Already voted"}},
)
async def vote_bug(
    request: Request, project_id: UUID, bug_id: UUID, actor: CurrentActor, service: BugServiceDep
) -> VoteResponse:
    return await service.vote(actor, project_id, bug_id, get_rate_limit_key(request))
