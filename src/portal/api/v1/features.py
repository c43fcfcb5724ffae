"""Feature request endpoints."""

from uuid import UUID

from fastapi import APIRouter, Request, status

from src.portal.api.dependencies import CurrentActor, FeatureServiceDep
from src.portal.core.rate_limit import get_rate_limit_key
from src.portal.schemas.work_item import (
    AssignUsers,
    FeatureCreate,
    FeatureRead,
    FeatureUpdate,
    VoteResponse,
)

router = APIRouter(prefix="/projects/{project_id}/features", tags=["features"])


@router.get("", response_model=list[FeatureRead])
async def list_features(
    project_id: UUID, actor: CurrentActor, service: FeatureServiceDep
) -> list[FeatureRead]:
    return await service.list_items(actor, project_id)


@router.post("", response_model=FeatureRead, status_code=status.HTTP_201_CREATED)
async def create_feature(
    project_id: UUID, data: FeatureCreate, actor: CurrentActor, service: FeatureServiceDep
) -> FeatureRead:
    return await service.create_item(actor, project_id, data)


@router.get("/{feature_id}", response_model=FeatureRead)
async def get_feature(
    project_id: UUID, feature_id: UUID, actor: CurrentActor, service: FeatureServiceDep
) -> FeatureRead:
    return await service.get_item(actor, project_id, feature_id)


@router.patch("/{feature_id}", response_model=FeatureRead)
async def update_feature(
    project_id: UUID,
    feature_id: UUID,
    data: FeatureUpdate,
    actor: CurrentActor,
    service: FeatureServiceDep,
) -> FeatureRead:
    return await service.update_item(actor, project_id, feature_id, data)


@router.delete("/{feature_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_feature(
    project_id: UUID, feature_id: UUID, actor: CurrentActor, service: FeatureServiceDep
) -> None:
    await service.delete_item(actor, project_id, feature_id)


@router.put("/{feature_id}/assignees", response_model=FeatureRead)
async def assign_feature(
    project_id: UUID,
    feature_id: UUID,
    data: AssignUsers,
    actor: CurrentActor,
    service: FeatureServiceDep,
) -> FeatureRead:
    return await service.assign_users(actor, project_id, feature_id, data.user_ids)


@router.post(
    "/{feature_id}/vote",
    response_model=VoteResponse,
    responses={409: {"description": "Already voted"}},
)
async def vote_feature(
    request: Request,
    project_id: UUID,
    feature_id: UUID,
    actor: CurrentActor,
    service: FeatureServiceDep,
) -> VoteResponse:
    return await service.vote(actor, project_id, feature_id, get_rate_limit_key(request))
