"""Unauthenticated bug and feature boards of projects that opt in."""

from uuid import UUID

from fastapi import APIRouter, Request

from src.portal.api.dependencies import BugServiceDep, FeatureServiceDep, OptionalUser
from src.portal.core.rate_limit import get_rate_limit_key, limiter
from src.portal.schemas.work_item import BugRead, FeatureRead, VoteResponse

router = APIRouter(prefix="/public/projects/{project_id}", tags=["public"])

_DISABLED = {403: {"description": "Public access is disabled for this project"}}


@router.get("/bugs", response_model=list[BugRead], responses=_DISABLED)
async def list_public_bugs(project_id: UUID, service: BugServiceDep) -> list[BugRead]:
    return await service.list_public(project_id)


@router.get("/bugs/{bug_id}", response_model=BugRead, responses=_DISABLED)
async def get_public_bug(project_id: UUID, bug_id: UUID, service: BugServiceDep) -> BugRead:
    return await service.get_public(project_id, bug_id)


@router.post("/bugs/{bug_id}/vote", response_model=VoteResponse, responses=_DISABLED)
@limiter.limit("30/hour")
async def vote_public_bug(
    request: Request, project_id: UUID, bug_id: UUID, user: OptionalUser, service: BugServiceDep
) -> VoteResponse:
    """One vote per signed-in user, or per IP address for anonymous visitors."""
    return await service.public_vote(
        project_id, bug_id, get_rate_limit_key(request), user.id if user else None
    )


@router.get("/features", response_model=list[FeatureRead], responses=_DISABLED)
async def list_public_features(project_id: UUID, service: FeatureServiceDep) -> list[FeatureRead]:
    return await service.list_public(project_id)


@router.get("/features/{feature_id}", response_model=FeatureRead, responses=_DISABLED)
async def get_public_feature(
    project_id: UUID, feature_id: UUID, service: FeatureServiceDep
) -> FeatureRead:
    return await service.get_public(project_id, feature_id)


@router.post("/features/{feature_id}/vote", response_model=VoteResponse, responses=_DISABLED)
@limiter.limit("30/hour")
async def vote_public_feature(
    request: Request,
    project_id: UUID,
    feature_id: UUID,
    user: OptionalUser,
    service: FeatureServiceDep,
) -> VoteResponse:
    return await service.public_vote(
        project_id, feature_id, get_rate_limit_key(request), user.id if user else None
    )
