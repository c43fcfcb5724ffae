"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.portal.api.dependencies.db import DBSession
from src.portal.repositories import (
    AssignmentRepository,
    BugRepository,
    ChannelPermissionRepository,
    ChannelRepository,
    EnvVarRepository,
    FeatureRepository,
    MembershipRepository,
    MessageRepository,
    MilestoneRepository,
    NotificationRepository,
    ProjectRepository,
    RefreshTokenRepository,
    TaskRepository,
    TenantRepository,
    UserEnvVarRepository,
    UserRepository,
    VoteRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_token_repository(session: DBSession) -> RefreshTokenRepository:
    return RefreshTokenRepository(session)


def get_tenant_repository(session: DBSession) -> TenantRepository:
    return TenantRepository(session)


def get_membership_repository(session: DBSession) -> MembershipRepository:
    return MembershipRepository(session)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_env_var_repository(session: DBSession) -> EnvVarRepository:
    return EnvVarRepository(session)


def get_bug_repository(session: DBSession) -> BugRepository:
    return BugRepository(session)


def get_feature_repository(session: DBSession) -> FeatureRepository:
    return FeatureRepository(session)


def get_task_repository(session: DBSession) -> TaskRepository:
    return TaskRepository(session)


def get_assignment_repository(session: DBSession) -> AssignmentRepository:
    return AssignmentRepository(session)


def get_vote_repository(session: DBSession) -> VoteRepository:
    return VoteRepository(session)


def get_milestone_repository(session: DBSession) -> MilestoneRepository:
    return MilestoneRepository(session)


def get_channel_repository(session: DBSession) -> ChannelRepository:
    return ChannelRepository(session)


def get_channel_permission_repository(session: DBSession) -> ChannelPermissionRepository:
    return ChannelPermissionRepository(session)


def get_message_repository(session: DBSession) -> MessageRepository:
    return MessageRepository(session)


def get_user_env_var_repository(session: DBSession) -> UserEnvVarRepository:
    return UserEnvVarRepository(session)


def get_notification_repository(session: DBSession) -> NotificationRepository:
    return NotificationRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
TokenRepo = Annotated[RefreshTokenRepository, Depends(get_token_repository)]
TenantRepo = Annotated[TenantRepository, Depends(get_tenant_repository)]
MembershipRepo = Annotated[MembershipRepository, Depends(get_membership_repository)]
ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
EnvVarRepo = Annotated[EnvVarRepository, Depends(get_env_var_repository)]
BugRepo = Annotated[BugRepository, Depends(get_bug_repository)]
FeatureRepo = Annotated[FeatureRepository, Depends(get_feature_repository)]
TaskRepo = Annotated[TaskRepository, Depends(get_task_repository)]
AssignmentRepo = Annotated[AssignmentRepository, Depends(get_assignment_repository)]
VoteRepo = Annotated[VoteRepository, Depends(get_vote_repository)]
MilestoneRepo = Annotated[MilestoneRepository, Depends(get_milestone_repository)]
ChannelRepo = Annotated[ChannelRepository, Depends(get_channel_repository)]
ChannelPermissionRepo = Annotated[
    ChannelPermissionRepository, Depends(get_channel_permission_repository)
]
MessageRepo = Annotated[MessageRepository, Depends(get_message_repository)]
UserEnvVarRepo = Annotated[UserEnvVarRepository, Depends(get_user_env_var_repository)]
NotificationRepo = Annotated[NotificationRepository, Depends(get_notification_repository)]
