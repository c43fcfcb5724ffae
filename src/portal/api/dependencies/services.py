"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.portal.api.dependencies.db import DBSession
from src.portal.api.dependencies.repositories import (
    AssignmentRepo,
    BugRepo,
    ChannelPermissionRepo,
    ChannelRepo,
    EnvVarRepo,
    FeatureRepo,
    MembershipRepo,
    MessageRepo,
    MilestoneRepo,
    NotificationRepo,
    ProjectRepo,
    TaskRepo,
    TenantRepo,
    TokenRepo,
    UserEnvVarRepo,
    UserRepo,
    VoteRepo,
)
from src.portal.services import (
    AuthService,
    BugService,
    ChannelService,
    EnvVarService,
    FeatureService,
    MilestoneService,
    NotificationService,
    PageService,
    ProjectService,
    TaskService,
    TenantService,
    UserEnvVarService,
    UserService,
)


def get_auth_service(
    user_repo: UserRepo,
    token_repo: TokenRepo,
    tenant_repo: TenantRepo,
    membership_repo: MembershipRepo,
    session: DBSession,
) -> AuthService:
    return AuthService(user_repo, token_repo, tenant_repo, membership_repo, session)


def get_user_service(user_repo: UserRepo, token_repo: TokenRepo, session: DBSession) -> UserService:
    return UserService(user_repo, token_repo, session)


def get_tenant_service(
    tenant_repo: TenantRepo,
    membership_repo: MembershipRepo,
    user_repo: UserRepo,
    session: DBSession,
) -> TenantService:
    return TenantService(tenant_repo, membership_repo, user_repo, session)


def get_project_service(
    project_repo: ProjectRepo, tenant_repo: TenantRepo, session: DBSession
) -> ProjectService:
    return ProjectService(project_repo, tenant_repo, session)


def get_env_var_service(
    env_var_repo: EnvVarRepo, project_repo: ProjectRepo, session: DBSession
) -> EnvVarService:
    return EnvVarService(env_var_repo, project_repo, session)


def get_user_env_var_service(
    env_var_repo: UserEnvVarRepo, session: DBSession
) -> UserEnvVarService:
    return UserEnvVarService(env_var_repo, session)


def get_notification_service(
    notification_repo: NotificationRepo,
    membership_repo: MembershipRepo,
    user_repo: UserRepo,
    session: DBSession,
) -> NotificationService:
    return NotificationService(notification_repo, membership_repo, user_repo, session)


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


def get_bug_service(
    repo: BugRepo,
    project_repo: ProjectRepo,
    membership_repo: MembershipRepo,
    assignment_repo: AssignmentRepo,
    vote_repo: VoteRepo,
    notifier: NotificationServiceDep,
    session: DBSession,
) -> BugService:
    return BugService(
        repo, project_repo, membership_repo, assignment_repo, vote_repo, notifier, session
    )


def get_feature_service(
    repo: FeatureRepo,
    project_repo: ProjectRepo,
    membership_repo: MembershipRepo,
    assignment_repo: AssignmentRepo,
    vote_repo: VoteRepo,
    notifier: NotificationServiceDep,
    session: DBSession,
) -> FeatureService:
    return FeatureService(
        repo, project_repo, membership_repo, assignment_repo, vote_repo, notifier, session
    )


def get_task_service(
    repo: TaskRepo,
    project_repo: ProjectRepo,
    membership_repo: MembershipRepo,
    assignment_repo: AssignmentRepo,
    milestone_repo: MilestoneRepo,
    notifier: NotificationServiceDep,
    session: DBSession,
) -> TaskService:
    return TaskService(
        repo, project_repo, membership_repo, assignment_repo, milestone_repo, notifier, session
    )


def get_milestone_service(
    milestone_repo: MilestoneRepo, project_repo: ProjectRepo, session: DBSession
) -> MilestoneService:
    return MilestoneService(milestone_repo, project_repo, session)


def get_channel_service(
    channel_repo: ChannelRepo,
    permission_repo: ChannelPermissionRepo,
    message_repo: MessageRepo,
    project_repo: ProjectRepo,
    membership_repo: MembershipRepo,
    session: DBSession,
) -> ChannelService:
    return ChannelService(
        channel_repo, permission_repo, message_repo, project_repo, membership_repo, session
    )


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
TenantServiceDep = Annotated[TenantService, Depends(get_tenant_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
EnvVarServiceDep = Annotated[EnvVarService, Depends(get_env_var_service)]
UserEnvVarServiceDep = Annotated[UserEnvVarService, Depends(get_user_env_var_service)]
BugServiceDep = Annotated[BugService, Depends(get_bug_service)]
FeatureServiceDep = Annotated[FeatureService, Depends(get_feature_service)]
TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
MilestoneServiceDep = Annotated[MilestoneService, Depends(get_milestone_service)]
ChannelServiceDep = Annotated[ChannelService, Depends(get_channel_service)]


def get_page_service(
    project_repo: ProjectRepo,
    env_var_service: EnvVarServiceDep,
    channel_service: ChannelServiceDep,
) -> PageService:
    return PageService(project_repo, env_var_service, channel_service)


PageServiceDep = Annotated[PageService, Depends(get_page_service)]
