"""FastAPI dependency injection definitions."""

from src.portal.api.dependencies.auth import (
    CurrentActor,
    CurrentUser,
    ManagerActor,
    OptionalUser,
    get_current_actor,
    get_current_identity,
    get_current_user,
    get_optional_user,
    require_manager,
)
from src.portal.api.dependencies.db import DBSession, get_db_session
from src.portal.api.dependencies.project import SelectedProjectId, get_selected_project_id
from src.portal.api.dependencies.repositories import (
    MembershipRepo,
    ProjectRepo,
    TenantRepo,
    UserRepo,
)
from src.portal.api.dependencies.services import (
    AuthServiceDep,
    BugServiceDep,
    ChannelServiceDep,
    EnvVarServiceDep,
    FeatureServiceDep,
    MilestoneServiceDep,
    NotificationServiceDep,
    PageServiceDep,
    ProjectServiceDep,
    TaskServiceDep,
    TenantServiceDep,
    UserEnvVarServiceDep,
    UserServiceDep,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "CurrentActor",
    "CurrentUser",
    "ManagerActor",
    "OptionalUser",
    "get_current_actor",
    "get_current_identity",
    "get_current_user",
    "get_optional_user",
    "require_manager",
    # Project context
    "SelectedProjectId",
    "get_selected_project_id",
    # Repositories
    "MembershipRepo",
    "ProjectRepo",
    "TenantRepo",
    "UserRepo",
    # Services
    "AuthServiceDep",
    "BugServiceDep",
    "ChannelServiceDep",
    "EnvVarServiceDep",
    "FeatureServiceDep",
    "MilestoneServiceDep",
    "NotificationServiceDep",
    "PageServiceDep",
    "ProjectServiceDep",
    "TaskServiceDep",
    "TenantServiceDep",
    "UserEnvVarServiceDep",
    "UserServiceDep",
]
