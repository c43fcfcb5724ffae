from src.portal.services.auth_service import AuthService
from src.portal.services.channel_service import ChannelService
from src.portal.services.context import Actor
from src.portal.services.env_var_service import EnvVarService
from src.portal.services.milestone_service import MilestoneService
from src.portal.services.notification_service import NotificationService
from src.portal.services.page_service import PageService
from src.portal.services.project_service import ProjectService
from src.portal.services.tenant_service import TenantService
from src.portal.services.user_env_var_service import UserEnvVarService
from src.portal.services.user_service import UserService
from src.portal.services.work_item_service import BugService, FeatureService, TaskService

__all__ = [
    "Actor",
    "AuthService",
    "BugService",
    "ChannelService",
    "EnvVarService",
    "FeatureService",
    "MilestoneService",
    "NotificationService",
    "PageService",
    "ProjectService",
    "TaskService",
    "TenantService",
    "UserEnvVarService",
    "UserService",
]
