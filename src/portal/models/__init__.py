"""Model exports.

Import from here: `from src.portal.models import User, Project`
"""

from src.portal.models.channel import Channel, ChannelPermission, Message
from src.portal.models.enums import (
    INVITABLE_ROLES,
    MANAGER_ROLES,
    AuthProvider,
    BugStatus,
    Environment,
    FeatureStatus,
    MilestoneStatus,
    NotificationType,
    ProjectStatus,
    SubscriptionTier,
    TaskStatus,
    UserRole,
    WorkItemType,
)
from src.portal.models.milestone import Milestone
from src.portal.models.notification import Notification
from src.portal.models.project import EnvVar, Project
from src.portal.models.tenant import Tenant, TenantMember
from src.portal.models.user import RefreshToken, User, UserEnvVar
from src.portal.models.work_item import (
    Bug,
    Feature,
    Task,
    WorkItemAssignment,
    WorkItemVote,
)

__all__ = [
    # Enums
    "INVITABLE_ROLES",
    "MANAGER_ROLES",
    "AuthProvider",
    "BugStatus",
    "Environment",
    "FeatureStatus",
    "MilestoneStatus",
    "NotificationType",
    "ProjectStatus",
    "SubscriptionTier",
    "TaskStatus",
    "UserRole",
    "WorkItemType",
    # Accounts and tenancy
    "RefreshToken",
    "Tenant",
    "TenantMember",
    "User",
    "UserEnvVar",
    # Inbox
    "Notification",
    # Project data
    "Bug",
    "Channel",
    "ChannelPermission",
    "EnvVar",
    "Feature",
    "Message",
    "Milestone",
    "Project",
    "Task",
    "WorkItemAssignment",
    "WorkItemVote",
]
