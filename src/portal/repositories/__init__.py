"""Repository layer - data access only, no commits."""

from src.portal.repositories.base import BaseRepository
from src.portal.repositories.channel import (
    ChannelPermissionRepository,
    ChannelRepository,
    MessageRepository,
)
from src.portal.repositories.milestone import MilestoneRepository
from src.portal.repositories.notification import NotificationRepository
from src.portal.repositories.project import EnvVarRepository, ProjectRepository
from src.portal.repositories.tenant import MembershipRepository, TenantRepository
from src.portal.repositories.user import (
    RefreshTokenRepository,
    UserEnvVarRepository,
    UserRepository,
)
from src.portal.repositories.work_item import (
    AssignmentRepository,
    BugRepository,
    FeatureRepository,
    TaskRepository,
    VoteRepository,
    WorkItemRepository,
)

__all__ = [
    # Base
    "BaseRepository",
    # Accounts and tenancy
    "MembershipRepository",
    "RefreshTokenRepository",
    "TenantRepository",
    "UserEnvVarRepository",
    "UserRepository",
    # Inbox
    "NotificationRepository",
    # Projects
    "EnvVarRepository",
    "MilestoneRepository",
    "ProjectRepository",
    # Work items
    "AssignmentRepository",
    "BugRepository",
    "FeatureRepository",
    "TaskRepository",
    "VoteRepository",
    "WorkItemRepository",
    # Channels
    "ChannelPermissionRepository",
    "ChannelRepository",
    "MessageRepository",
]
