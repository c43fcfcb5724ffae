"""Canonical enumerations shared by models, input schemas and pages.

Nothing else in the codebase spells out these value lists.
"""

from enum import Enum


class UserRole(str, Enum):
    """Role of a member within a tenant."""

    OWNER = "owner"
    ADMIN = "admin"
    DEVELOPER = "developer"
    AUDITOR = "auditor"


class AuthProvider(str, Enum):
    EMAIL = "email"
    GOOGLE = "google"


class SubscriptionTier(str, Enum):
    FREE = "free"
    PAID = "paid"


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class BugStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class FeatureStatus(str, Enum):
    PROPOSED = "proposed"
    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    REJECTED = "rejected"


class MilestoneStatus(str, Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Environment(str, Enum):
    """Deployment environment an env var belongs to."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"


class WorkItemType(str, Enum):
    BUG = "bug"
    FEATURE = "feature"
    TASK = "task"


class NotificationType(str, Enum):
    """Values are `<work item type>_<event>`."""

    BUG_CREATED = "bug_created"
    FEATURE_CREATED = "feature_created"
    TASK_CREATED = "task_created"
    BUG_ASSIGNED = "bug_assigned"
    FEATURE_ASSIGNED = "feature_assigned"
    TASK_ASSIGNED = "task_assigned"


# Roles that can be granted through invitations and role changes
INVITABLE_ROLES: tuple[UserRole, ...] = (UserRole.ADMIN, UserRole.DEVELOPER, UserRole.AUDITOR)

# Roles allowed to manage members, env vars and other members' channels
MANAGER_ROLES: frozenset[str] = frozenset({UserRole.OWNER.value, UserRole.ADMIN.value})
