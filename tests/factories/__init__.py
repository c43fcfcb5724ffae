"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, ProjectFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.notification import NotificationFactory
from tests.factories.project import (
    BugFactory,
    ChannelFactory,
    ChannelPermissionFactory,
    EnvVarFactory,
    FeatureFactory,
    MilestoneFactory,
    ProjectFactory,
    TaskFactory,
)
from tests.factories.tenant import TenantFactory, TenantMemberFactory
from tests.factories.user import (
    DEFAULT_TEST_PASSWORD,
    RefreshTokenFactory,
    UserEnvVarFactory,
    UserFactory,
)

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Accounts and tenancy
    "DEFAULT_TEST_PASSWORD",
    "RefreshTokenFactory",
    "TenantFactory",
    "TenantMemberFactory",
    "UserEnvVarFactory",
    "UserFactory",
    # Inbox
    "NotificationFactory",
    # Project data
    "BugFactory",
    "ChannelFactory",
    "ChannelPermissionFactory",
    "EnvVarFactory",
    "FeatureFactory",
    "MilestoneFactory",
    "ProjectFactory",
    "TaskFactory",
]
