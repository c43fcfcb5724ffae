"""Project-scoped factories: projects, env vars, work items, milestones and channels."""

from datetime import timedelta

from polyfactory import Use

from src.portal.core.security import encrypt
from src.portal.models import (
    Bug,
    Channel,
    ChannelPermission,
    EnvVar,
    Feature,
    Milestone,
    Project,
    Task,
)
from src.portal.models.enums import (
    BugStatus,
    Environment,
    FeatureStatus,
    MilestoneStatus,
    ProjectStatus,
    TaskStatus,
)
from tests.factories.base import BaseFactory, generate_uuid, short_id, utc_now


class ProjectFactory(BaseFactory):
    __model__ = Project

    id = Use(generate_uuid)
    tenant_id = None  # Required FK - must be set explicitly
    name = Use(lambda: f"Project {short_id()}")
    description = None
    status = ProjectStatus.ACTIVE.value
    public_bug_tracking = False
    public_feature_requests = False
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def public(cls, **kwargs):
        return cls.build(public_bug_tracking=True, public_feature_requests=True, **kwargs)


class EnvVarFactory(BaseFactory):
    """Stores an encrypted value like the service does."""

    __model__ = EnvVar

    id = Use(generate_uuid)
    project_id = None  # Required FK - must be set explicitly
    key = Use(lambda: f"KEY_{short_id().upper()}")
    value = Use(lambda: encrypt("secret-value"))
    environment = Environment.DEVELOPMENT.value
    created_by_id = Use(generate_uuid)
    created_at = Use(utc_now)
    updated_at = Use(utc_now)


class BugFactory(BaseFactory):
    __model__ = Bug

    id = Use(generate_uuid)
    project_id = None  # Required FK - must be set explicitly
    title = "Login button unresponsive"
    description = "Clicking login does nothing on Safari"
    url = None
    priority = 0
    status = BugStatus.OPEN.value
    votes = 0
    owner_id = Use(generate_uuid)
    created_by_id = Use(generate_uuid)
    created_at = Use(utc_now)
    updated_at = Use(utc_now)


class FeatureFactory(BaseFactory):
    __model__ = Feature

    id = Use(generate_uuid)
    project_id = None  # Required FK - must be set explicitly
    title = "Dark mode"
    description = "Offer a dark colour scheme"
    priority = 0
    status = FeatureStatus.PROPOSED.value
    votes = 0
    owner_id = Use(generate_uuid)
    created_by_id = Use(generate_uuid)
    created_at = Use(utc_now)
    updated_at = Use(utc_now)


class TaskFactory(BaseFactory):
    __model__ = Task

    id = Use(generate_uuid)
    project_id = None  # Required FK - must be set explicitly
    title = "Write release notes"
    description = None
    category = None
    priority = 0
    status = TaskStatus.TODO.value
    milestone_id = None
    owner_id = Use(generate_uuid)
    created_by_id = Use(generate_uuid)
    created_at = Use(utc_now)
    updated_at = Use(utc_now)


class MilestoneFactory(BaseFactory):
    __model__ = Milestone

    id = Use(generate_uuid)
    project_id = None  # Required FK - must be set explicitly
    name = "Beta"
    description = None
    estimated_completion_date = Use(lambda: utc_now() + timedelta(days=30))
    actual_completion_date = None
    status = MilestoneStatus.PLANNED.value
    order = 0
    is_locked = False
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def locked(cls, **kwargs):
        return cls.build(is_locked=True, **kwargs)


class ChannelFactory(BaseFactory):
    __model__ = Channel

    id = Use(generate_uuid)
    project_id = None  # Required FK - must be set explicitly
    name = "general"
    description = None
    is_private = False
    created_by_id = Use(generate_uuid)
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def private(cls, **kwargs):
        return cls.build(is_private=True, name=kwargs.pop("name", "leads"), **kwargs)


class ChannelPermissionFactory(BaseFactory):
    __model__ = ChannelPermission

    channel_id = None  # Required FK - must be set explicitly
    user_id = None  # Required FK - must be set explicitly
    can_view = True
    can_post = True
