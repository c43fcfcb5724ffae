"""Tenant and membership factories."""

from polyfactory import Use

from src.portal.models import Tenant, TenantMember
from src.portal.models.enums import SubscriptionTier, UserRole
from tests.factories.base import BaseFactory, generate_uuid, short_id, utc_now


class TenantFactory(BaseFactory):
    __model__ = Tenant

    id = Use(generate_uuid)
    name = Use(lambda: f"Test Tenant {short_id()}")
    owner_id = Use(generate_uuid)
    subscription_tier = SubscriptionTier.FREE.value
    max_projects = 1
    max_team_members = 1
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def paid(cls, **kwargs):
        return cls.build(
            subscription_tier=SubscriptionTier.PAID.value,
            max_projects=10,
            max_team_members=10,
            **kwargs,
        )


class TenantMemberFactory(BaseFactory):
    __model__ = TenantMember

    tenant_id = None  # Required FK - must be set explicitly
    user_id = None  # Required FK - must be set explicitly
    role = UserRole.DEVELOPER.value
    created_at = Use(utc_now)
