"""Unit tests for TenantService."""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from src.portal.core.exceptions import (
    ConflictError,
    ForbiddenError,
    LimitExceededError,
    NotFoundError,
)
from src.portal.core.security import TokenType, create_invitation_token, decode_token
from src.portal.models.enums import UserRole
from src.portal.services import TenantService
from src.portal.services.tenant_service import ensure_member_capacity, ensure_project_capacity
from tests.factories import TenantFactory, TenantMemberFactory, UserFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def tenant(tenant_id, owner):
    return TenantFactory.paid(id=tenant_id, owner_id=owner.user_id)


@pytest.fixture
def tenant_repo(tenant) -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_id.return_value = tenant
    repo.count_members.return_value = 2
    repo.count_projects.return_value = 1
    return repo


@pytest.fixture
def membership_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.get_membership.return_value = None
    repo.create_membership = MagicMock(
        side_effect=lambda user_id, tenant_id, role: TenantMemberFactory.build(
            user_id=user_id, tenant_id=tenant_id, role=role
        )
    )
    return repo


@pytest.fixture
def user_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_email.return_value = None
    repo.get_by_id.return_value = UserFactory.build(name="Olive Owner")
    return repo


@pytest.fixture
def service(tenant_repo, membership_repo, user_repo, mock_session) -> TenantService:
    return TenantService(tenant_repo, membership_repo, user_repo, mock_session)


class TestUpdateTenant:
    async def test_owner_renames(self, service, owner, tenant, mock_session):
        result = await service.update_tenant(owner, "Renamed")

        assert result.name == "Renamed"
        mock_session.commit.assert_awaited_once()

    async def test_admin_cannot_rename(self, service, admin, tenant, mock_session):
        with pytest.raises(ForbiddenError) as exc_info:
            await service.update_tenant(admin, "Renamed")

        assert exc_info.value.code == "FORBIDDEN_NOT_OWNER"
        assert tenant.name != "Renamed"
        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()


class TestInviteUser:
    @pytest.fixture(autouse=True)
    def sent_emails(self):
        with patch(
            "src.portal.services.tenant_service.send_invitation_email", return_value=True
        ) as send:
            yield send

    async def test_developer_cannot_invite(self, service, developer):
        with pytest.raises(ForbiddenError) as exc_info:
            await service.invite_user(developer, "new@example.com", "developer")

        assert exc_info.value.code == "FORBIDDEN_INSUFFICIENT_PERMISSIONS"

    async def test_owner_role_not_invitable(self, service, admin):
        with pytest.raises(ForbiddenError) as exc_info:
            await service.invite_user(admin, "new@example.com", UserRole.OWNER.value)

        assert exc_info.value.code == "INVALID_ROLE"

    async def test_member_limit(self, service, owner, tenant_repo):
        tenant_repo.count_members.return_value = 10

        with pytest.raises(LimitExceededError) as exc_info:
            await service.invite_user(owner, "new@example.com", "developer")

        assert exc_info.value.code == "LIMIT_EXCEEDED_TEAM_MEMBERS"
        assert exc_info.value.status_code == 403

    async def test_existing_member_conflicts(self, service, owner, user_repo, membership_repo):
        existing = UserFactory.build(email="dev@example.com")
        user_repo.get_by_email.return_value = existing
        membership_repo.get_membership.return_value = TenantMemberFactory.build(
            user_id=existing.id, tenant_id=owner.tenant_id
        )

        with pytest.raises(ConflictError) as exc_info:
            await service.invite_user(owner, "dev@example.com", "developer")

        assert exc_info.value.code == "USER_ALREADY_MEMBER"

    async def test_sends_signed_invitation(self, service, admin, tenant, sent_emails):
        result = await service.invite_user(admin, "new@example.com", "auditor")

        assert result.email_sent is True
        assert result.role == "auditor"
        payload = decode_token(result.invitation_token, TokenType.INVITATION)
        assert payload["tenant_id"] == str(tenant.id)
        assert payload["email"] == "new@example.com"
        assert payload["invited_by"] == str(admin.user_id)
        sent_emails.assert_called_once()
        assert sent_emails.call_args.kwargs["inviter_name"] == "Olive Owner"


class TestAcceptInvitation:
    async def test_joins_tenant_with_invited_role(
        self, service, tenant, membership_repo, mock_session
    ):
        user = UserFactory.build(email="new@example.com")
        token = create_invitation_token(tenant.id, "NEW@example.com", "developer", uuid4())

        membership = await service.accept_invitation(user, token)

        assert membership.role == "developer"
        membership_repo.create_membership.assert_called_once_with(user.id, tenant.id, "developer")
        mock_session.commit.assert_awaited_once()

    async def test_email_mismatch(self, service, tenant):
        user = UserFactory.build(email="someone@example.com")
        token = create_invitation_token(tenant.id, "new@example.com", "developer", uuid4())

        with pytest.raises(ForbiddenError) as exc_info:
            await service.accept_invitation(user, token)

        assert exc_info.value.code == "EMAIL_MISMATCH"

    async def test_garbage_token(self, service):
        with pytest.raises(ForbiddenError) as exc_info:
            await service.accept_invitation(UserFactory.build(), "not-a-token")

        assert exc_info.value.code == "INVALID_INVITATION"

    async def test_already_member(self, service, tenant, membership_repo):
        user = UserFactory.build(email="new@example.com")
        membership_repo.get_membership.return_value = TenantMemberFactory.build(
            user_id=user.id, tenant_id=tenant.id
        )
        token = create_invitation_token(tenant.id, user.email, "developer", uuid4())

        with pytest.raises(ConflictError):
            await service.accept_invitation(user, token)


class TestMemberManagement:
    async def test_owner_role_cannot_change(self, service, admin, tenant, membership_repo):
        membership_repo.get_membership.return_value = TenantMemberFactory.build(
            user_id=tenant.owner_id, tenant_id=tenant.id, role=UserRole.OWNER.value
        )

        with pytest.raises(ForbiddenError) as exc_info:
            await service.update_member_role(admin, tenant.owner_id, "developer")

        assert exc_info.value.code == "CANNOT_CHANGE_OWNER_ROLE"

    async def test_change_role(self, service, owner, membership_repo, mock_session):
        member_id = uuid4()
        membership_repo.get_membership.return_value = TenantMemberFactory.build(
            user_id=member_id, tenant_id=owner.tenant_id, role="developer"
        )

        result = await service.update_member_role(owner, member_id, "admin")

        assert result.role == "admin"
        mock_session.commit.assert_awaited_once()

    async def test_unknown_member(self, service, owner):
        with pytest.raises(NotFoundError) as exc_info:
            await service.update_member_role(owner, uuid4(), "admin")

        assert exc_info.value.code == "MEMBER_NOT_FOUND"

    async def test_owner_cannot_be_removed(self, service, admin, tenant, membership_repo):
        membership_repo.get_membership.return_value = TenantMemberFactory.build(
            user_id=tenant.owner_id, tenant_id=tenant.id, role=UserRole.OWNER.value
        )

        with pytest.raises(ForbiddenError) as exc_info:
            await service.remove_member(admin, tenant.owner_id)

        assert exc_info.value.code == "CANNOT_REMOVE_OWNER"
        membership_repo.delete.assert_not_awaited()

    async def test_remove_member(self, service, admin, membership_repo, mock_session):
        member = TenantMemberFactory.build(user_id=uuid4(), tenant_id=admin.tenant_id)
        membership_repo.get_membership.return_value = member

        await service.remove_member(admin, member.user_id)

        membership_repo.delete.assert_awaited_once_with(member)
        mock_session.commit.assert_awaited_once()

    async def test_auditor_cannot_remove(self, service, auditor):
        with pytest.raises(ForbiddenError):
            await service.remove_member(auditor, uuid4())


class TestQueries:
    async def test_capacity_checks_count_against_tier(self, tenant, tenant_repo):
        tenant_repo.count_projects.return_value = 10
        tenant_repo.count_members.return_value = 9

        with pytest.raises(LimitExceededError) as exc_info:
            await ensure_project_capacity(tenant_repo, tenant)
        await ensure_member_capacity(tenant_repo, tenant)

        assert exc_info.value.code == "LIMIT_EXCEEDED_PROJECTS"
        tenant_repo.count_projects.assert_awaited_once_with(tenant.id)
        tenant_repo.count_members.assert_awaited_once_with(tenant.id)

    async def test_get_tenant_counts(self, service, tenant, membership_repo):
        user = UserFactory.build()
        membership_repo.list_members.return_value = [
            (TenantMemberFactory.build(user_id=user.id, tenant_id=tenant.id), user)
        ]

        detail = await service.get_tenant(tenant.id)

        assert detail.member_count == 1
        assert detail.project_count == 1
        assert detail.members[0].email == user.email
