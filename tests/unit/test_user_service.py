"""Unit tests for UserService."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.portal.core.exceptions import NotFoundError, PortalError
from src.portal.core.security import verify_password
from src.portal.schemas import PasswordChange, ProfileUpdate
from src.portal.services import UserService
from tests.factories import DEFAULT_TEST_PASSWORD, UserFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def user():
    return UserFactory.build(avatar_url="https://example.com/a.png")


@pytest.fixture
def user_repo(user) -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_id.return_value = user
    return repo


@pytest.fixture
def token_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.revoke_all_for_user.return_value = 3
    return repo


@pytest.fixture
def service(user_repo, token_repo, mock_session) -> UserService:
    return UserService(user_repo, token_repo, mock_session)


async def test_unknown_user(service, user_repo):
    user_repo.get_by_id.return_value = None

    with pytest.raises(NotFoundError) as exc_info:
        await service.get_user(uuid4())

    assert exc_info.value.code == "USER_NOT_FOUND"


async def test_profile_update_clears_avatar(service, user, mock_session):
    data = ProfileUpdate.model_validate({"name": "Ada L.", "avatar_url": None})

    result = await service.update_profile(user.id, data)

    assert result.name == "Ada L."
    assert result.avatar_url is None
    mock_session.commit.assert_awaited_once()


async def test_change_password_revokes_sessions(service, user, token_repo, mock_session):
    data = PasswordChange(current_password=DEFAULT_TEST_PASSWORD, new_password="NewPassword456")

    await service.change_password(user.id, data)

    assert verify_password("NewPassword456", user.hashed_password)
    token_repo.revoke_all_for_user.assert_awaited_once_with(user.id)
    mock_session.commit.assert_awaited_once()


async def test_wrong_current_password(service, user, token_repo, mock_session):
    data = PasswordChange(current_password="WrongPassword1", new_password="NewPassword456")

    with pytest.raises(PortalError) as exc_info:
        await service.change_password(user.id, data)

    assert exc_info.value.code == "INVALID_PASSWORD"
    token_repo.revoke_all_for_user.assert_not_awaited()
    mock_session.rollback.assert_awaited_once()


async def test_external_account_has_no_password(service, user_repo):
    user_repo.get_by_id.return_value = UserFactory.external()
    data = PasswordChange(current_password="anything", new_password="NewPassword456")

    with pytest.raises(PortalError) as exc_info:
        await service.change_password(uuid4(), data)

    assert exc_info.value.code == "PASSWORD_NOT_SET"
