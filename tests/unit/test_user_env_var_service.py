"""Unit tests for personal environment variables."""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from src.portal.core.exceptions import ConflictError, NotFoundError
from src.portal.core.security import decrypt, is_encrypted
from src.portal.schemas import UserEnvVarCreate, UserEnvVarUpdate
from src.portal.services import UserEnvVarService
from tests.factories import UserEnvVarFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def env_var_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.add = MagicMock()
    repo.get_by_key.return_value = None
    return repo


@pytest.fixture
def service(env_var_repo, mock_session) -> UserEnvVarService:
    return UserEnvVarService(env_var_repo, mock_session)


class TestUserEnvVars:
    async def test_list_decrypts_values(self, service, user_id, env_var_repo):
        env_var_repo.list_for_user.return_value = [
            UserEnvVarFactory.build(user_id=user_id, key="A_TOKEN"),
            UserEnvVarFactory.build(user_id=user_id, key="B_TOKEN"),
        ]

        result = await service.list_env_vars(user_id)

        assert [(v.key, v.value) for v in result] == [
            ("A_TOKEN", "personal-secret"),
            ("B_TOKEN", "personal-secret"),
        ]
        env_var_repo.list_for_user.assert_awaited_once_with(user_id)

    async def test_create_stores_ciphertext(self, service, user_id, env_var_repo):
        with patch("src.portal.services.user_env_var_service.logger") as logger:
            result = await service.create_env_var(
                user_id, UserEnvVarCreate(key="GITHUB_TOKEN", value="ghp_secret")
            )

        stored = env_var_repo.add.call_args.args[0]
        assert stored.user_id == user_id
        assert is_encrypted(stored.value)
        assert decrypt(stored.value) == "ghp_secret"
        assert result.value == "ghp_secret"
        assert "ghp_secret" not in repr(logger.info.call_args)

    async def test_duplicate_key(self, service, user_id, env_var_repo, mock_session):
        env_var_repo.get_by_key.return_value = UserEnvVarFactory.build(
            user_id=user_id, key="GITHUB_TOKEN"
        )

        with pytest.raises(ConflictError) as exc_info:
            await service.create_env_var(
                user_id, UserEnvVarCreate(key="GITHUB_TOKEN", value="other")
            )

        assert exc_info.value.code == "DUPLICATE_ENV_VAR"
        assert exc_info.value.status_code == 409
        env_var_repo.add.assert_not_called()
        mock_session.rollback.assert_awaited_once()

    async def test_rename_checks_uniqueness(self, service, user_id, env_var_repo):
        env_var = UserEnvVarFactory.build(user_id=user_id, key="OLD_NAME")
        env_var_repo.get_for_user.return_value = env_var
        env_var_repo.get_by_key.return_value = UserEnvVarFactory.build(
            user_id=user_id, key="NEW_NAME"
        )

        with pytest.raises(ConflictError):
            await service.update_env_var(
                user_id, env_var.id, UserEnvVarUpdate(key="NEW_NAME")
            )

        assert env_var.key == "OLD_NAME"

    async def test_update_value_re_encrypts(self, service, user_id, env_var_repo):
        env_var = UserEnvVarFactory.build(user_id=user_id)
        env_var_repo.get_for_user.return_value = env_var

        result = await service.update_env_var(
            user_id, env_var.id, UserEnvVarUpdate(value="rotated")
        )

        assert decrypt(env_var.value) == "rotated"
        assert result.value == "rotated"
        env_var_repo.get_by_key.assert_not_awaited()

    async def test_other_users_variable_is_not_found(self, service, user_id, env_var_repo):
        env_var_repo.get_for_user.return_value = None
        env_var_id = uuid4()

        with pytest.raises(NotFoundError) as exc_info:
            await service.delete_env_var(user_id, env_var_id)

        assert exc_info.value.code == "USER_ENV_VAR_NOT_FOUND"
        env_var_repo.get_for_user.assert_awaited_once_with(env_var_id, user_id)
        env_var_repo.delete.assert_not_awaited()
