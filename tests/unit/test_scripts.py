"""Tests for the maintenance scripts."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from limits import RateLimitItemPerMinute
from limits.storage import RedisStorage

from src.portal.core.config import Settings, get_settings
from src.portal.scripts import serve
from src.portal.scripts import verify_user as verify_user_script
from src.portal.scripts.clear_rate_limits import clear_rate_limits
from src.portal.scripts.verify_user import verify_user
from tests.factories import UserFactory

pytestmark = pytest.mark.unit


class TestClearRateLimits:
    async def test_clears_prefixed_keys(self, fake_redis, capsys):
        await fake_redis.set("rl:10.0.0.1", "1")
        await fake_redis.set("rl:global:10.0.0.1", "1")
        await fake_redis.set("blacklist:abc", "1")
        fake_redis.aclose = AsyncMock()

        count = await clear_rate_limits(fake_redis)

        assert count == 2
        assert await fake_redis.exists("blacklist:abc") == 1
        output = capsys.readouterr().out
        assert "Connected to Redis" in output
        assert "Cleared 2 rate limit keys" in output
        fake_redis.aclose.assert_awaited_once()

    async def test_clears_login_limiter_hits(self, fake_redis, capsys):
        login_limit = RateLimitItemPerMinute(5)
        key = login_limit.key_for("rl", "10.0.0.1", "src.portal.api.v1.auth.login")
        await fake_redis.set(f"{RedisStorage.PREFIX}:{key}", "5")
        fake_redis.aclose = AsyncMock()

        assert await clear_rate_limits(fake_redis) == 1
        assert await fake_redis.keys("*") == []
        assert "Cleared 1 rate limit keys" in capsys.readouterr().out

    async def test_nothing_to_clear(self, fake_redis, capsys):
        fake_redis.aclose = AsyncMock()

        assert await clear_rate_limits(fake_redis) == 0
        assert "No rate limit keys found" in capsys.readouterr().out

    async def test_unreachable(self, capsys):
        client = AsyncMock()
        client.ping.side_effect = ConnectionError("connection refused")

        assert await clear_rate_limits(client) is None
        assert "Error: connection refused" in capsys.readouterr().out
        client.aclose.assert_awaited_once()


class TestVerifyUser:
    @pytest.fixture
    def session(self):
        session = AsyncMock()

        @asynccontextmanager
        async def fake_get_session(engine):
            yield session

        with patch("src.portal.scripts.verify_user.get_session", fake_get_session):
            yield session

    async def test_marks_verified(self, session, capsys):
        user = UserFactory.unverified(email="dev@example.com")
        engine = AsyncMock()
        repo = MagicMock()
        repo.get_by_email = AsyncMock(return_value=user)

        with patch("src.portal.scripts.verify_user.UserRepository", return_value=repo):
            result = await verify_user("dev@example.com", engine)

        assert result is user
        assert user.email_verified is True
        session.commit.assert_awaited_once()
        engine.dispose.assert_awaited_once()
        assert "User verified successfully:" in capsys.readouterr().out

    async def test_unknown_email(self, session, capsys):
        engine = AsyncMock()
        repo = MagicMock()
        repo.get_by_email = AsyncMock(return_value=None)

        with patch("src.portal.scripts.verify_user.UserRepository", return_value=repo):
            assert await verify_user("ghost@example.com", engine) is None

        assert "Error verifying user: No user with email ghost@example.com" in (
            capsys.readouterr().out
        )
        session.commit.assert_not_awaited()
        engine.dispose.assert_awaited_once()

    def test_cli_defaults_to_configured_email(self):
        with (
            patch("src.portal.scripts.verify_user.verify_user", new_callable=AsyncMock) as run,
            patch("src.portal.scripts.verify_user.create_engine") as create_engine,
        ):
            verify_user_script.main([])

        assert Settings.model_fields["verify_user_email"].default == "admin@example.com"
        run.assert_awaited_once_with(
            get_settings().verify_user_email, create_engine.return_value
        )


class TestServe:
    def test_runs_uvicorn_with_settings(self):
        with (
            patch.object(serve.uvicorn, "run") as run,
            patch.object(serve, "run_migrations_sync") as migrate,
        ):
            serve.main(["--port", "9000"])

        migrate.assert_not_called()
        assert run.call_args.args == ("src.portal.main:app",)
        assert run.call_args.kwargs["port"] == 9000
        assert run.call_args.kwargs["reload"] is False

    def test_migrate_first(self):
        with (
            patch.object(serve.uvicorn, "run") as run,
            patch.object(serve, "run_migrations_sync") as migrate,
        ):
            serve.main(["--migrate"])

        migrate.assert_called_once_with()
        run.assert_called_once()
