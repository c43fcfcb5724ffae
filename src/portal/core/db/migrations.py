"""Alembic migration runner for deployments."""

from alembic import command
from alembic.config import Config


def run_migrations_sync(revision: str = "head") -> None:
    """Upgrade the database to `revision` using alembic.ini in the working dir."""
    command.upgrade(Config("alembic.ini"), revision)
