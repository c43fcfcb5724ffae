"""Base factory configuration for polyfactory."""

from uuid import uuid4

from polyfactory.factories.sqlalchemy_factory import SQLAlchemyFactory

from src.portal.models.base import utc_now

__all__ = ["BaseFactory", "generate_uuid", "short_id", "utc_now"]


def generate_uuid():
    return uuid4()


def short_id() -> str:
    """Eight hex characters for unique names and emails."""
    return uuid4().hex[-8:]


class BaseFactory(SQLAlchemyFactory):
    """Base factory for all models.

    Relationships and foreign keys are never generated; tests pass FK
    values explicitly.
    """

    __is_base_factory__ = True
    __set_relationships__ = False
    __set_foreign_keys__ = False
