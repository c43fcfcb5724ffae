"""Reusable field rules for input schemas.

Every rule reports a fixed, human-readable message through
PydanticCustomError so `validate()` and the API return exactly that text.
"""

import re
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from enum import Enum
from typing import Any, ClassVar, NoReturn

from pydantic import AfterValidator, AnyUrl, BaseModel, BeforeValidator, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

_URL_ADAPTER = TypeAdapter(AnyUrl)


class InputSchema(BaseModel):
    """Base for request bodies. Enum fields are stored as their plain values."""

    model_config = ConfigDict(use_enum_values=True)


def fail(message: str, error_type: str = "invalid_value") -> NoReturn:
    raise PydanticCustomError(error_type, message)


def text_rule(
    max_length: int,
    too_long: str,
    *,
    required: str | None = None,
    min_length: int = 1,
    pattern: str | None = None,
    pattern_message: str | None = None,
) -> AfterValidator:
    """Length bounds (and optionally a regex) with custom messages.

    `required` is the message for strings shorter than `min_length`; when it
    is None empty strings are accepted.
    """
    compiled = re.compile(pattern) if pattern else None

    def check(value: str) -> str:
        if required is not None and len(value) < min_length:
            fail(required, "string_too_short")
        if len(value) > max_length:
            fail(too_long, "string_too_long")
        if compiled is not None and not compiled.fullmatch(value):
            fail(pattern_message or "Invalid format", "string_pattern_mismatch")
        return value

    return AfterValidator(check)


def one_of(choices: type[Enum] | Iterable[Enum], message: str) -> BeforeValidator:
    """Restrict a field to the given enum members with a custom message."""
    allowed = frozenset(member.value for member in choices)

    def check(value: Any) -> Any:
        if isinstance(value, Enum):
            value = value.value
        if not isinstance(value, str) or value not in allowed:
            fail(message, "enum")
        return value

    return BeforeValidator(check)


def email_rule(message: str = "Invalid email address") -> AfterValidator:
    def check(value: str) -> str:
        try:
            _, normalized = validate_email(value)
        except PydanticCustomError:
            fail(message, "value_error")
        return normalized

    return AfterValidator(check)


def url_rule(message: str, max_length: int | None = None, too_long: str = "") -> AfterValidator:
    def check(value: str) -> str:
        try:
            _URL_ADAPTER.validate_python(value)
        except PydanticValidationError:
            fail(message, "url_parsing")
        if max_length is not None and len(value) > max_length:
            fail(too_long, "string_too_long")
        return value

    return AfterValidator(check)


def must_be_true(message: str) -> AfterValidator:
    def check(value: bool) -> bool:
        if value is not True:
            fail(message, "literal_error")
        return value

    return AfterValidator(check)


def _parse_datetime(message: str) -> Callable[[Any], datetime]:
    def parse(value: Any) -> datetime:
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, str):
            try:
                parsed = datetime.fromisoformat(value)
            except ValueError:
                fail(message, "datetime_parsing")
        else:
            fail(message, "datetime_type")
        # Database columns hold naive UTC
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(UTC).replace(tzinfo=None)
        return parsed

    return parse


def datetime_rule(message: str = "Invalid date format") -> BeforeValidator:
    return BeforeValidator(_parse_datetime(message))


def min_items(count: int, message: str) -> AfterValidator:
    def check(value: list[Any]) -> list[Any]:
        if len(value) < count:
            fail(message, "too_short")
        return value

    return AfterValidator(check)


_PASSWORD_RULES: tuple[tuple[str, str], ...] = (
    (r"[A-Z]", "Password must contain at least one uppercase letter"),
    (r"[a-z]", "Password must contain at least one lowercase letter"),
    (r"[0-9]", "Password must contain at least one number"),
)


def password_rule(max_length: int | None = None) -> AfterValidator:
    """At least 8 characters with an uppercase letter, a lowercase letter and a digit."""

    def check(value: str) -> str:
        if len(value) < 8:
            fail("Password must be at least 8 characters", "string_too_short")
        if max_length is not None and len(value) > max_length:
            fail("Password is too long", "string_too_long")
        for pattern, message in _PASSWORD_RULES:
            if not re.search(pattern, value):
                fail(message, "string_pattern_mismatch")
        return value

    return AfterValidator(check)


class UpdateSchema(InputSchema):
    """Base for partial updates: every field optional, `{}` is a valid body."""

    # Fields where an explicit null clears the stored value
    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    def changes(self) -> dict[str, Any]:
        """Fields the client sent, minus nulls for columns that cannot be null."""
        data = self.model_dump(exclude_unset=True)
        return {k: v for k, v in data.items() if v is not None or k in self.nullable_fields}
