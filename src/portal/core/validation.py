"""Schema validation contract shared by the API layer and callers outside HTTP.

`validate(schema, payload)` never raises for bad input. It returns a
`ValidationResult` that either carries the parsed model or a flat list of
`{field, message}` pairs, the same shape the API returns for invalid bodies.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ValidationError

# Request locations FastAPI prefixes onto error paths
_LOCATION_PREFIXES = frozenset({"body", "query", "path", "header", "cookie"})


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class ValidationResult[ModelT: BaseModel]:
    success: bool
    data: ModelT | None = None
    errors: list[FieldError] = field(default_factory=list)


def _error_message(error: Mapping[str, Any]) -> str:
    # Plain ValueError/AssertionError from validators: pydantic prefixes the text
    ctx = error.get("ctx") or {}
    if error.get("type") in ("value_error", "assertion_error") and "error" in ctx:
        return str(ctx["error"])
    return str(error.get("msg", "Invalid value"))


def _error_field(loc: Iterable[Any]) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts)


def format_errors(errors: Iterable[Mapping[str, Any]]) -> list[FieldError]:
    """Flatten pydantic error dicts into field/message pairs."""
    return [
        FieldError(field=_error_field(error.get("loc", ())), message=_error_message(error))
        for error in errors
    ]


def validate[ModelT: BaseModel](
    schema: type[ModelT], payload: Any
) -> ValidationResult[ModelT]:
    """Validate a payload against an input schema without raising.

    Args:
        schema: Pydantic model class describing the input.
        payload: Untrusted input, usually a decoded JSON object.

    Returns:
        ValidationResult with `data` on success, `errors` otherwise.
    """
    try:
        data = schema.model_validate(payload)
    except ValidationError as e:
        return ValidationResult(success=False, errors=format_errors(e.errors()))
    return ValidationResult(success=True, data=data)
