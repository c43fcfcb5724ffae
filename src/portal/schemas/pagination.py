"""Cursor-based pagination."""

import base64
import binascii

from pydantic import BaseModel, Field


class PaginatedResponse[T](BaseModel):
    """One page of results. The cursor is opaque to clients."""

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Cursor for the next page. None if there are no more pages.",
    )
    has_more: bool = Field(default=False, description="Whether more items follow this page.")


def encode_cursor(value: str) -> str:
    return base64.urlsafe_b64encode(value.encode()).decode()


def decode_cursor(cursor: str) -> str:
    """Decode a cursor produced by `encode_cursor`.

    Raises:
        ValueError: If the cursor is not valid base64 text.
    """
    try:
        return base64.urlsafe_b64decode(cursor.encode()).decode()
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError("Invalid cursor") from e
