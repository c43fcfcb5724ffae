"""Selected project context for page endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status


async def get_selected_project_id(
    x_project_id: Annotated[str | None, Header()] = None,
) -> UUID | None:
    """Project id from the X-Project-ID header, None when absent."""
    if not x_project_id:
        return None
    try:
        return UUID(x_project_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-Project-ID header",
        ) from e


SelectedProjectId = Annotated[UUID | None, Depends(get_selected_project_id)]
