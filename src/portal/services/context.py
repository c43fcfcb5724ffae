"""Who is acting: the authenticated member a service call runs on behalf of."""

from dataclasses import dataclass
from uuid import UUID

from src.portal.core.exceptions import ForbiddenError
from src.portal.models.enums import MANAGER_ROLES, UserRole


@dataclass(frozen=True)
class Actor:
    """An authenticated user acting inside one tenant with their current role."""

    user_id: UUID
    tenant_id: UUID
    role: str

    @property
    def is_owner(self) -> bool:
        return self.role == UserRole.OWNER.value

    @property
    def is_manager(self) -> bool:
        """Owner or admin."""
        return self.role in MANAGER_ROLES

    def require_manager(self, message: str = "Insufficient permissions") -> None:
        if not self.is_manager:
            raise ForbiddenError(message, "FORBIDDEN_INSUFFICIENT_PERMISSIONS")
