from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


@dataclass(frozen=True)
class Actor:
    """Who is calling: resolved by the HTTP layer from the upstream auth context."""

    user_id: int
    role: Role
    employee_id: Optional[int] = None

    @property
    def is_manager(self) -> bool:
        return self.role in {Role.ADMIN, Role.EMPLOYER}

    def require_manager(self) -> None:
        if not self.is_manager:
            raise AuthorizationError("You do not have permission for this action")

    def require_admin(self) -> None:
        if self.role != Role.ADMIN:
            raise AuthorizationError("Only administrators can perform this action")

    def can_access_employee(self, employee_id: int) -> bool:
        return self.is_manager or self.employee_id == int(employee_id)
