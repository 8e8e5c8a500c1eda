from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class UserIdentity:
    """Identity facts of a user as the identity module exposes them.

    Note: read-only here; this service never writes users.
    """

    user_id: str
    full_name: str
    email: str
    role: Role
    workspace_id: Optional[str]
    manager_id: Optional[str] = None
    is_active: bool = True

    @property
    def is_reviewer(self) -> bool:
        return self.role in (Role.ADMIN, Role.MANAGER)
