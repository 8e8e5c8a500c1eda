from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import UserIdentity
from .repository import IdentityRepository


class IdentityService:
    """Use case: resolve users against the identity store.

    Every call goes to the repository: role facts used for authorization are
    never cached between requests.
    """

    def __init__(self, users: IdentityRepository):
        self._users = users

    def resolve_user(self, user_id: Optional[str], workspace_id: Optional[str], *, label: str = "User") -> UserIdentity:
        if not user_id or not workspace_id:
            raise ValidationError(f"{label} ID and workspace ID are required")

        user = self._users.get_in_workspace(str(user_id), str(workspace_id))
        if not user:
            raise NotFoundError(f"{label} not found in workspace")
        return user

    def resolve_actor(
        self,
        user_id: Optional[str],
        workspace_id: Optional[str],
        *,
        claimed_role: Optional[Role] = None,
        label: str = "User",
    ) -> UserIdentity:
        """Resolve the acting user; a claimed role must match the stored one."""
        user = self.resolve_user(user_id, workspace_id, label=label)
        if claimed_role is not None and Role(claimed_role) != user.role:
            raise AuthorizationError(f"{label} role does not match the current role on record")
        return user
