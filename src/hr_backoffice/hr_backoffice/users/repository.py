from __future__ import annotations

from typing import Optional, Protocol

from .model import UserIdentity


class IdentityRepository(Protocol):
    """Read interface over the identity store.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_in_workspace(self, user_id: str, workspace_id: str) -> Optional[UserIdentity]:
        """Return the user only if it exists, is active and belongs to the workspace."""

        raise NotImplementedError
