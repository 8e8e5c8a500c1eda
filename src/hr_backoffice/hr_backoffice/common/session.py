from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import session

from ..core.exceptions import AuthenticationError

# Filled in by the external sign-in flow; this service only reads them.
SESSION_USER_ID = "user_id"
SESSION_WORKSPACE_ID = "workspace_id"
SESSION_ROLE = "role"


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get(SESSION_USER_ID) or not session.get(SESSION_WORKSPACE_ID):
            raise AuthenticationError("Please sign in to continue")
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> str:
    return str(session[SESSION_USER_ID])


def current_workspace_id() -> str:
    return str(session[SESSION_WORKSPACE_ID])


def current_role() -> Optional[str]:
    return session.get(SESSION_ROLE)
