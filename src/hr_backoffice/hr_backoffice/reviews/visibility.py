"""Who may see (and therefore review) which pending submissions.

ADMIN: every pending submission whose task assignee is in the workspace.
MANAGER: only those whose assignee reports directly to the manager.
EMPLOYEE: nothing.
"""
from __future__ import annotations

from typing import Iterable

from ..core.enums import Role
from ..submissions.model import ReviewItem
from ..users.model import UserIdentity


def is_visible_to(item: ReviewItem, reviewer_id: str, reviewer_role: Role, workspace_id: str) -> bool:
    if item.assignee.workspace_id != workspace_id:
        return False
    if reviewer_role == Role.ADMIN:
        return True
    if reviewer_role == Role.MANAGER:
        return item.assignee.manager_id == reviewer_id
    return False


def visible_submissions(
    pending: Iterable[ReviewItem],
    reviewer_id: str,
    reviewer_role: Role,
    workspace_id: str,
) -> list[ReviewItem]:
    """Filter a pending set down to the reviewer's scope, oldest submission first."""
    visible = [
        item
        for item in pending
        if item.submission.is_pending and is_visible_to(item, reviewer_id, reviewer_role, workspace_id)
    ]
    visible.sort(key=lambda item: item.submission.submitted_at)
    return visible


def can_review(item: ReviewItem, reviewer: UserIdentity) -> bool:
    if not reviewer.is_reviewer or not reviewer.workspace_id:
        return False
    return is_visible_to(item, reviewer.user_id, reviewer.role, reviewer.workspace_id)
