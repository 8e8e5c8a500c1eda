from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import parse_enum, require_non_empty
from ..core.constants import RECENT_REVIEWED_LIMIT
from ..core.enums import NotificationPriority, NotificationType
from ..core.exceptions import ValidationError
from ..reviews.escalation import scan_escalations
from ..reviews.visibility import visible_submissions
from ..submissions.repository import SubmissionRepository
from ..users.service import IdentityService
from .factory import NotificationFactory
from .model import Notification
from .publisher import NotificationPublisher, publish_safely

logger = logging.getLogger(__name__)

# feed filter -> notification types kept
FEED_KINDS = {
    "all": None,
    "pending_reviews": {NotificationType.PENDING_REVIEW},
    "escalations": {NotificationType.ESCALATION},
}


class NotificationService:
    """Builds each user's notification feed from the current workflow state."""

    def __init__(
        self,
        submissions: SubmissionRepository,
        identity: IdentityService,
        *,
        publisher: NotificationPublisher,
        factory: Optional[NotificationFactory] = None,
    ):
        self._submissions = submissions
        self._identity = identity
        self._publisher = publisher
        self._factory = factory or NotificationFactory()

    def notifications_for(
        self,
        *,
        user_id: Optional[str],
        workspace_id: Optional[str],
        kind: Optional[str] = "all",
        now: Optional[datetime] = None,
    ) -> list[Notification]:
        kind = kind or "all"
        if kind not in FEED_KINDS:
            raise ValidationError(f"Invalid type. Must be one of: {', '.join(FEED_KINDS)}")

        user = self._identity.resolve_user(user_id, workspace_id)
        now = now or now_utc()
        notifications: list[Notification] = []

        if user.is_reviewer:
            pending = visible_submissions(
                self._submissions.list_pending_for_workspace(user.workspace_id),
                user.user_id,
                user.role,
                user.workspace_id,
            )
            notifications.extend(self._factory.pending_review(item) for item in pending)
            notifications.extend(self._factory.escalation(item) for item in scan_escalations(pending, now))

        reviewed = self._submissions.list_reviewed_for_user(user.user_id, limit=RECENT_REVIEWED_LIMIT)
        notifications.extend(self._factory.submission_reviewed(item) for item in reviewed[:RECENT_REVIEWED_LIMIT])

        keep = FEED_KINDS[kind]
        if keep is not None:
            notifications = [n for n in notifications if n.type in keep]

        notifications.sort(key=Notification.sort_key)
        return notifications

    def create_notification(
        self,
        *,
        user_id: Optional[str],
        workspace_id: Optional[str],
        type: Optional[str],
        title: Optional[str],
        message: Optional[str],
        priority: Optional[str] = None,
        payload: Optional[dict] = None,
        now: Optional[datetime] = None,
    ) -> Notification:
        """Ad-hoc notification: validated, handed to the publisher, returned. Nothing is stored."""
        if not user_id or not workspace_id or not type or not title or not message:
            raise ValidationError("User ID, workspace ID, type, title, and message are required")

        if payload is not None and not isinstance(payload, dict):
            raise ValidationError("Notification data must be an object")

        recipient = self._identity.resolve_user(user_id, workspace_id)
        notification = Notification(
            notification_id=f"notification_{uuid.uuid4().hex}",
            type=parse_enum(NotificationType, type, "type"),
            title=require_non_empty(title, "Title"),
            message=require_non_empty(message, "Message"),
            priority=parse_enum(NotificationPriority, priority, "priority") if priority else NotificationPriority.MEDIUM,
            created_at=now or now_utc(),
            payload=dict(payload or {}),
        )
        if not publish_safely(self._publisher, recipient.user_id, notification):
            logger.warning("Notification %s created but not delivered", notification.notification_id)
        return notification
