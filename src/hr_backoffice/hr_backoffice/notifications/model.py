from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ..common.datetime_utils import isoformat
from ..core.enums import NotificationPriority, NotificationType

PRIORITY_RANK = {
    NotificationPriority.HIGH: 3,
    NotificationPriority.MEDIUM: 2,
    NotificationPriority.LOW: 1,
}


@dataclass(frozen=True)
class Notification:
    """Plain notification record. Delivery is somebody else's job."""

    notification_id: str
    type: NotificationType
    title: str
    message: str
    priority: NotificationPriority
    created_at: datetime
    payload: dict = field(default_factory=dict)

    def sort_key(self) -> tuple:
        # high > medium > low, then newest first
        return (-PRIORITY_RANK[self.priority], -self.created_at.timestamp())

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "priority": self.priority.value,
            "createdAt": isoformat(self.created_at),
            "data": self.payload,
        }
