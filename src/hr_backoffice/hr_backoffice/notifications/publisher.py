from __future__ import annotations

import logging
from typing import Protocol

from .model import Notification

logger = logging.getLogger(__name__)


class NotificationPublisher(Protocol):
    """Outbound port towards the real-time/email transport."""

    def publish(self, recipient_id: str, notification: Notification) -> None:
        raise NotImplementedError


class LoggingNotificationPublisher(NotificationPublisher):
    """Default publisher: records go to the log; a transport can replace it in the container."""

    def publish(self, recipient_id: str, notification: Notification) -> None:
        logger.info(
            "notification %s type=%s priority=%s -> %s: %s",
            notification.notification_id,
            notification.type.value,
            notification.priority.value,
            recipient_id,
            notification.title,
        )


def publish_safely(publisher: NotificationPublisher, recipient_id: str, notification: Notification) -> bool:
    """Best-effort publish. Failures are logged and reported as False, never raised."""
    try:
        publisher.publish(recipient_id, notification)
        return True
    except Exception:
        logger.exception("Failed to publish notification %s to %s", notification.notification_id, recipient_id)
        return False
