from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role as resolved from the identity store."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


class TaskStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    BLOCKED = "BLOCKED"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TaskEvent(str, Enum):
    """Events that drive the task status state machine."""

    START = "START"
    SUBMIT = "SUBMIT"
    BLOCK = "BLOCK"
    UNBLOCK = "UNBLOCK"
    COMPLETE = "COMPLETE"
    CANCEL = "CANCEL"
    REOPEN = "REOPEN"
    APPROVE = "APPROVE"


class TaskView(str, Enum):
    ASSIGNED = "assigned"
    CREATED = "created"
    ALL = "all"


class SubmissionStatus(str, Enum):
    """Review flow state of a submission (pending -> approved/rejected)."""

    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(str, Enum):
    PENDING_REVIEW = "pending_review"
    ESCALATION = "escalation"
    SUBMISSION_REVIEWED = "submission_reviewed"
    CUSTOM = "custom"


class NotificationPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PerformancePeriod(str, Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    ALL = "all"
