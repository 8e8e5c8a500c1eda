from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .notifications.factory import NotificationFactory
from .notifications.publisher import LoggingNotificationPublisher, NotificationPublisher
from .notifications.service import NotificationService
from .performance.service import PerformanceReportService
from .reviews.scoring.on_time_policy import OnTimeScoringPolicy
from .reviews.service import ReviewService
from .submissions.mysql_submission_repository import MySQLSubmissionRepository
from .submissions.repository import SubmissionRepository
from .submissions.service import SubmissionService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskService
from .users.mysql_user_repository import MySQLIdentityRepository
from .users.repository import IdentityRepository
from .users.service import IdentityService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    identity_repo: IdentityRepository
    tasks_repo: TaskRepository
    submissions_repo: SubmissionRepository
    publisher: NotificationPublisher

    identity_service: IdentityService
    task_service: TaskService
    submission_service: SubmissionService
    review_service: ReviewService
    notification_service: NotificationService
    performance_service: PerformanceReportService


def wire_container(
    *,
    identity_repo: IdentityRepository,
    tasks_repo: TaskRepository,
    submissions_repo: SubmissionRepository,
    publisher: Optional[NotificationPublisher] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build the services on top of already constructed repositories."""
    publisher = publisher or LoggingNotificationPublisher()
    notification_factory = NotificationFactory()

    identity_service = IdentityService(identity_repo)
    task_service = TaskService(tasks_repo, identity_service)
    submission_service = SubmissionService(
        submissions_repo,
        tasks_repo,
        publisher=publisher,
        notification_factory=notification_factory,
    )
    review_service = ReviewService(
        submissions_repo,
        tasks_repo,
        identity_service,
        publisher=publisher,
        scoring=OnTimeScoringPolicy(),
        notification_factory=notification_factory,
    )
    notification_service = NotificationService(
        submissions_repo,
        identity_service,
        publisher=publisher,
        factory=notification_factory,
    )
    performance_service = PerformanceReportService(tasks_repo)

    return Container(
        conn=conn,
        identity_repo=identity_repo,
        tasks_repo=tasks_repo,
        submissions_repo=submissions_repo,
        publisher=publisher,
        identity_service=identity_service,
        task_service=task_service,
        submission_service=submission_service,
        review_service=review_service,
        notification_service=notification_service,
        performance_service=performance_service,
    )


def build_container(*, db_config: dict, publisher: Optional[NotificationPublisher] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))

    return wire_container(
        identity_repo=MySQLIdentityRepository(conn),
        tasks_repo=MySQLTaskRepository(conn),
        submissions_repo=MySQLSubmissionRepository(conn),
        publisher=publisher,
        conn=conn,
    )
