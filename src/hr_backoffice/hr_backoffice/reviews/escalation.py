"""Escalation of stale reviews, computed on every read.

There is no background timer: callers pass the current time (or let it
default to the wall clock). A periodic job that wants push alerts can call
``scan_escalations`` over the same pending set.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import hours_between, now_utc
from ..core.constants import ESCALATION_THRESHOLD_HOURS
from ..submissions.model import ReviewItem, TaskSubmission


@dataclass(frozen=True)
class EscalationStatus:
    submission: TaskSubmission
    hours_since_submission: float
    needs_escalation: bool

    def to_dict(self) -> dict:
        return {
            "submission": self.submission.to_dict(),
            "needsEscalation": self.needs_escalation,
            "hoursSinceSubmission": rounded_hours(self.hours_since_submission),
        }


def rounded_hours(hours: float) -> int:
    """Whole hours, halves rounded up (50.5 -> 51)."""
    return int(hours + 0.5)


def hours_since(submitted_at: datetime, now: Optional[datetime] = None) -> float:
    return hours_between(submitted_at, now or now_utc())


def needs_escalation(submission: TaskSubmission, now: Optional[datetime] = None) -> bool:
    return submission.is_pending and hours_since(submission.submitted_at, now) > ESCALATION_THRESHOLD_HOURS


def escalation_status(submission: TaskSubmission, now: Optional[datetime] = None) -> EscalationStatus:
    now = now or now_utc()
    return EscalationStatus(
        submission=submission,
        hours_since_submission=hours_since(submission.submitted_at, now),
        needs_escalation=needs_escalation(submission, now),
    )


def scan_escalations(items: Iterable[ReviewItem], now: Optional[datetime] = None) -> list[ReviewItem]:
    now = now or now_utc()
    return [item for item in items if needs_escalation(item.submission, now)]
