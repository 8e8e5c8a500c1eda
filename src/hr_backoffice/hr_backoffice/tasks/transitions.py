"""Task status state machine.

Every status change goes through this table, including the manual
status-change endpoint. Moves that are not listed are rejected.
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

from ..core.enums import TaskEvent, TaskStatus
from ..core.exceptions import InvalidStateError

S = TaskStatus
E = TaskEvent

TRANSITIONS: Dict[Tuple[TaskStatus, TaskEvent], TaskStatus] = {
    (S.OPEN, E.START): S.IN_PROGRESS,
    (S.OPEN, E.SUBMIT): S.IN_PROGRESS,
    (S.IN_PROGRESS, E.SUBMIT): S.IN_PROGRESS,
    (S.OPEN, E.BLOCK): S.BLOCKED,
    (S.IN_PROGRESS, E.BLOCK): S.BLOCKED,
    (S.BLOCKED, E.UNBLOCK): S.IN_PROGRESS,
    (S.IN_PROGRESS, E.COMPLETE): S.DONE,
    (S.OPEN, E.CANCEL): S.CANCELLED,
    (S.IN_PROGRESS, E.CANCEL): S.CANCELLED,
    (S.BLOCKED, E.CANCEL): S.CANCELLED,
    (S.CANCELLED, E.REOPEN): S.OPEN,
    # approval always closes the task, whatever happened to it meanwhile
    **{(status, E.APPROVE): S.DONE for status in TaskStatus},
}

# SUBMIT and APPROVE belong to the submission/review workflow only.
MANUAL_EVENTS = frozenset({E.START, E.BLOCK, E.UNBLOCK, E.COMPLETE, E.CANCEL, E.REOPEN})


def next_status(current: TaskStatus, event: TaskEvent) -> TaskStatus:
    target = TRANSITIONS.get((current, event))
    if target is None:
        raise InvalidStateError(f"Cannot apply {event.value} to a task in status {current.value}")
    return target


def manual_event_for(current: TaskStatus, target: TaskStatus) -> Optional[TaskEvent]:
    """Find the manual event that moves ``current`` to ``target``, if any."""
    for event in MANUAL_EVENTS:
        if TRANSITIONS.get((current, event)) == target:
            return event
    return None


def allowed_targets(current: TaskStatus) -> list[TaskStatus]:
    targets = {TRANSITIONS[(current, e)] for e in MANUAL_EVENTS if (current, e) in TRANSITIONS}
    return sorted(targets, key=lambda s: list(TaskStatus).index(s))
