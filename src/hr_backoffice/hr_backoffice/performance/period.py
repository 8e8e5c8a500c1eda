from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from ..common.datetime_utils import ensure_utc
from ..core.enums import PerformancePeriod


def period_start(period: PerformancePeriod, now: datetime) -> Optional[datetime]:
    """Lower bound (inclusive) of the reporting window; None means no bound."""
    now = ensure_utc(now)
    if period == PerformancePeriod.WEEK:
        return now - timedelta(days=7)
    if period == PerformancePeriod.MONTH:
        return datetime(now.year, now.month, 1, tzinfo=timezone.utc)
    if period == PerformancePeriod.QUARTER:
        first_month = ((now.month - 1) // 3) * 3 + 1
        return datetime(now.year, first_month, 1, tzinfo=timezone.utc)
    return None
