"""
Streak bookkeeping
Calendar-day streak arithmetic applied on every activity completion
"""

from datetime import datetime
from typing import Optional

from selfcare.utils.time import as_utc


def calendar_day_gap(last: Optional[datetime], now: datetime) -> Optional[int]:
    """Whole UTC calendar days between two instants (None when ``last`` is unset)"""
    if last is None:
        return None
    return (as_utc(now).date() - as_utc(last).date()).days


def update_streak(record, now: datetime) -> bool:
    """
    Apply one completion to a streak record.

    ``record`` is anything exposing current_streak, longest_streak,
    last_activity_date and total_activities_completed (a UserDB in practice).

    Args:
        record: Streak holder, mutated in place
        now: Completion instant

    Returns:
        True when the current streak changed
    """
    gap = calendar_day_gap(record.last_activity_date, now)
    current = record.current_streak or 0

    if gap is None or gap > 1:
        new_streak = 1
    elif gap == 1:
        new_streak = current + 1
    else:
        # Same day, or a clock that moved backwards
        new_streak = current

    changed = gap is None or gap >= 1
    if changed:
        record.current_streak = new_streak
        record.last_activity_date = now

    record.longest_streak = max(record.longest_streak or 0, record.current_streak or 0)
    record.total_activities_completed = (record.total_activities_completed or 0) + 1
    return changed
