"""
Time utility functions for the insight engine.

This module groups entries into calendar buckets (day, week, month) and
selects the entries that fall inside a recent window, e.g. "this week".

Weeks start on Monday (ISO week standard).
"""
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

import pandas as pd
from dateutil.relativedelta import relativedelta

from insight_core.models import Entry, IntervalStyle
from insight_core.utils.constants import RECENT_WEEK_DAYS


def bucket_start(moment: datetime, style: IntervalStyle) -> date:
    """
    Calculate the first day of the calendar bucket containing ``moment``.

    Examples:
        >>> bucket_start(datetime(2025, 12, 10, 18, 30), IntervalStyle.DAY)
        date(2025, 12, 10)

        >>> bucket_start(datetime(2025, 12, 10), IntervalStyle.WEEK)  # Wednesday
        date(2025, 12, 8)  # Monday

        >>> bucket_start(datetime(2025, 12, 10), IntervalStyle.MONTH)
        date(2025, 12, 1)
    """
    day = moment.date()
    if style == IntervalStyle.WEEK:
        return day - timedelta(days=day.weekday())
    if style == IntervalStyle.MONTH:
        return day.replace(day=1)
    return day


def group_entries_by(entries: Sequence[Entry], style: IntervalStyle) -> List[List[Entry]]:
    """
    Partition dated entries into calendar buckets of the given size.

    Buckets come back in chronological order; entries keep their input order
    inside a bucket. Entries without a date belong to no bucket.

    Args:
        entries: Entries to group
        style: Bucket size

    Returns:
        List of non-empty buckets
    """
    rows = [
        {'position': position, 'bucket': bucket_start(entry.date, style)}
        for position, entry in enumerate(entries)
        if entry.date is not None
    ]
    if not rows:
        return []

    df = pd.DataFrame(rows)
    grouped = df.groupby('bucket', sort=True)['position'].apply(list)
    return [[entries[position] for position in positions] for positions in grouped]


def recent_window_start(now: datetime, style: IntervalStyle) -> datetime:
    """Start of the recent window ending at ``now`` (last 7 days / last month / today)."""
    if style == IntervalStyle.WEEK:
        return now - timedelta(days=RECENT_WEEK_DAYS)
    if style == IntervalStyle.MONTH:
        return now - relativedelta(months=1)
    return now - timedelta(days=1)


def recent_entries_in(entries: Sequence[Entry], style: IntervalStyle,
                      now: Optional[datetime] = None) -> List[Entry]:
    """
    Select the entries dated inside the recent window, preserving order.

    Args:
        entries: Entries to filter
        style: WEEK for the last 7 days, MONTH for the last calendar month
        now: End of the window. Defaults to the current time.
    """
    if now is None:
        now = datetime.now()
    start = recent_window_start(now, style)
    return [
        entry for entry in entries
        if entry.date is not None and start <= entry.date <= now
    ]


def whole_days_between(start: datetime, end: datetime) -> int:
    """Number of complete days from ``start`` to ``end`` (0 if end is earlier)."""
    return max((end - start).days, 0)
