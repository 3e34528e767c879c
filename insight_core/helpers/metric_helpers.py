"""
Metric helper functions for insight generation.
Implements the averaging, interval and sampling primitives shared by the
correlation, frequency and trend analyses.

All statistical methods use pure numpy. An empty average is NaN; callers
check with math.isnan and omit the insight instead of propagating it.
"""
import math
from datetime import datetime
from typing import List, Optional, Sequence, TypeVar

import numpy as np

from insight_core.models import Entry, IntervalStyle
from insight_core.utils.constants import DAY, WEEK, MONTH, YEAR

T = TypeVar('T')


def average(values: Sequence[float]) -> float:
    """
    Arithmetic mean, NaN for an empty sequence.

    Args:
        values: Numbers to average

    Returns:
        float mean (NaN if values is empty)
    """
    if len(values) == 0:
        return float('nan')
    return float(np.mean(np.asarray(values, dtype=float)))


def percent_change(initial: float, changed: float) -> float:
    """
    Percent change from ``initial`` to ``changed``.

    Formula: (changed - initial) / initial * 100

    Returns NaN when the ratio is undefined (initial of zero or NaN).
    """
    if math.isnan(initial) or math.isnan(changed) or initial == 0:
        return float('nan')
    return (changed - initial) / initial * 100


def round_to(value: float, places: int = 1) -> float:
    """Round half away from zero, so 66.65 -> 66.7 and -0.05 -> -0.1."""
    factor = 10 ** places
    return float(np.sign(value) * np.floor(abs(value) * factor + 0.5) / factor)


def average_interval_between(entries: Sequence[Entry]) -> float:
    """
    Mean gap in seconds between consecutive dated entries.

    Entries are sorted by date first; undated entries are skipped.

    Returns:
        float seconds (NaN with fewer than two dated entries)
    """
    dates: List[datetime] = sorted(entry.date for entry in entries if entry.date is not None)
    if len(dates) < 2:
        return float('nan')

    timestamps = np.array([moment.timestamp() for moment in dates], dtype=float)
    return float(np.mean(np.diff(timestamps)))


def closest_interval_style(seconds: float) -> Optional[IntervalStyle]:
    """
    Find the smallest calendar bucket that can contain the given interval.

    < 1 day -> DAY, < 1 week -> WEEK, < 1 month -> MONTH, otherwise None.
    """
    if math.isnan(seconds) or seconds < 0:
        return None
    if seconds < DAY:
        return IntervalStyle.DAY
    if seconds < WEEK:
        return IntervalStyle.WEEK
    if seconds < MONTH:
        return IntervalStyle.MONTH
    return None


def describe_interval_gap(seconds: float) -> str:
    """Human label for an interval too sparse to bucket."""
    if seconds < YEAR:
        return "more than a month apart"
    return "more than a year apart"


def shuffle_and_cap(items: Sequence[T], rng: np.random.Generator, limit: int = 2) -> List[T]:
    """
    Shuffle ``items`` and keep at most ``limit`` of them.

    Args:
        items: Candidates
        rng: Random source
        limit: Maximum number kept

    Returns:
        New list; every element comes from ``items``
    """
    order = rng.permutation(len(items))
    return [items[int(index)] for index in order[:limit]]


def random_score(rng: np.random.Generator, upper: float) -> float:
    """Uniform relevance score in [0, upper)."""
    return float(rng.uniform(0.0, upper))
