"""
Data model for the insight engine.

Entries, marks and factor types are read-only snapshots handed over by the
caller that owns storage. IntervalAnalysis and Insight are derived values,
created fresh on every engine run.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple


class IntervalStyle(Enum):
    """Calendar bucket sizes used to group entries (value = pandas period alias)"""
    DAY = "D"
    WEEK = "W"
    MONTH = "M"


@dataclass(frozen=True)
class FactorType:
    """
    A named category of contributing factor (e.g. "Exercise").

    Attributes:
        factor_id: Stable identity used as the grouping key
        name: Display name, may be missing
    """
    factor_id: str
    name: Optional[str] = None

    def display_name(self, fallback: str = "Name") -> str:
        return self.name or fallback


@dataclass(frozen=True)
class Mark:
    """Tags an entry with one factor type."""
    factor_type: Optional[FactorType] = None


@dataclass(frozen=True)
class Entry:
    """
    One logged observation for a card.

    Attributes:
        rating: Aggregate score for the observation
        date: When it was logged (None if unknown)
        marks: Factor marks recorded with it
    """
    rating: float
    date: Optional[datetime] = None
    marks: Tuple[Mark, ...] = ()

    def has_factor(self, factor_type: FactorType) -> bool:
        return any(mark.factor_type == factor_type for mark in self.marks)

    def count_factor(self, factor_type: FactorType) -> int:
        return sum(1 for mark in self.marks if mark.factor_type == factor_type)


@dataclass
class IntervalAnalysis:
    """
    Statistics for one factor type over one time bucket.

    Attributes:
        avg_rating: Mean rating of bucket entries without any marks (NaN if none)
        factor_type: Factor being analysed
        interval_entries: Entries in the bucket
        factor_recorded: Marks of this factor in the bucket
        reliability: Running count of factor marks in this and earlier buckets
        score: Relevance contribution of the bucket
    """
    avg_rating: float
    factor_type: FactorType
    interval_entries: Tuple[Entry, ...]
    factor_recorded: int
    reliability: float = 0.0
    score: float = 0.0

    @property
    def has_rating(self) -> bool:
        return not math.isnan(self.avg_rating)


@dataclass
class Insight:
    """A generated textual observation with a relevance score."""
    title: str
    description: str
    score: float = 0.0

    def to_dict(self) -> Dict:
        """Convert to dictionary format for JSON serialization."""
        return {
            'title': self.title,
            'description': self.description,
            'score': self.score,
        }
