"""
Card Insights Engine

Rule-based insights over the entry history of a single card.
Three independent analyses run over the same entries:

- Correlation: are ratings better or worse in periods where a factor was recorded?
- Frequency: how often is each factor recorded?
- Trend: how does this week compare to this month?

Each analysis is sampled down to a couple of insights, then anything that
does not clear the score threshold is dropped. Scores of the frequency and
trend insights are random rank-ordering hints, not measured statistics.
"""
import logging
import math
import numbers
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from insight_core.exceptions import InvalidEntryError
from insight_core.helpers import metric_helpers
from insight_core.models import Entry, FactorType, Insight, IntervalAnalysis, IntervalStyle
from insight_core.utils import time_utils
from insight_core.utils.constants import WORD_BETTER, WORD_SIGNIFICANT, WORD_SLIGHT, WORD_WORSE
from insight_core.utils.insight_settings import get_insight_settings
from insight_core.utils.logging_utils import configure_logging, insight_run

logger = logging.getLogger(__name__)

RandomSource = Union[None, int, np.random.Generator]


def sort_into_groups_by_factor_type(entries: Sequence[Entry]) -> Dict[FactorType, List[Entry]]:
    """
    Group entries by the factor types marked on them.

    An entry appears once per factor type even if it carries several marks
    of that type. Marks without a type are ignored. Groups keep first-seen order.
    """
    groups: Dict[FactorType, List[Entry]] = {}
    for entry in entries:
        for mark in entry.marks:
            if mark.factor_type is None:
                continue
            group = groups.setdefault(mark.factor_type, [])
            if not group or group[-1] is not entry:
                group.append(entry)
    return groups


def interval_analyses_with(buckets: Sequence[Sequence[Entry]],
                           factor_type: FactorType) -> List[IntervalAnalysis]:
    """
    Build one IntervalAnalysis per bucket for ``factor_type``.

    The bucket rating average only uses entries with no marks at all, so the
    baseline is not skewed by factor days. ``reliability`` keeps counting
    across buckets.
    """
    analyses = []
    reliability = 0.0
    for bucket in buckets:
        ratings = []
        factor_recorded = 0
        for entry in bucket:
            recorded = entry.count_factor(factor_type)
            factor_recorded += recorded
            reliability += recorded
            if not entry.marks:
                ratings.append(entry.rating)

        analyses.append(IntervalAnalysis(
            avg_rating=metric_helpers.average(ratings),
            factor_type=factor_type,
            interval_entries=tuple(bucket),
            factor_recorded=factor_recorded,
            reliability=reliability,
        ))
    return analyses


class InsightsEngine:
    """
    Generates insights from the entries of one card.

    The engine holds only its dependencies (clock, random source, settings);
    the card name and entries are passed to every call.

    Example usage:
        engine = InsightsEngine(rng=42)
        for insight in engine.generate_insights(entries, "Mood"):
            print(f"{insight.title}: {insight.description}")
    """

    def __init__(self, now: Optional[datetime] = None, rng: RandomSource = None,
                 config: Optional[Dict] = None):
        self.now = now
        self.rng = np.random.default_rng(rng)
        self.config = config if config is not None else get_insight_settings()

    # =========================================================================
    # ENTRY POINT
    # =========================================================================

    def generate_insights(self, entries: Sequence[Entry], card_name: str = "") -> List[Insight]:
        """
        Run all analyses, sample each, and filter by score.

        Returns:
            Insights scoring above SCORE_THRESHOLD; empty with too few entries
        """
        card_name = card_name or ""
        if len(entries) <= self.config['MIN_ENTRIES']:
            logger.debug(f"Only {len(entries)} entries for '{card_name}', skipping insights")
            return []

        self._validate_entries(entries)
        now = self._resolve_now(entries)

        results = (
            self.correlation_insights(entries, card_name),
            self.frequency_insights(entries, card_name, now),
            self.trend_insights(entries, card_name, now),
        )

        limit = self.config['MAX_PER_ANALYSIS']
        sampled: List[Insight] = []
        for result in results:
            sampled.extend(metric_helpers.shuffle_and_cap(result, self.rng, limit))

        threshold = self.config['SCORE_THRESHOLD']
        return [insight for insight in sampled if insight.score > threshold]

    def _validate_entries(self, entries: Sequence[Entry]):
        for index, entry in enumerate(entries):
            rating = entry.rating
            if isinstance(rating, bool) or not isinstance(rating, numbers.Real):
                raise InvalidEntryError(index, f"rating {rating!r} is not a number")
            if not math.isfinite(rating):
                raise InvalidEntryError(index, f"rating {rating!r} is not finite")

    def _resolve_now(self, entries: Sequence[Entry]) -> datetime:
        """Use the injected clock, or the current time in the entries' timezone."""
        if self.now is not None:
            return self.now
        tz = next((entry.date.tzinfo for entry in entries if entry.date is not None), None)
        return datetime.now(tz)

    def _factor_name(self, factor_type: FactorType) -> str:
        return factor_type.display_name(self.config['FALLBACK_FACTOR_NAME'])

    def _magnitude_word(self, difference: float) -> str:
        if abs(difference) > self.config['SIGNIFICANCE_THRESHOLD']:
            return WORD_SIGNIFICANT
        return WORD_SLIGHT

    # =========================================================================
    # CORRELATION ANALYSIS
    # =========================================================================

    def correlation_insights(self, entries: Sequence[Entry], card_name: str) -> List[Insight]:
        """
        Compare buckets where a factor was recorded to buckets where it was not.

        The bucket size follows how often the factor is recorded: a factor
        logged several times a day is compared day by day, a weekly one month
        by month. Factors recorded less than monthly are skipped.
        """
        insights = []
        for factor_type, factor_entries in sort_into_groups_by_factor_type(entries).items():
            name = self._factor_name(factor_type)
            gap = metric_helpers.average_interval_between(factor_entries)
            style = metric_helpers.closest_interval_style(gap)
            if style is None:
                if not math.isnan(gap):
                    logger.debug(f"Skipping correlation for {name}: entries are "
                                 f"{metric_helpers.describe_interval_gap(gap)}")
                continue

            buckets = time_utils.group_entries_by(entries, style)
            analyses = interval_analyses_with(buckets, factor_type)

            with_factor = [a.avg_rating for a in analyses if a.factor_recorded > 0 and a.has_rating]
            without_factor = [a.avg_rating for a in analyses if a.factor_recorded == 0 and a.has_rating]
            with_average = metric_helpers.average(with_factor)
            without_average = metric_helpers.average(without_factor)
            if math.isnan(with_average) or math.isnan(without_average):
                logger.debug(f"Skipping correlation for {name}: no baseline to compare")
                continue

            difference = with_average - without_average
            direction = WORD_BETTER if difference > 0 else WORD_WORSE
            insights.append(Insight(
                title=f"{name} / {card_name} Correlation",
                description=f"{card_name} is {self._magnitude_word(difference)} {direction} with {name}",
                score=float(sum(a.score for a in analyses)),
            ))
        return insights

    # =========================================================================
    # FREQUENCY ANALYSIS
    # =========================================================================

    def frequency_insights(self, entries: Sequence[Entry], card_name: str,
                           now: Optional[datetime] = None) -> List[Insight]:
        """
        Average how many times per day each factor is recorded.

        Every day with entries counts, including days before the factor was
        first recorded. Days since the first occurrence without any entry
        count as zero.
        ``card_name`` is accepted for a uniform analysis signature.
        """
        now = now if now is not None else self._resolve_now(entries)
        day_buckets = time_utils.group_entries_by(entries, IntervalStyle.DAY)

        insights = []
        for factor_type, factor_entries in sort_into_groups_by_factor_type(entries).items():
            name = self._factor_name(factor_type)
            dates = [entry.date for entry in factor_entries if entry.date is not None]
            if not dates:
                continue
            first = min(dates)
            first_day = first.date()

            counts = {
                analysis.interval_entries[0].date.date(): analysis.factor_recorded
                for analysis in interval_analyses_with(day_buckets, factor_type)
            }
            for offset in range(time_utils.whole_days_between(first, now)):
                counts.setdefault(first_day + timedelta(days=offset), 0)

            per_day = metric_helpers.average(list(counts.values()))
            if math.isnan(per_day) or per_day <= 0:
                continue

            if per_day < 1:
                description = f"On average you record {name} about once every {1 / per_day:.0f} days"
            else:
                description = f"On average you record {name} {per_day:.2f} times every day"
            insights.append(Insight(
                title=f"{name} Frequency",
                description=description,
                score=metric_helpers.random_score(self.rng, self.config['FREQUENCY_SCORE_MAX']),
            ))
        return insights

    # =========================================================================
    # TREND ANALYSIS
    # =========================================================================

    def trend_insights(self, entries: Sequence[Entry], card_name: str,
                       now: Optional[datetime] = None) -> List[Insight]:
        """Compare this week's ratings to this month's."""
        now = now if now is not None else self._resolve_now(entries)
        week = time_utils.recent_entries_in(entries, IntervalStyle.WEEK, now)
        month = time_utils.recent_entries_in(entries, IntervalStyle.MONTH, now)
        return self.trend_insight_from_ratings(
            [entry.rating for entry in week],
            [entry.rating for entry in month],
            card_name,
        )

    def trend_insight_from_ratings(self, week_ratings: Sequence[float],
                                   month_ratings: Sequence[float],
                                   card_name: str) -> List[Insight]:
        """
        Phrase the change from the month average to the week average.

        Identical sequences, empty windows and a zero month average produce nothing.
        """
        if list(week_ratings) == list(month_ratings):
            return []

        week_average = metric_helpers.average(week_ratings)
        month_average = metric_helpers.average(month_ratings)
        change = metric_helpers.percent_change(month_average, week_average)
        if math.isnan(change):
            return []

        rounded = metric_helpers.round_to(change, 1)
        if rounded == 0:
            description = f"Looks like this week is about the same as the rest of the month for {card_name}"
        else:
            direction = WORD_BETTER if rounded > 0 else WORD_WORSE
            magnitude = self._magnitude_word(week_average - month_average)
            description = f"This week {card_name} is {magnitude} {direction} than this month's average"

        return [Insight(
            title=card_name,
            description=description,
            score=metric_helpers.random_score(self.rng, self.config['TREND_SCORE_MAX']),
        )]


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def generate(entries: Sequence[Entry], card_name: str = "", now: Optional[datetime] = None,
             rng: RandomSource = None) -> List[Insight]:
    """
    Generate insights for one card with a fresh engine.

    Args:
        entries: Full entry history of the card
        card_name: Display name of the card
        now: Reference time for recent windows. Defaults to the current time.
        rng: numpy Generator or integer seed. Defaults to fresh entropy.

    Returns:
        List of Insight objects
    """
    config = get_insight_settings()
    if config['STRUCTURED_LOGGING']:
        configure_logging()

    with insight_run(card_name or "", len(entries)) as run:
        insights = InsightsEngine(now=now, rng=rng, config=config).generate_insights(entries, card_name)
        run['insights'] = len(insights)
    return insights


def get_insights(entries: Sequence[Entry], card_name: str = "", **kwargs) -> List[Dict]:
    """
    Generate insights as dictionaries for JSON serialization.

    Returns:
        List of insight dictionaries
    """
    return [insight.to_dict() for insight in generate(entries, card_name, **kwargs)]


def get_top_insight(entries: Sequence[Entry], card_name: str = "", **kwargs) -> Optional[Dict]:
    """
    Get the highest-scoring insight for a card.

    Returns:
        Single insight dictionary or None
    """
    insights = get_insights(entries, card_name, **kwargs)
    if not insights:
        return None
    return max(insights, key=lambda insight: insight['score'])
