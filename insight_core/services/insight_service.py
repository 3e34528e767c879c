"""
Insight Service

Runs the insights engine off the caller's thread and hands the result to a
completion callback, once per request. Moving the result onto a UI thread
is left to the callback.
"""
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import Callable, List, Optional, Sequence
import logging

from insight_core.behavioral.insights_engine import RandomSource, generate
from insight_core.models import Entry, Insight
from insight_core.utils.insight_settings import get_insight_settings

logger = logging.getLogger(__name__)

Completion = Callable[[List[Insight]], None]


class InsightService:
    """
    Service for generating card insights in the background.

    Example usage:
        service = InsightService()
        service.generate_in_background(entries, "Mood", completion=show_insights)
        ...
        service.shutdown()
    """

    def __init__(self, executor: Optional[ThreadPoolExecutor] = None):
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix='insights'
        )

    @staticmethod
    def generate_insights(entries: Sequence[Entry], card_name: str = "",
                          now: Optional[datetime] = None,
                          rng: RandomSource = None) -> List[Insight]:
        """Synchronous generation on the calling thread."""
        return generate(entries, card_name, now=now, rng=rng)

    def generate_in_background(self, entries: Sequence[Entry], card_name: str = "",
                               completion: Optional[Completion] = None,
                               now: Optional[datetime] = None,
                               rng: RandomSource = None) -> Future:
        """
        Generate insights on a worker thread.

        With too few entries the completion is called immediately with an
        empty list and no worker is used.

        Args:
            entries: Entry history of the card (snapshotted before the hop)
            card_name: Display name of the card
            completion: Called once with the insights when they are ready

        Returns:
            Future resolving to the insights; it carries any engine error
        """
        snapshot = tuple(entries)
        card_name = card_name or ""

        if len(snapshot) <= get_insight_settings()['MIN_ENTRIES']:
            future: Future = Future()
            future.set_result([])
            if completion is not None:
                completion([])
            return future

        def run() -> List[Insight]:
            try:
                insights = generate(snapshot, card_name, now=now, rng=rng)
                if completion is not None:
                    completion(insights)
            except Exception:
                logger.exception(f"Insight run failed for '{card_name}'")
                raise
            return insights

        return self._executor.submit(run)

    def shutdown(self, wait: bool = True):
        """Stop the worker pool if this service created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
