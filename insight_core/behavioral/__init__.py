"""
Card Insights Engine Package

Rule-based correlation, frequency and trend insights over card entries.
"""
from insight_core.behavioral.insights_engine import (
    InsightsEngine,
    generate,
    get_insights,
    get_top_insight,
)

__all__ = [
    'InsightsEngine',
    'generate',
    'get_insights',
    'get_top_insight',
]
