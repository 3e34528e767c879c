"""
Card insight engine.

Computes short textual insights (trend, factor frequency, factor
correlation) from the entry history of a tracked card.
"""
from insight_core.behavioral.insights_engine import generate

__all__ = ['generate']
