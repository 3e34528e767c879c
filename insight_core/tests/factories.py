"""
Test factories for creating test data.

Usage:
    from insight_core.tests.factories import EntryFactory, FactorTypeFactory

    exercise = FactorTypeFactory.create(name='Exercise')
    entry = EntryFactory.create(rating=7, date=now, factors=[exercise])
"""
import uuid
from datetime import datetime

from insight_core.models import Entry, FactorType, Mark


class FactorTypeFactory:
    """Factory for creating factor types."""

    @staticmethod
    def create(**kwargs):
        defaults = {
            'factor_id': str(uuid.uuid4()),
            'name': f'Factor {uuid.uuid4().hex[:6]}',
        }
        defaults.update(kwargs)
        return FactorType(**defaults)


class EntryFactory:
    """Factory for creating entries with marks."""

    @staticmethod
    def create(rating=5.0, date=None, factors=(), **kwargs):
        marks = tuple(Mark(factor_type=factor) for factor in factors)
        return Entry(rating=rating, date=date, marks=marks, **kwargs)

    @staticmethod
    def create_batch(count, start: datetime, step, rating=5.0, factors=()):
        return [
            EntryFactory.create(rating=rating, date=start + step * i, factors=factors)
            for i in range(count)
        ]
