"""
Pytest configuration and fixtures for insight engine tests.

This module provides reusable fixtures for testing.
"""
import pytest
import django
from django.conf import settings
from datetime import datetime, timedelta

if not settings.configured:
    settings.configure(INSTALLED_APPS=[], INSIGHT_ENGINE={})
    django.setup()


@pytest.fixture
def now():
    """Fixed reference time for recent windows."""
    return datetime(2025, 12, 10, 12, 0)


@pytest.fixture
def exercise():
    from insight_core.tests.factories import FactorTypeFactory
    return FactorTypeFactory.create(name='Exercise')


@pytest.fixture
def sleep():
    from insight_core.tests.factories import FactorTypeFactory
    return FactorTypeFactory.create(name='Sleep')


@pytest.fixture
def month_of_entries(now, exercise, sleep):
    """30 daily entries; Exercise every third day, Sleep every other day."""
    from insight_core.tests.factories import EntryFactory
    entries = []
    for days_ago in range(30, 0, -1):
        factors = []
        if days_ago % 3 == 0:
            factors.append(exercise)
        if days_ago % 2 == 0:
            factors.append(sleep)
        entries.append(EntryFactory.create(
            rating=4.0 + (days_ago % 5),
            date=now - timedelta(days=days_ago, hours=3),
            factors=factors,
        ))
    return entries
