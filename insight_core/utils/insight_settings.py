"""
Insight Engine Settings.

Reads engine thresholds from Django settings so a host project can tune
them without code changes.

Usage:
    # settings.py
    INSIGHT_ENGINE = {'SCORE_THRESHOLD': 30}

    from insight_core.utils.insight_settings import get_insight_settings
    threshold = get_insight_settings()['SCORE_THRESHOLD']
"""
import logging
import numbers
from typing import Any, Dict

from django.conf import settings

from insight_core.exceptions import ConfigurationError
from insight_core.utils.constants import DEFAULT_INSIGHT_SETTINGS

logger = logging.getLogger(__name__)


_POSITIVE_INT_KEYS = ('MAX_PER_ANALYSIS',)
_NON_NEGATIVE_KEYS = (
    'MIN_ENTRIES',
    'SCORE_THRESHOLD',
    'SIGNIFICANCE_THRESHOLD',
    'FREQUENCY_SCORE_MAX',
    'TREND_SCORE_MAX',
)


def _get_overrides() -> dict:
    """Get INSIGHT_ENGINE overrides from settings, or nothing if unconfigured."""
    if not settings.configured:
        return {}
    return getattr(settings, 'INSIGHT_ENGINE', {}) or {}


def validate_insight_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check every known key and return the config unchanged.

    Raises:
        ConfigurationError: On unknown keys or out-of-range values
    """
    for key, value in config.items():
        if key not in DEFAULT_INSIGHT_SETTINGS:
            raise ConfigurationError(key, value, "unknown setting")

    for key in _POSITIVE_INT_KEYS:
        value = config[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigurationError(key, value, "must be a positive integer")

    for key in _NON_NEGATIVE_KEYS:
        value = config[key]
        if isinstance(value, bool) or not isinstance(value, numbers.Real) or value < 0:
            raise ConfigurationError(key, value, "must be a non-negative number")

    if not isinstance(config['FALLBACK_FACTOR_NAME'], str):
        raise ConfigurationError(
            'FALLBACK_FACTOR_NAME', config['FALLBACK_FACTOR_NAME'], "must be a string"
        )

    if not isinstance(config['STRUCTURED_LOGGING'], bool):
        raise ConfigurationError(
            'STRUCTURED_LOGGING', config['STRUCTURED_LOGGING'], "must be True or False"
        )

    return config


def get_insight_settings(**overrides) -> Dict[str, Any]:
    """
    Merge defaults, Django settings and explicit overrides (in that order).

    Returns:
        Validated settings dictionary
    """
    config = dict(DEFAULT_INSIGHT_SETTINGS)
    config.update(_get_overrides())
    config.update(overrides)
    return validate_insight_settings(config)
