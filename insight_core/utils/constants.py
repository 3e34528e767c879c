# insight_core/utils/constants.py
"""
Central constants for the insight engine.
Use these instead of hardcoded numbers so every analysis agrees on
interval lengths and default thresholds.
"""

# ============================================
# DURATIONS (seconds)
# ============================================
DAY = 86400.0
WEEK = 604800.0
MONTH = 2629800.0   # 30.4375 days
YEAR = 31557600.0   # 365.25 days

# ============================================
# ENGINE DEFAULTS
# Override through settings.INSIGHT_ENGINE
# ============================================
DEFAULT_INSIGHT_SETTINGS = {
    'MIN_ENTRIES': 10,
    'MAX_PER_ANALYSIS': 2,
    'SCORE_THRESHOLD': 20.0,
    'SIGNIFICANCE_THRESHOLD': 1.0,
    'FREQUENCY_SCORE_MAX': 80.0,
    'TREND_SCORE_MAX': 50.0,
    'FALLBACK_FACTOR_NAME': 'Name',
    'STRUCTURED_LOGGING': False,
}

# ============================================
# RECENT WINDOWS (days)
# ============================================
RECENT_WEEK_DAYS = 7

# ============================================
# INSIGHT WORDING
# ============================================
WORD_SIGNIFICANT = 'significantly'
WORD_SLIGHT = 'a bit'
WORD_BETTER = 'better'
WORD_WORSE = 'worse'
