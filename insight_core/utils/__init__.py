"""
Utilities package for the insight engine.

Common utility functions:
- time_utils: Calendar bucketing and recent windows
- constants: Durations and default thresholds
- insight_settings: Django-settings backed configuration
- logging_utils: Structured logging with run IDs
"""
