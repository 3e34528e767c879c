"""
Helpers package for the insight engine.

- metric_helpers: averages, intervals and random sampling
"""
