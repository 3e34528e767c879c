"""
Services package for the insight engine.

- insight_service: Background generation with completion callbacks
"""
