"""
Custom Exception Classes

Provides specific exception types for the insight engine. Soft conditions
(too few entries, missing dates or names) never raise; these cover input
and configuration that cannot be analysed at all.
"""


class InsightException(Exception):
    """Base exception for all insight-related errors"""
    pass


class InvalidEntryError(InsightException):
    """Raised when an entry cannot be used for rating statistics"""
    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Invalid entry at position {index}: {reason}")


class ConfigurationError(InsightException):
    """Raised when an INSIGHT_ENGINE setting is invalid"""
    def __init__(self, key: str, value, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid setting '{key}'={value!r}: {reason}")


class SchemaValidationError(InsightException):
    """Raised when boundary data fails schema validation"""
    def __init__(self, schema: str, messages: dict = None):
        self.schema = schema
        self.messages = messages or {}
        super().__init__(f"Validation failed for {schema}: {self.messages}")
