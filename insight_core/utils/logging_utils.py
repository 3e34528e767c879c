"""
Structured logging for insight runs.

Every call to ``generate`` is one run. While a run is active, log records
from the package are tagged with its id, card name and entry count, and the
run ends with a timed summary line.

JSON output is opt-in:

    # settings.py
    INSIGHT_ENGINE = {'STRUCTURED_LOGGING': True}

or call ``configure_logging()`` once at startup.
"""
import json
import logging
import threading
import time
import uuid
from contextlib import contextmanager
from typing import Dict, Optional, TextIO

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = 'insight_core'

# Fields copied from the active run onto log records, in output order
RUN_FIELDS = ('run_id', 'card', 'entries', 'insights', 'duration_ms', 'error_type')

_run_state = threading.local()


def get_run_context() -> Dict:
    """Fields of the run active on this thread (empty outside a run)."""
    return dict(getattr(_run_state, 'fields', None) or {})


@contextmanager
def insight_run(card_name: str, entry_count: int):
    """
    Mark one engine run on the current thread.

    Yields the mutable run fields; set ``fields['insights']`` before leaving
    so the summary line carries the result size. Errors are logged with
    their type and re-raised.
    """
    previous = getattr(_run_state, 'fields', None)
    fields = {'run_id': uuid.uuid4().hex[:8], 'card': card_name, 'entries': entry_count}
    _run_state.fields = fields
    start = time.perf_counter()
    try:
        yield fields
    except Exception as e:
        fields['duration_ms'] = round((time.perf_counter() - start) * 1000, 2)
        fields['error_type'] = type(e).__name__
        logger.error(f"Insight run failed for '{card_name}': {e}")
        raise
    else:
        fields['duration_ms'] = round((time.perf_counter() - start) * 1000, 2)
        logger.info(f"Generated {fields.get('insights', 0)} insights for '{card_name}' "
                    f"from {entry_count} entries")
    finally:
        _run_state.fields = previous


class RunContextFilter(logging.Filter):
    """Copy the active run's fields onto each record that passes through."""

    def filter(self, record):
        for key, value in get_run_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for insight logs.

    Outputs one line per record:
    {"timestamp": "...", "level": "INFO", "logger": "...", "message": "...",
     "run_id": "abc123", "card": "Mood", "entries": 30, "insights": 2, "duration_ms": 4.1}
    """

    def format(self, record):
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for key in RUN_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)
        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def configure_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> logging.Handler:
    """
    Attach a JSON handler to the package logger, once.

    Returns:
        The structured handler (the existing one on repeat calls)
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in package_logger.handlers:
        if isinstance(handler.formatter, StructuredFormatter):
            return handler

    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    handler.addFilter(RunContextFilter())
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler
