"""Error types surfaced by the counter service.

Each error knows the HTTP status it maps to; the handlers registered in
``visitcounter.register_error_handlers`` turn them into JSON bodies.
"""

from __future__ import annotations


class CounterError(Exception):
    """Base class for errors returned to API callers."""

    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {'success': False, 'error': self.message}


class ValidationError(CounterError):
    """Bad or missing request parameters (400)."""

    status_code = 400
    default_message = 'Invalid request'


class InternalError(CounterError):
    """Unexpected failure during lookup or update (500).

    The message stays generic; the underlying cause is logged, never returned.
    """

    status_code = 500
