"""Counting core and its lifecycle helpers."""

from flask import current_app

from visitcounter.services.counter_service import CounterService, VisitResult

EXTENSION_KEY = 'visit_counter'


def get_counter_service() -> CounterService:
    """Return the CounterService owned by the current application."""
    return current_app.extensions[EXTENSION_KEY]


__all__ = ['CounterService', 'VisitResult', 'EXTENSION_KEY', 'get_counter_service']
