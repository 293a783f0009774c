"""Test configuration and fixtures."""

import pytest

from visitcounter import create_app
from visitcounter.services import CounterService, get_counter_service


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'SERVER_NAME': 'localhost',
    })

    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Test client for making requests."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """CLI test runner."""
    return app.test_cli_runner()


@pytest.fixture
def service(app):
    """The CounterService owned by the test app."""
    return get_counter_service()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def counter_service(clock):
    """Standalone service with a controllable clock (1 hour window)."""
    return CounterService(dedup_ttl_seconds=3600, clock=clock)
