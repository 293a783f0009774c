"""
Configuration Module for the Visitor Counter Service

This module defines configuration classes for different environments:
- DevelopmentConfig: Local development, debug on, no background sweeper
- ProductionConfig: Production deployment, hourly expiry sweep
- TestingConfig: Automated testing configuration
"""

import os


class Config:
    """Base configuration with common settings"""

    # Not used for sessions (the API is stateless) but Flask extensions
    # expect it. Production enforces presence in the app factory.
    SECRET_KEY = os.environ.get('SECRET_KEY')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # Visitor deduplication window (24 hours)
    COUNTER_DEDUP_TTL_SECONDS = int(os.environ.get('COUNTER_DEDUP_TTL_SECONDS', 86400))
    # 0 = unbounded. When bounded, the oldest markers are evicted first,
    # which lets an evicted visitor count again.
    COUNTER_DEDUP_MAX_ENTRIES = int(os.environ.get('COUNTER_DEDUP_MAX_ENTRIES', 0))
    # 0 = lazy expiry only (no background thread)
    COUNTER_SWEEP_INTERVAL_SECONDS = int(os.environ.get('COUNTER_SWEEP_INTERVAL_SECONDS', 0))
    COUNTER_MAX_PROJECT_LENGTH = int(os.environ.get('COUNTER_MAX_PROJECT_LENGTH', 128))
    # Honour X-Forwarded-For / X-Real-IP when deriving visitor identity.
    # Disable when the service is exposed without a proxy in front.
    COUNTER_TRUST_PROXY_HEADERS = os.environ.get('COUNTER_TRUST_PROXY_HEADERS', 'True').lower() == 'true'

    # Badge defaults (shields.io static badge)
    BADGE_BASE_URL = os.environ.get('BADGE_BASE_URL', 'https://img.shields.io/badge')
    BADGE_DEFAULT_LABEL = os.environ.get('BADGE_DEFAULT_LABEL', 'visitors')
    BADGE_DEFAULT_COLOR = os.environ.get('BADGE_DEFAULT_COLOR', '0e75b6')
    BADGE_DEFAULT_STYLE = os.environ.get('BADGE_DEFAULT_STYLE', 'flat')

    # Rate limiting (Flask-Limiter): 100 requests per client per minute
    RATELIMIT_ENABLED = os.environ.get('RATELIMIT_ENABLED', 'True').lower() == 'true'
    COUNTER_RATE_LIMIT = os.environ.get('COUNTER_RATE_LIMIT', '100 per minute')
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    RATELIMIT_HEADERS_ENABLED = True

    # Badges are embedded from arbitrary sites
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')

    # Where the admin CLI finds the running service
    COUNTER_SERVICE_URL = os.environ.get('COUNTER_SERVICE_URL', 'http://127.0.0.1:5000')
    COUNTER_CLI_TIMEOUT = float(os.environ.get('COUNTER_CLI_TIMEOUT', 10))


class DevelopmentConfig(Config):
    """Development environment configuration"""

    DEBUG = True
    TESTING = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG').upper()


class ProductionConfig(Config):
    """Production environment configuration"""

    DEBUG = False
    TESTING = False

    COUNTER_SWEEP_INTERVAL_SECONDS = int(os.environ.get('COUNTER_SWEEP_INTERVAL_SECONDS', 3600))


class TestingConfig(Config):
    """Testing environment configuration"""

    TESTING = True
    DEBUG = False

    SECRET_KEY = 'test-secret-key'
    COUNTER_SWEEP_INTERVAL_SECONDS = 0
    COUNTER_TRUST_PROXY_HEADERS = True

    # Individual tests opt back in
    RATELIMIT_ENABLED = False


# Configuration dictionary for easy access
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
