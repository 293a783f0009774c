"""
Flask Application Factory

This module implements the application factory pattern for creating
visitor counter service instances with different configurations.

The counting state (dedup markers and per-project aggregates) lives in a
single CounterService built here and stored in ``app.extensions``; request
handlers reach it through ``visitcounter.services.get_counter_service``.
"""

from collections.abc import Mapping
import os

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from visitcounter.config import config
from visitcounter.errors import CounterError, InternalError
from visitcounter.extensions import cors, limiter


RATE_LIMIT_MESSAGE = 'Too many requests. Please try again later.'
RATE_LIMIT_RETRY_AFTER = 60


def _safe_log(app, level: str, message: str, *args, **kwargs) -> None:
    """Log without risking startup due to logger misconfiguration."""
    try:
        logger = getattr(app.logger, level)
        logger(message, *args, **kwargs)
    except Exception:
        try:
            import sys

            print(f"[{level.upper()}] {message % args if args else message}", file=sys.stderr)
        except Exception:
            pass


def create_app(config_name='default'):
    """
    Application factory function

    Args:
        config_name (str | Mapping): Configuration name ('development',
            'production', 'testing'), or a mapping of config overrides applied
            on top of the testing config (when it sets TESTING) or the
            default config.

    Returns:
        Flask: Configured Flask application instance
    """
    overrides = None
    if isinstance(config_name, Mapping):
        overrides = dict(config_name)
        config_name = 'testing' if overrides.get('TESTING') else 'default'

    # Normalize config name
    config_name = (config_name or 'default').lower()

    # Create Flask app instance
    app = Flask(__name__)

    # Load configuration
    cfg = config.get(config_name) or config['default']
    cfg_obj = cfg() if isinstance(cfg, type) else cfg
    app.config.from_object(cfg_obj)
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(app.config.get('LOG_LEVEL') or 'INFO')

    if config_name == 'production':
        secret = app.config.get('SECRET_KEY')
        if not secret:
            app.logger.error('Production requires SECRET_KEY to be set via environment variable')
            raise RuntimeError('Missing SECRET_KEY in production')
    else:
        if not app.config.get('SECRET_KEY'):
            app.config['SECRET_KEY'] = os.urandom(32)
            app.logger.warning('SECRET_KEY was missing; generated an ephemeral key for this process.')

    # Initialize extensions
    limiter.init_app(app)
    cors.init_app(
        app,
        resources={r'/*': {'origins': app.config.get('CORS_ORIGINS', '*')}},
        send_wildcard=True,
    )

    # Counting core: constructed once, owned by this app
    init_counter_service(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    @app.after_request
    def _apply_security_headers(response):
        """Apply safe security headers without affecting app logic."""
        response.headers.setdefault('X-Content-Type-Options', 'nosniff')
        response.headers.setdefault('X-Frame-Options', 'DENY')
        response.headers.setdefault('Referrer-Policy', 'no-referrer')
        response.headers.setdefault('Content-Security-Policy', "default-src 'none'; frame-ancestors 'none'")
        # Counter responses are embedded by third-party pages
        response.headers.setdefault('Cross-Origin-Resource-Policy', 'cross-origin')
        return response

    return app


def init_counter_service(app):
    """Build the CounterService (and optional expiry sweeper) for ``app``."""
    from visitcounter.services import EXTENSION_KEY, CounterService
    from visitcounter.services.sweeper import init_dedup_sweeper

    max_entries = int(app.config.get('COUNTER_DEDUP_MAX_ENTRIES') or 0)
    service = CounterService(
        dedup_ttl_seconds=int(app.config.get('COUNTER_DEDUP_TTL_SECONDS') or 86400),
        max_dedup_entries=max_entries or None,
    )
    app.extensions[EXTENSION_KEY] = service
    _safe_log(
        app,
        'info',
        'Visitor counter ready (dedup window %ds, max markers %s)',
        service.dedup_ttl_seconds,
        max_entries or 'unbounded',
    )

    try:
        init_dedup_sweeper(app, service)
    except Exception as sweeper_exc:
        # Lazy expiry still holds without the sweeper
        app.logger.warning(f'Dedup sweeper initialization failed: {sweeper_exc}')

    return service


def register_blueprints(app):
    """Register Flask blueprints"""

    from visitcounter.routes.counter import counter_bp
    from visitcounter.routes.health import health_bp

    app.register_blueprint(counter_bp)
    app.register_blueprint(health_bp)  # No prefix - accessible at /health


def register_error_handlers(app):
    """Register JSON error handlers"""

    @app.errorhandler(CounterError)
    def counter_error(error):
        """Handle errors raised deliberately by the service"""
        if error.status_code >= 500:
            app.logger.error('Counter error (%d): %s', error.status_code, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def http_error(error):
        """Handle 404/405/429 and friends"""
        if error.code == 429:
            return jsonify({
                'success': False,
                'error': RATE_LIMIT_MESSAGE,
                'retryAfter': RATE_LIMIT_RETRY_AFTER,
            }), 429
        return jsonify({'success': False, 'error': error.description}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        """Handle anything unexpected as a generic 500"""
        app.logger.exception('Unhandled exception (500): %s', error)
        return jsonify(InternalError().to_dict()), 500


def register_cli_commands(app):
    """Register custom Flask CLI commands."""
    from visitcounter.cli import (
        counter_count_command,
        counter_reset_command,
        counter_stats_command,
    )

    app.cli.add_command(counter_stats_command)
    app.cli.add_command(counter_count_command)
    app.cli.add_command(counter_reset_command)
