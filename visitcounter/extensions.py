"""
Flask Extensions Module

This module initializes all Flask extensions used in the application.
Extensions are initialized here and then attached to the app in the factory.
"""

from flask_cors import CORS
from flask_limiter import Limiter


def _rate_limit_key() -> str:
	"""Client identity key for rate limiting.

	Uses the same proxy-aware resolution as visitor counting when a request
	context exists. Falls back to remote_addr if resolution fails.
	"""

	try:
		from flask import current_app, has_request_context, request

		if not has_request_context():
			return '0.0.0.0'

		from visitcounter.utils.identity import resolve_client_identity

		return resolve_client_identity(
			request.headers,
			request.remote_addr,
			trust_proxy_headers=current_app.config.get('COUNTER_TRUST_PROXY_HEADERS', True),
		)
	except Exception:
		try:
			from flask import request

			return request.remote_addr or '0.0.0.0'
		except Exception:
			return '0.0.0.0'


def counter_rate_limit() -> str:
	"""Per-app limit string, read at request time."""
	from flask import current_app

	return current_app.config.get('COUNTER_RATE_LIMIT') or '100 per minute'


# Initialize extensions
# These will be attached to the app in create_app()
limiter = Limiter(key_func=_rate_limit_key)
cors = CORS()

# One budget per client shared by every route
api_rate_limit = limiter.shared_limit(counter_rate_limit, scope='api')
