"""
WSGI Entry Point for the Visitor Counter Service

This module serves as the entry point for WSGI servers (like Gunicorn)
to run the Flask application in production environments.

Counting state is held in process memory: run a single worker process
(threads are fine) or each worker will keep its own independent counts.
"""

import os
import sys

# Load .env ONLY for local development. In production, environment
# variables must be provided by the platform.
if os.environ.get('FLASK_ENV', '').lower() != 'production' and os.environ.get('FLASK_CONFIG', '').lower() != 'production':
	from dotenv import load_dotenv

	load_dotenv(override=False)

from visitcounter import create_app

# Determine configuration name.
# - Local/dev defaults to development.
# - Production platforms must explicitly set FLASK_ENV/FLASK_CONFIG=production.
config_name = (os.getenv('FLASK_CONFIG') or os.getenv('FLASK_ENV') or 'development').lower()

print(f'Initializing visitor counter with config: {config_name}', file=sys.stderr)

if config_name == 'production' and not os.getenv('SECRET_KEY'):
    print('DEPLOYMENT FAILED: SECRET_KEY must be set in production', file=sys.stderr)
    raise RuntimeError('Missing required environment variables in production')

app = create_app(config_name)
