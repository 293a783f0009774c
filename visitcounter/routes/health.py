"""
Health check endpoints for monitoring the counter process.

These endpoints are used by:
- Platform health checks and load balancer probes
- Uptime monitoring (uptime + table sizes)
"""

from datetime import datetime, timezone
import os

from flask import Blueprint, jsonify

from visitcounter.extensions import api_rate_limit
from visitcounter.services import get_counter_service


health_bp = Blueprint('health', __name__)


@health_bp.route('/health')
@api_rate_limit
def health_check():
    """
    Lightweight health check.

    Reports process uptime and the size of both in-memory tables; never
    touches visitor state.
    """
    service = get_counter_service()
    return jsonify({
        'status': 'healthy',
        'service': 'visitcounter',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'uptime': round(service.uptime_seconds, 3),
        'projects': service.project_count,
        'dedupEntries': service.dedup_size,
    }), 200


@health_bp.route('/health/live')
@api_rate_limit
def liveness_check():
    """
    Liveness probe for container orchestration.

    Returns 200 OK if the process is alive.
    """
    return jsonify({
        'status': 'alive',
        'pid': os.getpid(),
        'timestamp': datetime.now(timezone.utc).isoformat(),
    }), 200
