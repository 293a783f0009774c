"""
Visitor counter endpoints.

- GET  /counter?project=...     count a visit (once per visitor per window), return badge URL
- GET  /count/<project>         read-only count
- POST /reset/<project>         clear a project's count and its dedup markers
- GET  /stats                   per-project counts
"""

from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from visitcounter.badges import (
    DEFAULT_COLOR,
    DEFAULT_STYLE,
    build_badge_url,
    normalize_color,
    normalize_style,
)
from visitcounter.errors import InternalError, ValidationError
from visitcounter.extensions import api_rate_limit
from visitcounter.services import get_counter_service
from visitcounter.utils.identity import hash_identity, resolve_client_identity


counter_bp = Blueprint('counter', __name__)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def _require_project(value: str | None) -> str:
    project = (value or '').strip()
    if not project:
        raise ValidationError('Project parameter is required')
    max_length = int(current_app.config.get('COUNTER_MAX_PROJECT_LENGTH') or 128)
    if len(project) > max_length:
        raise ValidationError(f'Project parameter must be at most {max_length} characters')
    return project


def _parse_base(value: str | None) -> int:
    if value is None or not value.strip():
        return 0
    try:
        base = int(value.strip())
    except ValueError:
        raise ValidationError('Base must be a non-negative integer') from None
    if base < 0:
        raise ValidationError('Base must be a non-negative integer')
    return base


def _visitor_hash() -> str:
    raw = resolve_client_identity(
        request.headers,
        request.remote_addr,
        trust_proxy_headers=current_app.config.get('COUNTER_TRUST_PROXY_HEADERS', True),
    )
    return hash_identity(raw)


@counter_bp.route('/counter')
@api_rate_limit
def counter():
    """Record a visit and return the badge URL plus count metadata."""
    cfg = current_app.config
    project = _require_project(request.args.get('project'))
    label = request.args.get('label') or cfg.get('BADGE_DEFAULT_LABEL', 'visitors')
    color = normalize_color(request.args.get('color'), default=cfg.get('BADGE_DEFAULT_COLOR') or DEFAULT_COLOR)
    style = normalize_style(request.args.get('style'), default=cfg.get('BADGE_DEFAULT_STYLE') or DEFAULT_STYLE)
    base = _parse_base(request.args.get('base'))

    try:
        result = get_counter_service().record_visit(project, _visitor_hash(), base)
    except Exception as exc:
        current_app.logger.error('Counter update failed for %s: %s', project, exc, exc_info=True)
        raise InternalError() from exc

    badge_url = build_badge_url(label, result.count, color, style, base_url=cfg.get('BADGE_BASE_URL'))

    return jsonify({
        'success': True,
        'project': project,
        'count': result.count,
        'uniqueVisitors': result.unique_visitors,
        'badgeUrl': badge_url,
        'isNewVisitor': result.is_new_visitor,
        'timestamp': _utc_timestamp(),
    })


@counter_bp.route('/count/<path:project>')
@api_rate_limit
def count(project):
    """Read a project's count without recording a visit."""
    project = _require_project(project)
    try:
        aggregate = get_counter_service().get(project)
    except Exception as exc:
        current_app.logger.error('Count lookup failed for %s: %s', project, exc, exc_info=True)
        raise InternalError() from exc

    return jsonify({
        'success': True,
        'project': project,
        'count': aggregate.count if aggregate else 0,
        'uniqueVisitors': aggregate.unique_visitors if aggregate else 0,
    })


@counter_bp.route('/reset/<path:project>', methods=['POST'])
@api_rate_limit
def reset(project):
    project = _require_project(project)
    try:
        get_counter_service().reset(project)
    except Exception as exc:
        current_app.logger.error('Reset failed for %s: %s', project, exc, exc_info=True)
        raise InternalError() from exc

    return jsonify({
        'success': True,
        'message': f'Visitor count reset for project: {project}',
        'project': project,
    })


@counter_bp.route('/stats')
@api_rate_limit
def stats():
    projects = get_counter_service().stats()
    return jsonify({
        'success': True,
        'totalProjects': len(projects),
        'projects': projects,
        'timestamp': _utc_timestamp(),
    })
