"""HTTP contract for the counter endpoints."""

from visitcounter import create_app
from visitcounter.services import get_counter_service


def _visit(client, ip, **params):
    params.setdefault('project', 'site-a')
    return client.get('/counter', query_string=params, headers={'X-Forwarded-For': ip})


def test_counter_counts_unique_visitors(client):
    resp = _visit(client, '1.2.3.4')
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['success'] is True
    assert data['project'] == 'site-a'
    assert data['count'] == 1
    assert data['uniqueVisitors'] == 1
    assert data['isNewVisitor'] is True
    assert data['badgeUrl'] == 'https://img.shields.io/badge/visitors-1-0e75b6?style=flat'
    assert data['timestamp'].endswith('Z')

    data = _visit(client, '1.2.3.4').get_json()
    assert (data['count'], data['isNewVisitor']) == (1, False)

    data = _visit(client, '5.6.7.8').get_json()
    assert (data['count'], data['isNewVisitor']) == (2, True)


def test_counter_badge_options(client):
    resp = _visit(client, '1.2.3.4', label='readers', color='#ff6b6b', style='for-the-badge', base='100')
    data = resp.get_json()
    assert data['count'] == 101
    assert data['badgeUrl'] == 'https://img.shields.io/badge/readers-101-ff6b6b?style=for-the-badge'


def test_counter_uses_peer_address_without_proxy_headers(client):
    first = client.get('/counter?project=p', environ_base={'REMOTE_ADDR': '192.0.2.1'}).get_json()
    second = client.get('/counter?project=p', environ_base={'REMOTE_ADDR': '192.0.2.2'}).get_json()
    assert first['isNewVisitor'] and second['isNewVisitor']
    assert second['count'] == 2


def test_counter_requires_project(client):
    resp = client.get('/counter')
    assert resp.status_code == 400
    assert resp.get_json() == {'success': False, 'error': 'Project parameter is required'}

    resp = client.get('/counter?project=%20%20')
    assert resp.status_code == 400


def test_counter_rejects_overlong_project(app, client):
    name = 'x' * (app.config['COUNTER_MAX_PROJECT_LENGTH'] + 1)
    assert client.get('/counter', query_string={'project': name}).status_code == 400


def test_counter_rejects_bad_base(client):
    resp = _visit(client, '1.2.3.4', base='ten')
    assert resp.status_code == 400
    assert resp.get_json()['success'] is False
    assert _visit(client, '1.2.3.4', base='-1').status_code == 400
    # nothing was counted by the rejected requests
    assert client.get('/count/site-a').get_json()['count'] == 0


def test_counter_unknown_style_and_color_use_defaults(client):
    resp = _visit(client, '1.2.3.4', style='rounded', color='not a color')
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['isNewVisitor'] is True
    assert data['badgeUrl'] == 'https://img.shields.io/badge/visitors-1-0e75b6?style=flat'


def test_count_is_read_only(client, service):
    resp = client.get('/count/unseen')
    assert resp.status_code == 200
    assert resp.get_json() == {'success': True, 'project': 'unseen', 'count': 0, 'uniqueVisitors': 0}
    assert service.project_count == 0

    _visit(client, '1.2.3.4')
    for _ in range(3):
        data = client.get('/count/site-a').get_json()
    assert data['count'] == 1
    assert data['uniqueVisitors'] == 1
    assert service.dedup_size == 1


def test_reset_clears_project(client):
    _visit(client, '1.2.3.4')
    _visit(client, '5.6.7.8')

    resp = client.post('/reset/site-a')
    assert resp.status_code == 200
    assert resp.get_json() == {
        'success': True,
        'message': 'Visitor count reset for project: site-a',
        'project': 'site-a',
    }
    assert client.get('/count/site-a').get_json()['count'] == 0

    data = _visit(client, '1.2.3.4').get_json()
    assert (data['count'], data['isNewVisitor']) == (1, True)


def test_reset_unknown_project_succeeds(client):
    resp = client.post('/reset/nobody')
    assert resp.status_code == 200
    assert resp.get_json()['success'] is True


def test_reset_requires_post(client):
    resp = client.get('/reset/site-a')
    assert resp.status_code == 405
    assert resp.get_json()['success'] is False


def test_stats_lists_projects(client):
    _visit(client, '1.2.3.4', project='blog')
    _visit(client, '1.2.3.4', project='portfolio', base='10')
    _visit(client, '5.6.7.8', project='portfolio')

    data = client.get('/stats').get_json()
    assert data['success'] is True
    assert data['totalProjects'] == 2
    assert data['projects'] == {
        'blog': {'count': 1, 'uniqueVisitors': 1},
        'portfolio': {'count': 12, 'uniqueVisitors': 2},
    }


def test_unexpected_failure_returns_generic_500(app, client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError('table exploded')

    monkeypatch.setattr(get_counter_service(), 'record_visit', boom)
    resp = _visit(client, '1.2.3.4')
    assert resp.status_code == 500
    assert resp.get_json() == {'success': False, 'error': 'Internal server error'}


def test_unknown_route_is_json_404(client):
    resp = client.get('/nope')
    assert resp.status_code == 404
    assert resp.get_json()['success'] is False


def test_cors_and_security_headers(client):
    resp = client.get('/count/site-a', headers={'Origin': 'https://example.com'})
    assert resp.headers.get('Access-Control-Allow-Origin') == '*'
    assert resp.headers.get('X-Content-Type-Options') == 'nosniff'


def test_counter_rate_limit():
    app = create_app({
        'TESTING': True,
        'RATELIMIT_ENABLED': True,
        'COUNTER_RATE_LIMIT': '2 per minute',
    })
    client = app.test_client()
    headers = {'X-Forwarded-For': '203.0.113.50'}

    assert client.get('/count/limited', headers=headers).status_code == 200
    assert client.get('/count/limited', headers=headers).status_code == 200
    resp = client.get('/count/limited', headers=headers)
    assert resp.status_code == 429
    assert resp.get_json()['retryAfter'] == 60

    # a different client has its own budget
    other = client.get('/count/limited', headers={'X-Forwarded-For': '203.0.113.51'})
    assert other.status_code == 200


def test_rate_limit_covers_reset_stats_and_health():
    app = create_app({
        'TESTING': True,
        'RATELIMIT_ENABLED': True,
        'COUNTER_RATE_LIMIT': '2 per minute',
    })
    client = app.test_client()
    headers = {'X-Forwarded-For': '203.0.113.60'}

    codes = [client.post('/reset/x', headers=headers).status_code for _ in range(3)]
    assert codes == [200, 200, 429]

    # one budget is shared across routes, so other endpoints are throttled too
    assert client.get('/stats', headers=headers).status_code == 429
    assert client.get('/health', headers=headers).status_code == 429

    fresh = {'X-Forwarded-For': '203.0.113.61'}
    assert client.get('/stats', headers=fresh).status_code == 200
