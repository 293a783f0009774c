"""Admin commands for a running counter service.

Counting state lives in the serving process's memory, so these commands
talk to the service over HTTP rather than building their own (empty)
tables. Point them at the service with ``--url`` or COUNTER_SERVICE_URL.
"""

from urllib.parse import quote

import click
import requests
from flask import current_app
from flask.cli import with_appcontext


def _service_url(url: str | None) -> str:
    return (url or current_app.config.get('COUNTER_SERVICE_URL') or 'http://127.0.0.1:5000').rstrip('/')


def _call(method: str, url: str) -> dict:
    timeout = float(current_app.config.get('COUNTER_CLI_TIMEOUT') or 10)
    try:
        response = requests.request(method, url, timeout=timeout)
    except requests.RequestException as e:
        raise click.ClickException(f'Could not reach counter service at {url}: {e}')

    try:
        payload = response.json()
    except ValueError:
        payload = {}
    if response.status_code != 200:
        detail = payload.get('error') or response.text
        raise click.ClickException(f'Counter service returned {response.status_code}: {detail}')
    return payload


url_option = click.option('--url', default=None, help='Base URL of the running service (defaults to COUNTER_SERVICE_URL)')


@click.command('counter-stats')
@url_option
@with_appcontext
def counter_stats_command(url: str) -> None:
    """Print count and unique visitors for every tracked project."""
    payload = _call('GET', f'{_service_url(url)}/stats')
    projects = payload.get('projects') or {}
    if not projects:
        click.echo('No projects tracked yet.')
        return
    for project, data in sorted(projects.items()):
        click.echo(f"{project}: count={data['count']} unique={data['uniqueVisitors']}")
    click.echo(f"Total projects: {payload.get('totalProjects', len(projects))}")


@click.command('counter-count')
@click.argument('project')
@url_option
@with_appcontext
def counter_count_command(project: str, url: str) -> None:
    """Show one project's count without recording a visit."""
    project = (project or '').strip()
    if not project:
        raise click.ClickException('Project is required.')

    payload = _call('GET', f'{_service_url(url)}/count/{quote(project, safe="")}')
    click.echo(f"{payload['project']}: count={payload['count']} unique={payload['uniqueVisitors']}")


@click.command('counter-reset')
@click.argument('project')
@url_option
@click.confirmation_option(prompt='Reset this project? Its count and visitor markers will be lost.')
@with_appcontext
def counter_reset_command(project: str, url: str) -> None:
    """Clear a project's count and its visitor markers."""
    project = (project or '').strip()
    if not project:
        raise click.ClickException('Project is required.')

    payload = _call('POST', f'{_service_url(url)}/reset/{quote(project, safe="")}')
    click.echo(payload.get('message') or f"Reset project '{project}'.")
