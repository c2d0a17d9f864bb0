"""
Ops Routes
==========

Public health endpoint.
"""

import os
import sqlite3
import time
from datetime import datetime

import requests
from flask import jsonify

from . import ops_health_bp
from ...core.config import Config, get_config_value


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------

def _get_uptime():
    """Get server uptime from /proc/uptime (Linux) with fallback."""
    try:
        with open('/proc/uptime', 'r') as f:
            uptime_seconds = float(f.read().split()[0])
    except (OSError, ValueError, IndexError):
        return {'seconds': 0, 'formatted': 'unknown', 'days': 0}

    days = int(uptime_seconds // 86400)
    hours = int((uptime_seconds % 86400) // 3600)
    minutes = int((uptime_seconds % 3600) // 60)

    return {
        'seconds': round(uptime_seconds),
        'formatted': f'{days}d {hours}h {minutes}m',
        'days': days,
    }


def _check_api():
    """Probe the product service base URL with a short timeout."""
    base_url = get_config_value('API_BASE', '')
    if not base_url:
        return {'configured': False, 'reachable': False}

    timeout = float(get_config_value('HEALTH_PROBE_TIMEOUT', Config.HEALTH_PROBE_TIMEOUT))
    started = time.monotonic()
    try:
        response = requests.head(base_url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        return {'configured': True, 'reachable': False, 'error': type(e).__name__}

    return {
        'configured': True,
        'reachable': response.status_code < 500,
        'status_code': response.status_code,
        'latency_ms': round((time.monotonic() - started) * 1000),
    }


def _check_log_db():
    """Check the log database can be opened."""
    db_path = get_config_value('LOG_DB', Config.LOG_DB)
    if not db_path:
        return {'configured': False, 'writable': False}

    try:
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with sqlite3.connect(db_path) as conn:
            conn.execute('SELECT 1')
        return {'configured': True, 'writable': True}
    except (sqlite3.Error, OSError) as e:
        return {'configured': True, 'writable': False, 'error': str(e)}


def _compute_status(api, log_db):
    """Compute overall status and issues list from the checks."""
    issues = []
    status = 'ok'

    if not api.get('configured'):
        issues.append({'type': 'api_unconfigured', 'message': 'API_BASE is not set'})
        status = 'critical'
    elif not api.get('reachable'):
        issues.append({'type': 'api_unreachable', 'message': 'Product service is not reachable'})
        status = 'warning'

    if not log_db.get('writable'):
        issues.append({'type': 'log_db', 'message': 'Log database is not writable'})
        if status != 'critical':
            status = 'warning'

    return status, issues


def _build_health_response():
    """Build the full health check response dict."""
    api = _check_api()
    log_db = _check_log_db()
    status, issues = _compute_status(api, log_db)

    result = {
        'status': status,
        'timestamp': datetime.now().isoformat(),
        'checks': {
            'api': api,
            'log_db': log_db,
            'uptime': _get_uptime(),
        },
        'issues': issues,
    }
    return result, status


# ---------------------------------------------------------------------------
# Public routes (no auth)
# ---------------------------------------------------------------------------

@ops_health_bp.route('/')
@ops_health_bp.route('')
def health_check():
    """Public health endpoint for uptime monitors."""
    data, status = _build_health_response()
    code = 503 if status == 'critical' else 200
    return jsonify(data), code
