"""
Session store tests
===================

Token restore, sign-in and logout against the in-memory product service.
Run with: pytest tests/test_session_store.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from catalog_admin.core.api_client import NetworkError
from catalog_admin.core.session_store import SessionStore, parse_expiry
from catalog_admin.core.token_storage import CookieTokenStorage

from conftest import FAR_EXPIRY_MS, VALID_TOKEN, VALID_USER, MemoryTokenStorage

COOKIE = 'hexToken'


@pytest.fixture
def storage():
    return MemoryTokenStorage()


@pytest.fixture
def store(service, storage):
    return SessionStore(service, storage, cookie_name=COOKIE)


# ---------------------------------------------------------------------------
# login / logout
# ---------------------------------------------------------------------------

def test_login_persists_token_and_attaches_it(store, service, storage):
    result = store.login(VALID_USER)

    assert result == {'success': True}
    assert store.is_authenticated
    assert storage.get(COOKIE) == VALID_TOKEN
    assert service.token == VALID_TOKEN
    assert store.expires_at == datetime(2099, 1, 1, tzinfo=timezone.utc)


def test_invalid_login_stays_signed_out(store, service, storage):
    """Bad credentials: unauthenticated, non-empty error, nothing persisted."""
    result = store.login({'username': 'admin@example.com', 'password': 'wrong'})

    assert result['success'] is False
    assert result['error'], "A failed login must explain itself"
    assert not store.is_authenticated
    assert storage.get(COOKIE) is None
    assert service.token is None


def test_logout_clears_everything_without_calling_service(store, service, storage):
    store.login(VALID_USER)
    calls_before = list(service.calls)

    store.logout()

    assert not store.is_authenticated
    assert storage.get(COOKIE) is None
    assert service.token is None
    assert service.calls == calls_before


# ---------------------------------------------------------------------------
# restore
# ---------------------------------------------------------------------------

def test_restore_without_token_skips_service(store, service):
    assert store.restore() is False
    assert service.calls == []


def test_restore_with_valid_token(store, service, storage):
    storage.set(COOKIE, VALID_TOKEN, datetime.now(timezone.utc) + timedelta(days=1))

    assert store.restore() is True
    assert store.is_authenticated
    assert service.token == VALID_TOKEN
    assert service.count('check_auth') == 1


def test_restore_with_rejected_token_clears_cookie(store, service, storage):
    storage.set(COOKIE, 'stale', datetime.now(timezone.utc) + timedelta(days=1))

    assert store.restore() is False
    assert not store.is_authenticated
    assert storage.get(COOKIE) is None
    assert service.token is None


def test_restore_network_failure_keeps_cookie(store, service, storage):
    storage.set(COOKIE, VALID_TOKEN, datetime.now(timezone.utc) + timedelta(days=1))
    service.fail_next = NetworkError('Unable to reach the product service')

    assert store.restore() is False
    assert store.error == 'Unable to reach the product service'
    assert store.token is None
    assert storage.get(COOKIE) == VALID_TOKEN, "A flaky network is not a reason to sign out"


def test_restore_ignores_expired_token(store, service, storage):
    storage.set(COOKIE, VALID_TOKEN, datetime.now(timezone.utc) - timedelta(seconds=1))

    assert store.restore() is False
    assert service.calls == []


# ---------------------------------------------------------------------------
# expiry parsing / cookie storage
# ---------------------------------------------------------------------------

@pytest.mark.parametrize('value', [FAR_EXPIRY_MS, str(FAR_EXPIRY_MS), 4070908800, '2099-01-01T00:00:00Z'])
def test_parse_expiry_formats(value):
    assert parse_expiry(value) == datetime(2099, 1, 1, tzinfo=timezone.utc)


def test_parse_expiry_fallback():
    before = datetime.now(timezone.utc)

    expires = parse_expiry('not a date', fallback_days=3)

    assert before + timedelta(days=3) <= expires <= datetime.now(timezone.utc) + timedelta(days=3)


def test_cookie_storage_queues_writes_for_response():
    from unittest.mock import MagicMock

    storage = CookieTokenStorage({COOKIE: 'abc'})
    assert storage.get(COOKIE) == 'abc'

    storage.delete(COOKIE)
    assert storage.get(COOKIE) is None
    assert storage.has_pending_writes

    response = MagicMock()
    storage.apply(response)

    args, kwargs = response.set_cookie.call_args
    assert args == (COOKIE, '')
    assert kwargs['path'] == '/'
    assert kwargs['expires'].year == 1970
    assert not storage.has_pending_writes
