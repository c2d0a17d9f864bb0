"""
Session Store
=============

Owns the operator's credential token: restores it from the persisted slot,
obtains it on sign-in, drops it on logout, and keeps the API gateway's
Authorization header in step with it.
"""

import logging
from datetime import datetime, timedelta, timezone

from .api_client import ApiError, AuthError
from .config import Config
from .logging_service import LoggingService

logger = logging.getLogger(__name__)

# Epoch values at or above this are milliseconds (year 5138 in seconds)
MILLISECONDS_THRESHOLD = 10 ** 11


def parse_expiry(value, fallback_days=None):
    """
    Parse the server-issued expiry into an aware UTC datetime.

    Numbers and digit strings are epoch milliseconds or seconds; other strings
    are ISO-8601. Anything unparseable expires fallback_days from now.
    """
    if fallback_days is None:
        fallback_days = Config.TOKEN_FALLBACK_TTL_DAYS

    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = value / 1000 if value >= MILLISECONDS_THRESHOLD else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            pass
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except ValueError:
            pass
    elif isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    return datetime.now(timezone.utc) + timedelta(days=fallback_days)


class SessionStore:
    """Token lifecycle for one console client"""

    def __init__(self, gateway, storage, cookie_name=None):
        self.gateway = gateway
        self.storage = storage
        self.cookie_name = cookie_name or Config.TOKEN_COOKIE_NAME

        self.token = None
        self.expires_at = None
        self.is_authenticated = False
        self.is_loading = False
        self.error = None

    def _attach(self, token):
        if token != self.gateway.token:
            self.gateway.set_token(token)

    def _clear(self, persisted=False):
        self.token = None
        self.expires_at = None
        self.is_authenticated = False
        self._attach(None)
        if persisted:
            self.storage.delete(self.cookie_name)

    def restore(self):
        """Validate a persisted token with the service; True when it is still good"""
        token = self.storage.get(self.cookie_name)
        if not token:
            self.is_authenticated = False
            return False

        self.is_loading = True
        self.error = None
        self.token = token
        self._attach(token)
        try:
            success = self.gateway.check_auth()
        except AuthError as e:
            logger.info("Stored token rejected: %s", e.message)
            self.error = e.message
            self._clear(persisted=True)
            return False
        except ApiError as e:
            LoggingService.warning('auth', 'Token check failed', {'error': e.message})
            self.error = e.message
            self._clear()
            return False
        finally:
            self.is_loading = False

        if not success:
            self.error = 'Session expired, please sign in again'
            self._clear(persisted=True)
            return False

        self.is_authenticated = True
        return True

    def login(self, credentials):
        """Sign in; returns {'success': True} or {'success': False, 'error': message}"""
        self.is_loading = True
        self.error = None
        try:
            data = self.gateway.signin(credentials)
        except ApiError as e:
            self.error = e.message or 'Sign-in failed'
            self._clear()
            LoggingService.log_security_event(
                'Failed admin sign-in', {'username': credentials.get('username'), 'error': self.error}
            )
            return {'success': False, 'error': self.error}
        finally:
            self.is_loading = False

        self.token = data['token']
        self.expires_at = parse_expiry(data.get('expired'))
        self.storage.set(self.cookie_name, self.token, self.expires_at)
        self._attach(self.token)
        self.is_authenticated = True

        LoggingService.log_user_action('auth', 'login', {'username': credentials.get('username')})
        return {'success': True}

    def logout(self):
        """Forget the token locally; the service is not contacted"""
        was_authenticated = self.is_authenticated
        self.error = None
        self._clear(persisted=True)
        if was_authenticated:
            LoggingService.log_user_action('auth', 'logout')
