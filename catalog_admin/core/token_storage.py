"""
Token Storage
=============

The durable client-side slot the credential token lives in between page
loads. In the browser that slot is a cookie; reads come from the incoming
request and writes are queued until the response is built.
"""

from datetime import datetime, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class CookieTokenStorage:
    """Reads a cookie from the request, queues set/delete for the response"""

    def __init__(self, cookies):
        self._cookies = dict(cookies or {})
        self._pending = []

    def get(self, name):
        return self._cookies.get(name) or None

    def set(self, name, value, expires):
        self._cookies[name] = value
        self._pending.append((name, value, expires))

    def delete(self, name):
        self._cookies.pop(name, None)
        self._pending.append((name, '', EPOCH))

    @property
    def has_pending_writes(self):
        return bool(self._pending)

    def apply(self, response):
        """Write queued cookie changes onto a Flask response"""
        for name, value, expires in self._pending:
            max_age = 0 if expires == EPOCH else None
            response.set_cookie(name, value, expires=expires, max_age=max_age, path='/', samesite='Lax')
        self._pending = []
        return response


