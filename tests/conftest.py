"""
Shared fixtures for the catalog admin tests.

The remote product service is replaced by FakeProductService, an in-memory
stand-in with the same methods as ApiGateway.
"""

import itertools
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from catalog_admin import create_app
from catalog_admin.core.api_client import ApiGateway, AuthError, NotFoundError
from catalog_admin.core.config import Config

VALID_USER = {'username': 'admin@example.com', 'password': 'secret'}
VALID_TOKEN = 'tok-123'
# 2099-01-01T00:00:00Z in epoch milliseconds
FAR_EXPIRY_MS = 4070908800000


class FakeProductService:
    """In-memory product service speaking the ApiGateway interface"""

    def __init__(self):
        self.token = None
        self.products = {}
        self.calls = []
        self.fail_next = None
        self._ids = itertools.count(1)

    def set_token(self, token):
        self.token = token or None

    def _maybe_fail(self):
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error

    def signin(self, credentials):
        self.calls.append(('signin', credentials.get('username')))
        if credentials != VALID_USER:
            raise AuthError('Invalid username or password', 400)
        return {'success': True, 'token': VALID_TOKEN, 'expired': FAR_EXPIRY_MS}

    def check_auth(self):
        self.calls.append(('check_auth', self.token))
        self._maybe_fail()
        if self.token != VALID_TOKEN:
            raise AuthError('Invalid token', 401)
        return True

    def _require_token(self):
        if self.token != VALID_TOKEN:
            raise AuthError('Please sign in', 401)

    def list_products(self):
        self.calls.append(('list_products',))
        self._require_token()
        self._maybe_fail()
        return [dict(p) for p in self.products.values()]

    def create_product(self, product):
        self.calls.append(('create_product', dict(product)))
        self._require_token()
        self._maybe_fail()
        product_id = f"p{next(self._ids)}"
        self.products[product_id] = dict(product, id=product_id)
        return {'success': True, 'message': 'Created'}

    def update_product(self, product_id, product):
        self.calls.append(('update_product', product_id, dict(product)))
        self._require_token()
        self._maybe_fail()
        if product_id not in self.products:
            raise NotFoundError('Product not found', 404)
        self.products[product_id] = dict(product, id=product_id)
        return {'success': True, 'message': 'Updated'}

    def delete_product(self, product_id):
        self.calls.append(('delete_product', product_id))
        self._require_token()
        self._maybe_fail()
        if product_id not in self.products:
            raise NotFoundError('Product not found', 404)
        del self.products[product_id]
        return {'success': True, 'message': 'Deleted'}

    def seed(self, **fields):
        product_id = f"p{next(self._ids)}"
        product = {
            'id': product_id, 'title': 'Seed', 'category': 'misc', 'origin_price': 100,
            'price': 80, 'unit': 'pc', 'description': '', 'content': '', 'is_enabled': 1,
            'imageUrl': '', 'imagesUrl': [],
        }
        product.update(fields)
        self.products[product_id] = product
        return product_id

    def count(self, name):
        return sum(1 for call in self.calls if call[0] == name)


class MemoryTokenStorage:
    """Token slot with cookie-like expiry, standing in for the browser cookie"""

    def __init__(self):
        self._values = {}

    def get(self, name):
        entry = self._values.get(name)
        if not entry:
            return None
        value, expires = entry
        if expires is not None and expires <= datetime.now(timezone.utc):
            del self._values[name]
            return None
        return value or None

    def set(self, name, value, expires):
        self._values[name] = (value, expires)

    def delete(self, name):
        self._values.pop(name, None)


def make_response(status_code=200, body=None, json_error=False):
    """A stand-in for requests.Response"""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if json_error:
        response.json.side_effect = ValueError('No JSON')
    else:
        response.json.return_value = body if body is not None else {}
    return response


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_log_db(tmp_path, monkeypatch):
    """Keep LoggingService writes inside the test's temp directory."""
    path = str(tmp_path / 'logs' / 'app_logs.db')
    monkeypatch.setattr(Config, 'LOG_DB', path)
    return path


@pytest.fixture
def service():
    return FakeProductService()


@pytest.fixture
def gateway():
    """A real ApiGateway whose HTTP session is a mock."""
    gw = ApiGateway('https://api.example.com', 'shop', timeout=5)
    gw.session.request = MagicMock(return_value=make_response(200, {'success': True}))
    return gw


@pytest.fixture
def app(service, isolated_log_db):
    """Fully initialised console app talking to the fake service."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'API_BASE': 'https://api.example.com',
        'API_PATH': 'shop',
        'LOG_DB': isolated_log_db,
        'brand_name': 'Test Shop',
    }, gateway_factory=lambda: service)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in_client(client):
    response = client.post('/admin/login', data=VALID_USER)
    assert response.status_code == 302, f"Login failed with {response.status_code}"
    return client
