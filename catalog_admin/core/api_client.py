"""
Product API Client
==================

Thin client for the remote product service: sign-in, token check and the
admin product CRUD endpoints. Failures are raised as ApiError subclasses
carrying a message that is safe to show to the operator.
"""

import logging
from typing import Optional, Dict, Any, List
from urllib.parse import quote

import requests

from .logging_service import LoggingService

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = 'The product service request failed'


class ApiError(Exception):
    """Base error for every failed call to the product service"""

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthError(ApiError):
    """Invalid credentials, or an expired/invalid token"""


class ValidationError(ApiError):
    """The payload was rejected, locally or by the service"""


class NetworkError(ApiError):
    """Transport failure or an unexpected response from the service"""


class NotFoundError(ApiError):
    """The product no longer exists"""


def extract_error_message(response, default: str = GENERIC_ERROR_MESSAGE) -> str:
    """Pull a human-readable message out of an error response body"""
    try:
        body = response.json()
    except ValueError:
        return default

    if not isinstance(body, dict):
        return default

    message = body.get('message')
    if isinstance(message, (list, tuple)):
        message = ', '.join(str(m) for m in message if m)
    return message or default


class ApiGateway:
    """Per-session client for the product service"""

    def __init__(self, base_url: str, api_path: str, timeout: float = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or '').rstrip('/')
        self.api_path = (api_path or '').strip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    # Token handling

    def set_token(self, token: Optional[str]):
        """Attach the raw token to every later request, or detach it"""
        if token:
            self.session.headers.update({'Authorization': token})
        else:
            self.session.headers.pop('Authorization', None)

    @property
    def token(self) -> Optional[str]:
        return self.session.headers.get('Authorization')

    # Transport

    def _products_url(self, suffix: str = '') -> str:
        return f"{self.base_url}/api/{self.api_path}/admin/{suffix}"

    def _request(self, method: str, url: str, error_class=ApiError, **kwargs) -> Dict[str, Any]:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            logger.warning("Timeout calling %s %s: %s", method, url, e)
            raise NetworkError('The product service did not respond in time') from e
        except requests.RequestException as e:
            logger.warning("Could not reach %s %s: %s", method, url, e)
            raise NetworkError('Unable to reach the product service') from e

        LoggingService.log_api_call('api', url, method, response.status_code)

        if not response.ok:
            message = extract_error_message(response)
            status = response.status_code
            if status in (401, 403):
                raise AuthError(message, status)
            if status == 404:
                raise NotFoundError(message, status)
            if status in (400, 422):
                # A rejected sign-in is a credential problem, not a form problem
                raise (AuthError if error_class is AuthError else ValidationError)(message, status)
            raise NetworkError(message, status)

        try:
            body = response.json()
        except ValueError:
            body = {}

        if isinstance(body, dict) and body.get('success') is False:
            raise error_class(extract_error_message(response), response.status_code)

        return body if isinstance(body, dict) else {'data': body}

    # Auth

    def signin(self, credentials: Dict[str, str]) -> Dict[str, Any]:
        """Exchange username/password for {token, expired}"""
        body = self._request(
            'POST', f"{self.base_url}/admin/signin",
            error_class=AuthError,
            json={
                'username': credentials.get('username', ''),
                'password': credentials.get('password', ''),
            }
        )
        if not body.get('token'):
            raise AuthError(body.get('message') or 'Sign-in response did not include a token')
        return body

    def check_auth(self) -> bool:
        """Ask the service whether the attached token is still valid"""
        body = self._request('POST', f"{self.base_url}/api/user/check", error_class=AuthError)
        return bool(body.get('success'))

    # Products

    def list_products(self) -> List[Dict[str, Any]]:
        body = self._request('GET', self._products_url('products'))
        products = body.get('products') or []
        if isinstance(products, dict):
            products = list(products.values())
        if not isinstance(products, list):
            raise ApiError('The product service sent an unreadable product list')
        return products

    def create_product(self, product: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('POST', self._products_url('product'), json={'data': product})

    def update_product(self, product_id: str, product: Dict[str, Any]) -> Dict[str, Any]:
        if not product_id:
            raise ValidationError('Product id is required for an update')
        return self._request(
            'PUT', self._products_url(f"product/{quote(str(product_id), safe='')}"),
            json={'data': product}
        )

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        if not product_id:
            raise ValidationError('Product id is required for a delete')
        return self._request('DELETE', self._products_url(f"product/{quote(str(product_id), safe='')}"))
