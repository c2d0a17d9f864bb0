"""
Console Context
===============

Everything one operator's browser needs for a single request: the API gateway
with its token, the session and product stores, and the modal controller
rebuilt from the signed Flask session.
"""

from flask import current_app, g, request, session

from .api_client import ApiGateway
from .config import Config, get_config_value
from .modal import FlagModalPresenter, ModalFormController
from .product_store import ProductStore
from .session_store import SessionStore
from .token_storage import CookieTokenStorage

MODAL_SESSION_KEY = 'modal'


def build_gateway():
    """Default gateway factory, configured from app config / environment"""
    return ApiGateway(
        base_url=get_config_value('API_BASE', ''),
        api_path=get_config_value('API_PATH', ''),
        timeout=float(get_config_value('REQUEST_TIMEOUT', Config.REQUEST_TIMEOUT)),
    )


class ConsoleContext:

    def __init__(self, gateway, storage, modal_state=None, cookie_name=None):
        self.gateway = gateway
        self.storage = storage
        self.session = SessionStore(gateway, storage, cookie_name=cookie_name)
        self.products = ProductStore(gateway)

        presenter = FlagModalPresenter(visible=bool(modal_state and modal_state.get('mode')))
        self.modal = ModalFormController(self.products, presenter=presenter, state=modal_state)
        self._restored = None

    @classmethod
    def from_request(cls):
        extension = current_app.extensions.get('catalog_admin')
        factory = getattr(extension, 'gateway_factory', None) or build_gateway
        return cls(
            gateway=factory(),
            storage=CookieTokenStorage(request.cookies),
            modal_state=session.get(MODAL_SESSION_KEY),
            cookie_name=get_config_value('TOKEN_COOKIE_NAME', Config.TOKEN_COOKIE_NAME),
        )

    def ensure_authenticated(self):
        """Restore the session at most once per request"""
        if self.session.is_authenticated:
            return True
        if self._restored is None:
            self._restored = self.session.restore()
        return self._restored

    def persist(self, response):
        """Save modal state into the Flask session and flush cookie writes"""
        state = self.modal.to_state()
        if state['mode'] or session.get(MODAL_SESSION_KEY):
            session[MODAL_SESSION_KEY] = state
        self.storage.apply(response)
        return response


def get_console():
    """The ConsoleContext for the current request, built on first use"""
    if 'console' not in g:
        g.console = ConsoleContext.from_request()
    return g.console


def persist_console(response):
    """after_request hook"""
    console = g.pop('console', None)
    if console is not None:
        console.persist(response)
    return response


def discard_console(exc=None):
    """teardown_request hook; the app context (and g) may outlive the request"""
    g.pop('console', None)
