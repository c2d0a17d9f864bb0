"""
Catalog Admin Core
==================

Session, API and modal state shared by the console's blueprints.
"""

from .config import Config
from .logging_service import LoggingService, logger
from .api_client import ApiGateway, ApiError, AuthError, ValidationError, NetworkError, NotFoundError
from .session_store import SessionStore
from .product_store import ProductStore
from .modal import ModalFormController, FlagModalPresenter

__all__ = [
    'Config', 'LoggingService', 'logger',
    'ApiGateway', 'ApiError', 'AuthError', 'ValidationError', 'NetworkError', 'NotFoundError',
    'SessionStore', 'ProductStore', 'ModalFormController', 'FlagModalPresenter',
]
