"""
Catalog Admin - A Flask Product Catalog Console
===============================================

An operator console for a remote product API with:
- Token sign-in backed by the product service
- Product table
- Create / edit / delete through a single modal form
- Public health endpoint

Usage:
    from flask import Flask
    from catalog_admin import CatalogAdmin

    app = Flask(__name__)
    CatalogAdmin(app, {'brand_name': 'My Shop'})
"""

__version__ = '0.1.0'
__author__ = 'Laurence Stephan'

import logging

import click
from flask import Flask, got_request_exception, redirect, url_for

from .core.config import Config
from .core.context import build_gateway, discard_console, persist_console
from .core.logging_service import LoggingService

logger = logging.getLogger(__name__)

DEFAULT_MODULES = ('dashboard', 'products', 'ops')


def _log_unhandled_exception(sender, exception, **extra):
    LoggingService.log_error_with_traceback('app', exception)


class CatalogAdmin:
    """
    Flask extension that wires the console into an app.

    Config keys may be passed as a dict; anything missing falls back to the
    app's config and then to catalog_admin.core.config.Config.
    """

    def __init__(self, app=None, config=None, gateway_factory=None):
        self._config = dict(config or {})
        self._registered = []
        self.gateway_factory = gateway_factory or build_gateway
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        for key in ('SECRET_KEY', 'API_BASE', 'API_PATH', 'TOKEN_COOKIE_NAME',
                    'REQUEST_TIMEOUT', 'LOG_DB', 'BRAND_NAME'):
            app.config.setdefault(key, getattr(Config, key))

        if 'brand_name' in self._config:
            app.config['BRAND_NAME'] = self._config['brand_name']
        if not app.config.get('SECRET_KEY'):
            logger.warning("SECRET_KEY is not set; the modal buffer cannot be kept between requests")

        self._register_modules(app)
        app.after_request(persist_console)
        app.teardown_request(discard_console)
        got_request_exception.connect(_log_unhandled_exception, app)

        @app.cli.command('cleanup-logs')
        @click.option('--days', default=30, show_default=True, help='Keep entries newer than this many days')
        def cleanup_logs(days):
            """Delete old rows from the console's log database."""
            deleted = LoggingService.cleanup_old_logs(days_to_keep=days)
            click.echo(f"Deleted {deleted} log entries older than {days} days")

        @app.context_processor
        def inject_catalog_admin():
            return {
                'catalog_admin_config': self.get_config(),
                'brand_name': app.config.get('BRAND_NAME') or Config.BRAND_NAME,
            }

        app.extensions['catalog_admin'] = self

    def _register_modules(self, app):
        features = self._config.get('features', {})
        modules = [name for name in DEFAULT_MODULES if features.get(name, True)]

        if 'dashboard' in modules:
            from .modules.dashboard import dashboard_bp
            app.register_blueprint(dashboard_bp)
        if 'products' in modules:
            from .modules.products import products_bp
            app.register_blueprint(products_bp)
        if 'ops' in modules:
            from .modules.ops import ops_health_bp
            app.register_blueprint(ops_health_bp)

        self._registered = modules

    def get_registered_modules(self):
        return list(self._registered)

    def get_config(self):
        return dict(self._config)


def create_app(config=None, gateway_factory=None):
    """Build a ready-to-run console app"""
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update({k: v for k, v in config.items() if k.isupper()})

    CatalogAdmin(app, {k: v for k, v in (config or {}).items() if not k.isupper()},
                 gateway_factory=gateway_factory)

    @app.route('/')
    def index():
        return redirect(url_for('products_admin.product_list'))

    return app


__all__ = ['CatalogAdmin', 'create_app', 'Config']
