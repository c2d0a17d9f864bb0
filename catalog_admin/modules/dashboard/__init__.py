"""
Dashboard Module
================

Operator sign-in for the catalog admin console.

Provides:
- Login form backed by the product service's sign-in endpoint
- Logout (drops the token cookie)
- The admin_required guard other modules use
"""

from flask import Blueprint

# Note: Blueprint name is 'admin' so url_for('admin.login') works everywhere
dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/admin',
    template_folder='templates'
)

# Import routes after blueprint is created
from . import routes
from .routes import admin_required

__all__ = ['dashboard_bp', 'admin_required']
