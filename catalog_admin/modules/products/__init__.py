"""
Products Admin Module
=====================

Admin interface for the product catalog.

Provides:
- Product table
- Create / edit / delete through one modal form
- Primary and secondary image URL management
"""

from flask import Blueprint

products_bp = Blueprint(
    'products_admin',
    __name__,
    url_prefix='/admin/products',
    template_folder='templates'
)

from . import routes

__all__ = ['products_bp']
