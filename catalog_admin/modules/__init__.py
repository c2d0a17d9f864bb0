"""
Catalog Admin Modules
=====================

Flask blueprints that make up the admin console.
"""

__all__ = ['dashboard', 'products', 'ops']
