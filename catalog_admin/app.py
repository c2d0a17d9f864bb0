"""
Catalog Admin Console
=====================

Run with:
    python -m catalog_admin.app

Visit:
    http://localhost:5000/admin/login  - Operator sign-in
    http://localhost:5000/health       - Health check
"""

import logging

from . import create_app
from .core.config import Config

app = create_app()

# Session security
app.config['SESSION_COOKIE_HTTPONLY'] = True
app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')
    app.config['SESSION_COOKIE_SECURE'] = False

    print("\n" + "=" * 60)
    print(Config.BRAND_NAME)
    print("=" * 60)
    print(f"Product API:     {Config.API_BASE or '(API_BASE not set)'}")
    print(f"Admin Login:     http://localhost:{Config.port}/admin/login")
    print(f"Health:          http://localhost:{Config.port}/health")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.port, debug=True)
