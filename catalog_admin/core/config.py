import os
from dotenv import load_dotenv

load_dotenv(override=True)

class Config:
    """
    Base configuration for the catalog admin console.
    Projects point it at their product API via environment variables.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')
    BRAND_NAME = os.getenv('BRAND_NAME', 'Catalog Admin')

    # Remote product API
    API_BASE = os.getenv('API_BASE', '').rstrip('/')
    API_PATH = os.getenv('API_PATH', '')
    REQUEST_TIMEOUT = float(os.getenv('REQUEST_TIMEOUT', '10'))
    HEALTH_PROBE_TIMEOUT = float(os.getenv('HEALTH_PROBE_TIMEOUT', '2'))

    # Credential cookie
    TOKEN_COOKIE_NAME = os.getenv('TOKEN_COOKIE_NAME', 'hexToken')
    # Used when the sign-in response carries an expiry we cannot parse
    TOKEN_FALLBACK_TTL_DAYS = int(os.getenv('TOKEN_FALLBACK_TTL_DAYS', '7'))

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))
    LOG_DB = os.getenv('LOG_DB', os.path.join(DB_DIR, 'app_logs.db'))
    LOGS_TABLE = 'app_logs'

    # Port for local server
    port = int(os.getenv('PORT', '5000'))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None and val != '':
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None and val != '':
        return val
    return os.getenv(key, default)
