import os
import secrets


def _env_int(name, default):
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


def _env_float(name, default):
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or secrets.token_hex(32)
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    TRUST_PROXY = os.environ.get('TRUST_PROXY', '0') == '1'

    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = _env_int('PORT', 8080)

    # Settings lookups go through the numbered API host, everything else through the generic one
    GREEN_API_HOST = os.environ.get('GREEN_API_HOST', 'api.green-api.com')
    GREEN_API_SETTINGS_HOST = os.environ.get('GREEN_API_SETTINGS_HOST', '1103.api.green-api.com')
    GREEN_API_TIMEOUT = _env_float('GREEN_API_TIMEOUT', 10.0)
    GREEN_API_CONNECT_TIMEOUT = _env_float('GREEN_API_CONNECT_TIMEOUT', 5.0)
    GREEN_API_POOL_SIZE = _env_int('GREEN_API_POOL_SIZE', 10)

    JSON_ENSURE_ASCII = False


class DevConfig(Config):
    DEBUG = True


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    GREEN_API_HOST = 'api.green-api.com'
    GREEN_API_SETTINGS_HOST = '1103.api.green-api.com'


class ProdConfig(Config):
    DEBUG = False


CONFIG_BY_ENV = {
    'development': DevConfig,
    'testing': TestConfig,
    'production': ProdConfig,
}


def get_config_class(env=None):
    """Pick the config class from APP_ENV (defaults to production)"""
    env = (env or os.environ.get('APP_ENV', 'production')).lower()
    return CONFIG_BY_ENV.get(env, ProdConfig)
