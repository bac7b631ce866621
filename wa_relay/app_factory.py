"""
GREEN-API Relay - App Factory

The route table is built here explicitly; nothing registers itself on import.
"""
import atexit
import os
import logging
from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from wa_relay.config import get_config_class
from wa_relay.error_handlers import register_error_handlers
from wa_relay.green_api_client import GreenApiClient
from wa_relay.health_endpoints import health_bp
from wa_relay.routes_api import api_bp
from wa_relay.ui_routes import ui_bp

logger = logging.getLogger(__name__)

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def create_app(config_overrides=None, client=None):
    """Create the Flask application.

    Args:
        config_overrides: dict merged over the APP_ENV config class
        client: GreenApiClient to use instead of one built from config
    """
    app = Flask(__name__,
                static_folder=os.path.join(PACKAGE_DIR, "static"),
                static_url_path="/static",
                template_folder=os.path.join(PACKAGE_DIR, "templates"))

    app.config.from_object(get_config_class())
    if config_overrides:
        app.config.update(config_overrides)

    app.json.ensure_ascii = app.config.get("JSON_ENSURE_ASCII", False)

    if app.config.get("TRUST_PROXY"):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if isinstance(cors_origins, str) and cors_origins != "*":
        cors_origins = [o.strip() for o in cors_origins.split(",") if o.strip()]
    CORS(app,
         resources={r"/api/*": {"origins": cors_origins}},
         allow_headers=["Content-Type", "HX-Request", "HX-Target", "HX-Trigger", "HX-Current-URL"],
         methods=["GET", "POST", "OPTIONS"])

    # One outbound connection pool per process
    if client is None:
        client = GreenApiClient.from_config(app.config)
        atexit.register(client.close)
    app.extensions["green_api_client"] = client

    app.register_blueprint(ui_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(api_bp)

    register_error_handlers(app)

    logger.info("[APP] routes: %s", sorted(str(rule) for rule in app.url_map.iter_rules()))
    logger.info("[APP] upstream hosts: settings=%s default=%s",
                app.config["GREEN_API_SETTINGS_HOST"], app.config["GREEN_API_HOST"])
    return app
