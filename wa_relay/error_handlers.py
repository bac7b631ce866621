# wa_relay/error_handlers.py
import logging
from flask import request
from werkzeug.exceptions import HTTPException

log = logging.getLogger("errors")

PLAIN_TEXT = {"Content-Type": "text/plain; charset=utf-8"}


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def handle_http(e: HTTPException):
        # Plain text body; the page script only looks at the status code
        log.warning("HTTP %s %s -> %s", request.method, request.path, e.code)
        headers = dict(PLAIN_TEXT)
        description = e.description
        if e.code == 405:
            description = "Method not allowed"
            headers["Allow"] = ", ".join(getattr(e, "valid_methods", None) or ["POST"])
        return (f"{description}\n", e.code, headers)

    @app.errorhandler(Exception)
    def handle_exception(e: Exception):
        log.exception("UNHANDLED %s %s", request.method, request.path)
        return ("Internal Server Error\n", 500, PLAIN_TEXT)
