# wa_relay/routes_api.py
"""
GREEN-API relay endpoints

Every route: decode JSON body -> build upstream URL -> (payload) -> call -> reshape.
"""
import logging

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadGateway, HTTPException

from wa_relay.errors import DecodeError, TransportError, UpstreamError, describe
from wa_relay.green_api_client import GreenApiClient, build_api_url
from wa_relay.masking import mask_phone, mask_url
from wa_relay.models import (
    CredentialsRequest,
    SendFileRequest,
    SendMessageRequest,
    relay_response,
    settings_response,
)

api_bp = Blueprint("api", __name__, url_prefix="/api")
log = logging.getLogger(__name__)

GATEWAY_FAILURE = "Failed to communicate with WhatsApp API"


class UpstreamHTTPError(HTTPException):
    """Carries the upstream status code back to the browser"""

    def __init__(self, status_code, description):
        super().__init__(description=description)
        self.code = status_code


def get_client() -> GreenApiClient:
    return current_app.extensions["green_api_client"]


def _decode(shape):
    data = request.get_json(force=True, silent=True)
    return shape.from_json(data)


def _call(operation, url, token, method="GET", payload=None):
    """Run the upstream call and translate failures into HTTP errors"""
    safe_url = mask_url(url, token)
    try:
        result = get_client().call(url, method, payload)
    except UpstreamError as e:
        api_error = e.api_error
        log.warning("[RELAY] %s %s failed: %s", operation, safe_url, describe(e))
        if api_error is not None:
            raise UpstreamHTTPError(e.status_code, f"WhatsApp API error: {api_error}") from e
        raise BadGateway(GATEWAY_FAILURE) from e
    except (TransportError, DecodeError) as e:
        log.error("[RELAY] %s %s failed: %s", operation, safe_url, describe(e))
        raise BadGateway(GATEWAY_FAILURE) from e

    log.info("[RELAY] %s -> %s in %.1fms", operation, result.status_code, result.elapsed * 1000)
    return result


@api_bp.route("/get-settings", methods=["POST"])
def get_settings():
    """Instance settings lookup"""
    req = _decode(CredentialsRequest)
    url = build_api_url(current_app.config["GREEN_API_SETTINGS_HOST"],
                        req.idInstance, "getSettings", req.apiTokenInstance)

    result = _call("getSettings", url, req.apiTokenInstance)
    return jsonify(settings_response(url, result.body))


@api_bp.route("/get-state", methods=["POST"])
def get_state():
    """Instance authorization state"""
    req = _decode(CredentialsRequest)
    url = build_api_url(current_app.config["GREEN_API_HOST"],
                        req.idInstance, "getStateInstance", req.apiTokenInstance)

    result = _call("getStateInstance", url, req.apiTokenInstance)
    return jsonify(relay_response(url, req, result.body, result.status_code, result.elapsed))


@api_bp.route("/send-message", methods=["POST"])
def send_message():
    """Text message to a single chat"""
    req = _decode(SendMessageRequest)
    req.validate()

    url = build_api_url(current_app.config["GREEN_API_HOST"],
                        req.idInstance, "sendMessage", req.apiTokenInstance)
    log.info("Send WA: to=%s len=%d", mask_phone(req.phoneNumber), len(req.messageText))

    result = _call("sendMessage", url, req.apiTokenInstance, "POST", req.payload())
    return jsonify(relay_response(url, req, result.body, result.status_code, result.elapsed))


@api_bp.route("/send-file", methods=["POST"])
def send_file():
    """File by URL to a single chat"""
    req = _decode(SendFileRequest)
    req.validate()

    url = build_api_url(current_app.config["GREEN_API_HOST"],
                        req.idInstance, "sendFileByUrl", req.apiTokenInstance)
    payload = req.payload()
    log.info("Send WA file: to=%s name=%s", mask_phone(req.phoneNumber), payload["fileName"])

    result = _call("sendFileByUrl", url, req.apiTokenInstance, "POST", payload)
    return jsonify(relay_response(url, req, result.body, result.status_code, result.elapsed))
