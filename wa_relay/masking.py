"""
Secret masking for echoed requests and log lines
"""
from typing import Any, Dict, Optional

from wa_relay.green_api_client import path_escape

MASK = "••••••••"
TOKEN_FIELD = "apiTokenInstance"


def mask_request_body(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of an echoed request with the API token replaced by MASK"""
    masked = dict(fields)
    masked[TOKEN_FIELD] = MASK
    return masked


def mask_url(url: str, token: Optional[str]) -> str:
    """Hide the token (raw or path-escaped) inside an upstream URL, for logs"""
    if not token:
        return url
    # The token is always the last path segment of an upstream URL
    base, sep, last = url.rpartition("/")
    if sep and last in (path_escape(token), token):
        return f"{base}/{MASK}"
    return url.replace(path_escape(token), MASK)


def mask_phone(phone: str) -> str:
    """Keep only the last 4 digits of a phone number"""
    if not phone or len(phone) <= 4:
        return "****"
    return f"{'*' * (len(phone) - 4)}{phone[-4:]}"
