"""
GREEN-API upstream error taxonomy

Raised by GreenApiClient and translated into HTTP responses by the API routes.
"""
import json
from typing import Any, Dict, Optional


class GreenApiError(Exception):
    """Base exception for upstream call failures"""
    pass


class TransportError(GreenApiError):
    """DNS, connect, TLS or timeout failure - no HTTP response was received"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class UpstreamError(GreenApiError):
    """Upstream answered with HTTP status >= 400"""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"api error: {body}")
        self.status_code = status_code
        self.body = body

    @property
    def api_error(self) -> Optional[Any]:
        """The "error" field of the body, if the body is a JSON object carrying one"""
        try:
            data = json.loads(self.body)
        except ValueError:
            return None
        if isinstance(data, dict):
            return data.get("error")
        return None


class DecodeError(GreenApiError):
    """Upstream body was not a JSON object"""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


def describe(error: GreenApiError) -> Dict[str, Any]:
    """Compact dict for log lines"""
    info: Dict[str, Any] = {"type": type(error).__name__, "message": str(error)}
    status = getattr(error, "status_code", None)
    if status:
        info["status"] = status
    return info
