"""
GREEN-API HTTP client

Single outbound call per relayed request: no retries, no caching.
GET lookups share a pooled session; POST sends use a plain request with the same timeout.
The timeout is an overall deadline: the body is streamed and abandoned once it passes.
"""
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests
import urllib3

from wa_relay.errors import DecodeError, TransportError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_POOL_SIZE = 10
READ_CHUNK_SIZE = 8192

# Sub-delimiters that stay literal inside a path segment
PATH_SEGMENT_SAFE = "$&+:=@"


@dataclass
class UpstreamResult:
    body: Dict[str, Any]
    status_code: int
    elapsed: float


def path_escape(value: str) -> str:
    """Escape a value for use as a single URL path segment"""
    return quote(value, safe=PATH_SEGMENT_SAFE)


def build_api_url(host: str, id_instance: str, operation: str, api_token: str) -> str:
    """https://<host>/waInstance{id}/{operation}/{token} with both credentials path-escaped"""
    return "https://{host}/waInstance{id}/{operation}/{token}".format(
        host=host,
        id=path_escape(id_instance),
        operation=operation,
        token=path_escape(api_token),
    )


class GreenApiClient:
    """Thin requests wrapper around the GREEN-API REST endpoints"""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT,
                 connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
                 pool_size: int = DEFAULT_POOL_SIZE):
        self.timeout = timeout
        self.connect_timeout = connect_timeout

        # Connection reuse for GET lookups
        self._session = requests.Session()
        adapter = requests.adapters.HTTPAdapter(
            pool_connections=pool_size,
            pool_maxsize=pool_size,
            max_retries=0
        )
        self._session.mount('http://', adapter)
        self._session.mount('https://', adapter)
        self._session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Accept-Language": "en-US",
        })

    @classmethod
    def from_config(cls, config):
        return cls(
            timeout=config.get("GREEN_API_TIMEOUT", DEFAULT_TIMEOUT),
            connect_timeout=config.get("GREEN_API_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
            pool_size=config.get("GREEN_API_POOL_SIZE", DEFAULT_POOL_SIZE),
        )

    def close(self):
        self._session.close()

    def call(self, url: str, method: str = "GET", payload: Optional[Any] = None) -> UpstreamResult:
        """Issue one request and return the decoded JSON object.

        Raises:
            TransportError: no complete response within the timeout (DNS, connect, TLS, slow body)
            UpstreamError: HTTP status >= 400, raw body attached
            DecodeError: body is not a JSON object
        """
        method = method.upper()
        if method == "GET":
            return self.get_json(url)
        if method == "POST":
            return self.post_json(url, payload)
        raise ValueError(f"unsupported method: {method}")

    def get_json(self, url: str) -> UpstreamResult:
        start = time.monotonic()
        try:
            response = self._session.get(url, timeout=(self.connect_timeout, self.timeout), stream=True)
        except requests.exceptions.RequestException as e:
            # requests' message embeds the request path, token included
            raise TransportError(f"request execution failed: {type(e).__name__}", cause=e) from e
        body = self._read_body(response, start + self.timeout)
        return self._decode(response, body, time.monotonic() - start)

    def post_json(self, url: str, payload: Any) -> UpstreamResult:
        start = time.monotonic()
        try:
            response = requests.post(
                url,
                json=payload,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                timeout=self.timeout,
                stream=True
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"request failed: {type(e).__name__}", cause=e) from e
        body = self._read_body(response, start + self.timeout)
        return self._decode(response, body, time.monotonic() - start)

    def _read_body(self, response: requests.Response, deadline: float) -> bytes:
        """Read the streamed body, giving up once the deadline passes"""
        chunks = []
        try:
            while True:
                if time.monotonic() > deadline:
                    raise TransportError(f"request timed out after {self.timeout}s")
                # read1 returns as soon as any bytes arrive
                chunk = response.raw.read1(READ_CHUNK_SIZE, decode_content=True)
                if not chunk:
                    break
                chunks.append(chunk)
        except (urllib3.exceptions.HTTPError, OSError) as e:
            raise TransportError(f"failed to read response: {type(e).__name__}", cause=e) from e
        finally:
            response.close()
        return b"".join(chunks)

    def _decode(self, response: requests.Response, body: bytes, elapsed: float) -> UpstreamResult:
        status = response.status_code
        if status >= 400:
            raise UpstreamError(status, body.decode(response.encoding or "utf-8", errors="replace"))

        try:
            data = json.loads(body)
        except ValueError as e:
            raise DecodeError(f"json decode failed: {e}", status_code=status) from e

        if not isinstance(data, dict):
            raise DecodeError(f"json decode failed: expected object, got {type(data).__name__}",
                              status_code=status)

        logger.debug(f"[GREEN-API] {status} in {elapsed * 1000:.1f}ms")
        return UpstreamResult(body=data, status_code=status, elapsed=elapsed)
