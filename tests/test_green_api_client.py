"""
Tests for the outbound GREEN-API client
"""
import socket
import threading
import time

import pytest
import requests

from wa_relay.errors import DecodeError, TransportError, UpstreamError, describe
from wa_relay.green_api_client import GreenApiClient, UpstreamResult, build_api_url

URL = "https://api.green-api.com/waInstance1101000001/getStateInstance/token123"
SECRET = "SUPERSECRETTOKEN"


@pytest.fixture
def drip_server():
    """Local upstream that sends headers at once, then one body byte every 0.2s"""
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    listener.bind(("127.0.0.1", 0))
    listener.listen(5)
    listener.settimeout(0.2)
    stop = threading.Event()

    def drip(conn):
        with conn:
            try:
                conn.recv(65536)
                conn.sendall(b"HTTP/1.1 200 OK\r\n"
                             b"Content-Type: application/json\r\n"
                             b"Content-Length: 1000\r\n\r\n")
                while not stop.is_set():
                    conn.sendall(b" ")
                    time.sleep(0.2)
            except OSError:
                pass

    def serve():
        while not stop.is_set():
            try:
                conn, _ = listener.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            threading.Thread(target=drip, args=(conn,), daemon=True).start()

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    port = listener.getsockname()[1]
    yield f"http://127.0.0.1:{port}/waInstance1/getStateInstance/{SECRET}"
    stop.set()
    thread.join(timeout=2)
    listener.close()


@pytest.fixture
def green_client():
    c = GreenApiClient()
    yield c
    c.close()


class TestBuildApiUrl:
    def test_plain_credentials(self):
        url = build_api_url("api.green-api.com", "1101000001", "getStateInstance", "token123")
        assert url == URL

    def test_credentials_are_path_escaped(self):
        url = build_api_url("api.green-api.com", "11 01", "getSettings", "a/b?c#d")
        assert url == "https://api.green-api.com/waInstance11%2001/getSettings/a%2Fb%3Fc%23d"

    def test_sub_delimiters_stay_literal(self):
        url = build_api_url("api.green-api.com", "1", "getSettings", "a+b@c:d=e$f&g,h;i")
        assert url == "https://api.green-api.com/waInstance1/getSettings/a+b@c:d=e$f&g%2Ch%3Bi"

    def test_host_is_used_verbatim(self):
        url = build_api_url("1103.api.green-api.com", "1", "getSettings", "t")
        assert url.startswith("https://1103.api.green-api.com/waInstance1/")


class TestGetJson:
    def test_success_returns_body_and_status(self, green_client, upstream):
        upstream.get(URL, json={"stateInstance": "authorized"})

        result = green_client.get_json(URL)

        assert isinstance(result, UpstreamResult)
        assert result.body == {"stateInstance": "authorized"}
        assert result.status_code == 200
        assert result.elapsed >= 0

    def test_sends_json_headers(self, green_client, upstream):
        upstream.get(URL, json={})

        green_client.get_json(URL)

        headers = upstream.last_request.headers
        assert headers["Accept"] == "application/json"
        assert headers["Accept-Language"] == "en-US"

    def test_http_error_carries_raw_body(self, green_client, upstream):
        upstream.get(URL, status_code=401, text="Unauthorized")

        with pytest.raises(UpstreamError) as exc_info:
            green_client.get_json(URL)

        assert exc_info.value.status_code == 401
        assert exc_info.value.body == "Unauthorized"
        assert exc_info.value.api_error is None

    def test_http_error_exposes_error_field(self, green_client, upstream):
        upstream.get(URL, status_code=466, json={"error": "quota exceeded"})

        with pytest.raises(UpstreamError) as exc_info:
            green_client.get_json(URL)

        assert exc_info.value.api_error == "quota exceeded"

    def test_invalid_json_is_decode_error(self, green_client, upstream):
        upstream.get(URL, text="<html>oops</html>")

        with pytest.raises(DecodeError):
            green_client.get_json(URL)

    def test_json_array_is_decode_error(self, green_client, upstream):
        upstream.get(URL, json=[1, 2, 3])

        with pytest.raises(DecodeError):
            green_client.get_json(URL)

    def test_timeout_is_transport_error(self, green_client, upstream):
        upstream.get(URL, exc=requests.exceptions.ConnectTimeout)

        with pytest.raises(TransportError) as exc_info:
            green_client.get_json(URL)

        assert isinstance(exc_info.value.cause, requests.exceptions.ConnectTimeout)

    def test_connection_error_is_transport_error(self, green_client, upstream):
        upstream.get(URL, exc=requests.exceptions.ConnectionError("dns failure"))

        with pytest.raises(TransportError):
            green_client.get_json(URL)


class TestPostJson:
    def test_payload_is_sent_as_json(self, green_client, upstream):
        upstream.post(URL, json={"idMessage": "3EB0C767D097B7C7C030"})
        payload = {"chatId": "79001234567@c.us", "message": "hi"}

        result = green_client.post_json(URL, payload)

        assert result.body["idMessage"] == "3EB0C767D097B7C7C030"
        assert upstream.last_request.json() == payload
        assert upstream.last_request.headers["Content-Type"] == "application/json"

    def test_http_error(self, green_client, upstream):
        upstream.post(URL, status_code=400, json={"error": "bad chatId"})

        with pytest.raises(UpstreamError) as exc_info:
            green_client.post_json(URL, {})

        assert exc_info.value.status_code == 400

    def test_read_timeout_is_transport_error(self, green_client, upstream):
        upstream.post(URL, exc=requests.exceptions.ReadTimeout)

        with pytest.raises(TransportError):
            green_client.post_json(URL, {})


class TestCall:
    def test_dispatches_on_method(self, green_client, upstream):
        upstream.get(URL, json={"via": "get"})
        upstream.post(URL, json={"via": "post"})

        assert green_client.call(URL).body == {"via": "get"}
        assert green_client.call(URL, "post", {"a": 1}).body == {"via": "post"}

    def test_unsupported_method(self, green_client):
        with pytest.raises(ValueError):
            green_client.call(URL, "DELETE")

    def test_from_config(self):
        c = GreenApiClient.from_config({"GREEN_API_TIMEOUT": 3.0, "GREEN_API_CONNECT_TIMEOUT": 1.0})
        assert c.timeout == 3.0
        assert c.connect_timeout == 1.0
        c.close()


class TestOverallDeadline:
    """The timeout bounds the whole call, not each socket read"""

    def test_slow_body_on_get_is_cut_off(self, drip_server):
        c = GreenApiClient(timeout=1.0, connect_timeout=0.5)
        start = time.monotonic()

        with pytest.raises(TransportError):
            c.get_json(drip_server)

        assert time.monotonic() - start < 2.5
        c.close()

    def test_slow_body_on_post_is_cut_off(self, drip_server):
        c = GreenApiClient(timeout=1.0, connect_timeout=0.5)
        start = time.monotonic()

        with pytest.raises(TransportError):
            c.post_json(drip_server, {"chatId": "79001234567@c.us", "message": "hi"})

        assert time.monotonic() - start < 2.5
        c.close()


class TestTransportErrorMessage:
    def test_refused_connection_message_has_no_token(self, green_client):
        url = f"http://127.0.0.1:1/waInstance1/getStateInstance/{SECRET}"

        with pytest.raises(TransportError) as exc_info:
            green_client.get_json(url)

        assert SECRET not in str(exc_info.value)
        assert SECRET not in str(describe(exc_info.value))
        assert isinstance(exc_info.value.cause, requests.exceptions.ConnectionError)

    def test_refused_post_message_has_no_token(self, green_client):
        url = f"http://127.0.0.1:1/waInstance1/sendMessage/{SECRET}"

        with pytest.raises(TransportError) as exc_info:
            green_client.post_json(url, {})

        assert SECRET not in str(exc_info.value)
