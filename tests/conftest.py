# tests/conftest.py
import os
import sys

import pytest
import requests_mock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from wa_relay.app_factory import create_app  # noqa: E402

ID_INSTANCE = "1101000001"
API_TOKEN = "d75b3a66374942c5b3c019c698abc2067e151558acbd412345"
API_HOST = "api.green-api.com"
SETTINGS_HOST = "1103.api.green-api.com"


def build_url(operation, host=API_HOST, id_instance=ID_INSTANCE, token=API_TOKEN):
    return f"https://{host}/waInstance{id_instance}/{operation}/{token}"


@pytest.fixture
def app():
    """Create application for the tests."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'GREEN_API_HOST': API_HOST,
        'GREEN_API_SETTINGS_HOST': SETTINGS_HOST,
    })
    yield app
    app.extensions["green_api_client"].close()


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest.fixture
def upstream():
    """Stubbed GREEN-API; unmatched URLs raise NoMockAddress"""
    with requests_mock.Mocker() as m:
        yield m


@pytest.fixture
def credentials():
    return {"idInstance": ID_INSTANCE, "apiTokenInstance": API_TOKEN}


@pytest.fixture
def api_url():
    return build_url
