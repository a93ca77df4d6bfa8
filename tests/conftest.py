"""
Pytest configuration and shared fixtures.

The gateway is never contacted: every test drives a mocked
``requests.Session`` that hands back real ``requests.Response`` objects.
"""

import json
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from wiopayments import PaymentClient

API_KEY = "test_api_key_1234567"
SECRET_KEY = "test_secret_key_1234"
BASE_URL = "https://gateway.test/api/"


def make_response(status_code: int = 200, body: Any = None) -> requests.Response:
    """Build a ``requests.Response`` with a JSON (or raw) body."""
    response = requests.Response()
    response.status_code = status_code
    if body is None:
        response._content = b""
    elif isinstance(body, (bytes, str)):
        response._content = body.encode("utf-8") if isinstance(body, str) else body
    else:
        response._content = json.dumps(body).encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    return response


def sent_request(session: MagicMock) -> dict:
    """Return method, url, headers and decoded body of the last request."""
    call = session.request.call_args
    method, url = call.args
    data = call.kwargs.get("data")
    return {
        "method": method,
        "url": url,
        "headers": call.kwargs["headers"],
        "body": json.loads(data) if data else None,
        "raw_body": data,
        "timeout": call.kwargs.get("timeout"),
    }


@pytest.fixture
def session() -> MagicMock:
    """Mock session answering every call with an empty JSON object."""
    mock = MagicMock(spec=requests.Session)
    mock.request.return_value = make_response(200, {})
    return mock


@pytest.fixture
def client(session: MagicMock) -> PaymentClient:
    return PaymentClient(API_KEY, SECRET_KEY, BASE_URL, session=session)


@pytest.fixture
def respond(session: MagicMock):
    """Configure the next response returned by the mocked session."""

    def _respond(body: Any = None, status_code: int = 200) -> None:
        session.request.return_value = make_response(status_code, body)

    return _respond
