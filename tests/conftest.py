import json
from unittest.mock import MagicMock

import pytest
import requests


def build_response(status=200, body=None, text=None, url="https://api.test/"):
    response = requests.Response()
    response.status_code = status
    response.url = url
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    elif text is not None:
        response._content = text.encode("utf-8")
        response.headers["Content-Type"] = "text/html"
    else:
        response._content = b""
    return response


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def http_session():
    """Stand-in for requests.Session; tests script ``request`` via return_value/side_effect."""
    session = MagicMock()
    session.headers = {}
    session.cookies = requests.cookies.RequestsCookieJar()
    return session
