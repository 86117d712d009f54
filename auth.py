"""
Credential transports for the blog API.

Two variants exist on the server side and exactly one is used per process:

* ``BearerTransport`` – token obtained from ``TOKEN_PATH`` and sent as
  ``Authorization: Bearer <token>``.
* ``CsrfSessionTransport`` – Django admin login form. The CSRF token is scraped
  from the login page HTML and every mutating request re-scrapes it into
  ``X-CSRFToken``. The stored credential is JSON holding the username and the
  server session cookies, which ``restore`` loads back into a fresh
  ``requests.Session``.
"""

import base64
import json
import logging
import re
from typing import Any, Dict, Optional

import requests

from infrastructure.http_client import ApiError, extract_error_message
from settings import DEFAULT_TOKEN_PATH, Settings
from use_cases.session_models import CurrentUser

log = logging.getLogger(__name__)

LOGIN_PATH = "/admin/login/"
LOGOUT_PATH = "/admin/logout/"
LOGIN_NEXT = "/admin/"
CSRF_TOKEN_RE = re.compile(r'name="csrfmiddlewaretoken" value="([^"]+)"')
MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
LOGIN_FAILED_MESSAGE = "Login failed. Please check your credentials."
SESSION_COOKIE = "sessionid"


def _raw_call(client, method: str, path: str, **kwargs) -> requests.Response:
    """Call the server without going through the interceptor pipeline."""
    kwargs.setdefault("timeout", client.timeout)
    try:
        return client.http.request(method, client.build_url(path), **kwargs)
    except requests.RequestException as e:
        raise ApiError(extract_error_message(exc=e)) from e


def _login_error(response: requests.Response) -> ApiError:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("detail"):
        return ApiError(str(body["detail"]), response.status_code)
    return ApiError(LOGIN_FAILED_MESSAGE, response.status_code)


def _decode_b64(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + pad)


def _jwt_claims(token: str) -> Dict[str, Any]:
    """Unverified JWT payload; the server stays the authority on validity."""
    try:
        payload = token.split(".")[1]
        claims = json.loads(_decode_b64(payload).decode("utf-8"))
    except (IndexError, ValueError, UnicodeDecodeError):
        return {}
    return claims if isinstance(claims, dict) else {}


class BearerTransport:
    mode = "bearer"

    def __init__(self, token_path: str = DEFAULT_TOKEN_PATH):
        self.token_path = token_path

    def prepare(self, client, method: str, kwargs: Dict[str, Any], credential: Optional[str]) -> None:
        if credential:
            kwargs["headers"]["Authorization"] = f"Bearer {credential}"

    def login(self, client, username: str, password: str) -> str:
        response = _raw_call(client, "POST", self.token_path, json={"username": username, "password": password})
        if not response.ok:
            raise _login_error(response)
        try:
            body = response.json()
        except ValueError as e:
            raise ApiError("Invalid JSON in login response", response.status_code) from e
        token = body.get("access") if isinstance(body, dict) else None
        if not token:
            raise ApiError("Login response did not include an access token", response.status_code)
        log.info(f"Bearer token issued for {username}")
        return token

    def restore(self, client, credential: Optional[str]) -> bool:
        return bool(credential)

    def describe_user(self, credential: Optional[str]) -> Optional[CurrentUser]:
        if not credential:
            return None
        claims = _jwt_claims(credential)
        username = claims.get("username") or claims.get("user_id") or "admin"
        return CurrentUser(username=str(username))

    def logout(self, client) -> None:
        # Tokens are stateless on the server; dropping the local copy is enough.
        return None


def _session_credential(raw: Optional[str]) -> Dict[str, Any]:
    """Decode the stored csrf-mode credential: ``{"username": ..., "cookies": {...}}``."""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        return {}
    if not isinstance(data, dict) or not data.get("username"):
        return {}
    cookies = data.get("cookies")
    data["cookies"] = cookies if isinstance(cookies, dict) else {}
    return data


class CsrfSessionTransport:
    mode = "csrf"

    def fetch_csrf_token(self, client) -> str:
        response = _raw_call(client, "GET", LOGIN_PATH)
        match = CSRF_TOKEN_RE.search(response.text or "")
        if not match:
            raise ApiError("Could not get CSRF token", response.status_code)
        return match.group(1)

    def prepare(self, client, method: str, kwargs: Dict[str, Any], credential: Optional[str]) -> None:
        if not credential or method not in MUTATING_METHODS:
            return
        kwargs["headers"]["X-CSRFToken"] = self.fetch_csrf_token(client)
        # Django rejects unsafe HTTPS requests that carry neither Origin nor Referer.
        kwargs["headers"]["Referer"] = client.build_url(LOGIN_PATH)

    def login(self, client, username: str, password: str) -> str:
        csrf_token = self.fetch_csrf_token(client)
        response = _raw_call(
            client,
            "POST",
            LOGIN_PATH,
            data={
                "csrfmiddlewaretoken": csrf_token,
                "username": username,
                "password": password,
                "next": LOGIN_NEXT,
            },
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "X-CSRFToken": csrf_token,
                "Referer": client.build_url(LOGIN_PATH),
            },
        )
        if not response.ok:
            raise _login_error(response)
        cookies = requests.utils.dict_from_cookiejar(client.http.cookies)
        # A rejected admin login re-renders the form with 200 and sets no session cookie.
        if not cookies.get(SESSION_COOKIE):
            raise ApiError(LOGIN_FAILED_MESSAGE, response.status_code)
        log.info(f"Admin session opened for {username}")
        return json.dumps({"username": username, "cookies": cookies})

    def restore(self, client, credential: Optional[str]) -> bool:
        """Load the stored server session cookies into a fresh client."""
        data = _session_credential(credential)
        if not data.get("cookies", {}).get(SESSION_COOKIE):
            return False
        requests.utils.add_dict_to_cookiejar(client.http.cookies, data["cookies"])
        return True

    def describe_user(self, credential: Optional[str]) -> Optional[CurrentUser]:
        data = _session_credential(credential)
        return CurrentUser(username=str(data["username"])) if data else None

    def logout(self, client) -> None:
        response = _raw_call(client, "GET", LOGOUT_PATH)
        client.http.cookies.clear()
        if not response.ok:
            raise ApiError(extract_error_message(response), response.status_code)


def build_transport(settings: Settings):
    if settings.auth_mode == "bearer":
        return BearerTransport(settings.token_path)
    return CsrfSessionTransport()
