"""
Single configured request pipeline for the blog REST API.

Every call goes through ``ApiClient.request``:
  1. the auth transport injects the current session credential (no-op when
     there is none),
  2. 401/403 responses emit the auth-expired signal once and fail the call,
  3. every other failure is reshaped into ``ApiError(message, status)``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import requests

from infrastructure.session_store import SessionStore

log = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred"
AUTH_FAILURE_STATUSES = (401, 403)
DEFAULT_HEADERS = {"Content-Type": "application/json"}


class ApiError(Exception):
    """Normalized error: a human-readable message plus the HTTP status when one exists."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "status": self.status}

    def __repr__(self):
        return f"{type(self).__name__}(message={self.message!r}, status={self.status!r})"


class AuthExpiredError(ApiError):
    """The server rejected the session credential (401/403)."""


def extract_error_message(response: Optional[requests.Response] = None, exc: Optional[BaseException] = None) -> str:
    """Prefer the body's ``detail`` field, then the transport error text."""
    if response is not None:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("detail"):
            return str(body["detail"])
        if exc is None:
            try:
                response.raise_for_status()
            except requests.HTTPError as http_exc:
                exc = http_exc
    if exc is not None and str(exc):
        return str(exc)
    return GENERIC_ERROR_MESSAGE


@dataclass
class RequestContext:
    method: str
    url: str
    retried: bool = False


AuthExpiredListener = Callable[[AuthExpiredError], None]


class ApiClient:
    def __init__(
        self,
        base_url: str,
        transport,
        store: SessionStore,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.transport = transport
        self.store = store
        self.timeout = timeout
        self.http = session if session is not None else requests.Session()
        self.http.headers.update(DEFAULT_HEADERS)
        self._auth_expired_listeners: List[AuthExpiredListener] = []

    def build_url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def add_auth_expired_listener(self, listener: AuthExpiredListener) -> Callable[[], None]:
        self._auth_expired_listeners.append(listener)

        def _remove():
            if listener in self._auth_expired_listeners:
                self._auth_expired_listeners.remove(listener)

        return _remove

    def _emit_auth_expired(self, error: AuthExpiredError) -> None:
        for listener in list(self._auth_expired_listeners):
            listener(error)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        data: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        method = method.upper()
        ctx = RequestContext(method=method, url=self.build_url(path))
        kwargs: Dict[str, Any] = {"headers": dict(headers or {}), "timeout": self.timeout}
        if params:
            kwargs["params"] = params
        if json is not None:
            kwargs["json"] = json
        if data is not None:
            kwargs["data"] = data

        self.transport.prepare(self, method, kwargs, self.store.get())

        try:
            response = self.http.request(method, ctx.url, **kwargs)
        except requests.RequestException as e:
            log.warning(f"{method} {ctx.url} failed before a response: {e}")
            raise ApiError(extract_error_message(exc=e)) from e

        return self._handle_response(ctx, response)

    def _handle_response(self, ctx: RequestContext, response: requests.Response) -> requests.Response:
        status = response.status_code
        if 200 <= status < 300:
            return response

        if status in AUTH_FAILURE_STATUSES and not ctx.retried:
            ctx.retried = True
            error = AuthExpiredError(extract_error_message(response), status)
            log.info(f"{ctx.method} {ctx.url} -> {status}, session rejected")
            self._emit_auth_expired(error)
            raise error

        error = ApiError(extract_error_message(response), status)
        log.warning(f"{ctx.method} {ctx.url} -> {status}: {error.message}")
        raise error

    @staticmethod
    def decode(response: requests.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError("Invalid JSON in server response", response.status_code) from e

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.decode(self.request("GET", path, params=params))
