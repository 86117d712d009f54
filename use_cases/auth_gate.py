"""
Auth Gate: the single owner of login state.

States: INITIALIZING -> LOGGED_IN | LOGGED_OUT (once, via ``init``),
LOGGED_OUT -> LOGGED_IN (``login``), LOGGED_IN -> LOGGED_OUT (``logout`` or a
rejected credential reported by the API client).
"""

import logging
from typing import Callable, List, Optional

from infrastructure.http_client import ApiClient, ApiError, AuthExpiredError
from infrastructure.session_store import SessionStore
from use_cases.route_guard import LOGIN_PATH
from use_cases.session_models import AuthSnapshot, AuthState, CurrentUser

log = logging.getLogger(__name__)

Navigate = Callable[[str, Optional[str]], None]
Listener = Callable[[AuthSnapshot], None]


class AuthGate:
    def __init__(
        self,
        store: SessionStore,
        transport,
        client: ApiClient,
        navigate: Optional[Navigate] = None,
        current_location: Optional[Callable[[], Optional[str]]] = None,
    ):
        self.store = store
        self.transport = transport
        self.client = client
        self._navigate = navigate
        self._current_location = current_location
        self._listeners: List[Listener] = []
        self.state = AuthState.INITIALIZING
        self.user: Optional[CurrentUser] = None
        self.is_loading = True
        self._initialized = False
        client.add_auth_expired_listener(self.handle_auth_expired)

    @property
    def is_logged_in(self) -> bool:
        return self.state == AuthState.LOGGED_IN

    def snapshot(self) -> AuthSnapshot:
        return AuthSnapshot(state=self.state, user=self.user, is_loading=self.is_loading)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)

    def _set_logged_in(self, credential: str) -> None:
        self.state = AuthState.LOGGED_IN
        self.user = self.transport.describe_user(credential)

    def _set_logged_out(self) -> None:
        self.state = AuthState.LOGGED_OUT
        self.user = None

    def init(self) -> AuthSnapshot:
        """Resolve the initial state from the stored credential. Runs once."""
        if self._initialized:
            return self.snapshot()
        self._initialized = True
        self.is_loading = True
        credential = self.store.get()
        if credential and self.transport.restore(self.client, credential):
            self._set_logged_in(credential)
        else:
            if credential:
                log.info("Stored session cannot be restored, signing out")
                self.store.clear()
            self._set_logged_out()
        self.is_loading = False
        self._notify()
        return self.snapshot()

    def login(self, username: str, password: str) -> CurrentUser:
        self.is_loading = True
        self._notify()
        try:
            credential = self.transport.login(self.client, username, password)
            self.store.set(credential)
            self._set_logged_in(credential)
            log.info(f"Logged in as {self.user.username}")
            return self.user
        except ApiError as e:
            log.info(f"Login rejected for {username}: {e.message}")
            self._set_logged_out()
            raise
        finally:
            self._initialized = True
            self.is_loading = False
            self._notify()

    def logout(self) -> None:
        self.store.clear()
        self._set_logged_out()
        self._notify()
        try:
            self.transport.logout(self.client)
        except ApiError as e:
            log.warning(f"Server logout failed, local session already cleared: {e.message}")

    def handle_auth_expired(self, error: AuthExpiredError) -> None:
        """Forced logout after the server rejected the credential, then go to the login view."""
        log.info(f"Session rejected by server ({error.status}), redirecting to login")
        self.store.clear()
        self._set_logged_out()
        self._initialized = True
        self.is_loading = False
        self._notify()
        if self._navigate is not None:
            origin = self._current_location() if self._current_location else None
            self._navigate(LOGIN_PATH, origin)
