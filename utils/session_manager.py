import json
import logging
from typing import Optional
from urllib.parse import unquote

import streamlit as st
import streamlit.components.v1 as components

from infrastructure.session_store import SESSION_KEY, SessionStore

log = logging.getLogger(__name__)

"""
SESSION STATE CONTRACT

Keys of st.session_state used by the dashboard.

session_credential: str | None
    mirror of the browser-stored session credential; absent until first read
    owner: BrowserSessionStore

auth_gate: AuthGate | None
    login state machine for this browser session
    default: None
    owner: use_cases.bootstrap

blog_api: BlogApi | None
    resource API bound to this session's client and cache
    default: None
    owner: use_cases.bootstrap

route: str
    current view path, e.g. "/blogs/3/edit"
    default: "/dashboard"
    owner: navigation

redirect_from: str | None
    location the route guard sent to /login, restored after login
    default: None
    owner: navigation

flash: tuple[str, str] | None
    one-shot (level, message) shown after a rerun
    default: None
    owner: views
"""

DEFAULT_ROUTE = "/dashboard"
CREDENTIAL_STATE_KEY = "session_credential"
COOKIE_MAX_AGE = 2592000  # 30 days


def init_session_state():
    if "auth_gate" not in st.session_state:
        st.session_state.auth_gate = None
    if "blog_api" not in st.session_state:
        st.session_state.blog_api = None
    if "route" not in st.session_state:
        st.session_state.route = _initial_route()
    if "redirect_from" not in st.session_state:
        st.session_state.redirect_from = None
    if "flash" not in st.session_state:
        st.session_state.flash = None


def _initial_route() -> str:
    try:
        path = st.query_params.get("path")
    except Exception:
        # Query params are unavailable outside a running script (bare tests).
        path = None
    return path if path and path.startswith("/") else DEFAULT_ROUTE


class BrowserSessionStore(SessionStore):
    """
    Session credential kept in a browser cookie + localStorage, mirrored in
    st.session_state for the lifetime of the script session.
    """

    def _read_cookie(self) -> Optional[str]:
        try:
            raw = st.context.cookies.get(SESSION_KEY)
        except Exception:
            # During some tests contexts might not be fully available
            return None
        return unquote(raw) if raw else None

    def get(self) -> Optional[str]:
        # Cookies in st.context are fixed for the session, so after clear() the
        # state mirror must win even though the request still carries the cookie.
        if CREDENTIAL_STATE_KEY not in st.session_state:
            st.session_state[CREDENTIAL_STATE_KEY] = self._read_cookie()
        return st.session_state[CREDENTIAL_STATE_KEY]

    def set(self, credential: str) -> None:
        st.session_state[CREDENTIAL_STATE_KEY] = credential
        components.html(
            f"""
            <script>
                var value = {json.dumps(credential)};
                var cookieStr = "{SESSION_KEY}=" + encodeURIComponent(value) + "; path=/; max-age={COOKIE_MAX_AGE}; SameSite=Lax";
                document.cookie = cookieStr;
                localStorage.setItem("{SESSION_KEY}", value);
                try {{
                    window.parent.document.cookie = cookieStr;
                }} catch (e) {{
                    console.log("Cross-origin frame block, normal behavior if different origin");
                }}
            </script>
            """,
            height=0,
        )

    def clear(self) -> None:
        st.session_state[CREDENTIAL_STATE_KEY] = None
        components.html(
            f"""
            <script>
              document.cookie = "{SESSION_KEY}=; path=/; max-age=0; SameSite=Lax";
              try {{ window.parent.document.cookie = "{SESSION_KEY}=; path=/; max-age=0; SameSite=Lax"; }} catch (e) {{}}
              localStorage.removeItem("{SESSION_KEY}");
            </script>
            """,
            height=0,
        )


def current_route() -> str:
    return st.session_state.get("route") or DEFAULT_ROUTE


def navigate(path: str, from_location: Optional[str] = None, rerun: bool = True):
    st.session_state.route = path
    if from_location is not None:
        st.session_state.redirect_from = from_location
    try:
        st.query_params["path"] = path
    except Exception as e:
        # Same as _initial_route: no query params without a running script.
        log.debug(f"Query params unavailable: {e}")
    log.debug(f"Navigate -> {path} (from {from_location})")
    if rerun:
        st.rerun()


def pop_redirect_target() -> str:
    target = st.session_state.get("redirect_from")
    st.session_state.redirect_from = None
    if not target or target == "/login":
        return DEFAULT_ROUTE
    return target


def flash(level: str, message: str):
    st.session_state.flash = (level, message)


def pop_flash():
    message = st.session_state.get("flash")
    st.session_state.flash = None
    return message


def logout():
    gate = st.session_state.get("auth_gate")
    if gate is not None:
        gate.logout()
    navigate("/login")
