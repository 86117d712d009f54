"""Startup orchestration: wire the request pipeline and auth gate once per browser session."""

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

import logging

import requests

import auth
from infrastructure.http_client import ApiClient
from infrastructure.session_store import FileSessionStore, SessionStore
from services.blog_api import BlogApi
from services.data_access import DataAccess
from services.query_cache import QueryCache
from settings import Settings, load_settings
from use_cases.auth_gate import AuthGate
from use_cases.session_models import AuthState
from utils import session_manager

log = logging.getLogger(__name__)

StartupStatus = Literal["CONTINUE", "STOP"]


@dataclass(frozen=True)
class StartupResult:
    """Result contract for startup/bootstrap orchestration."""

    status: StartupStatus
    planned_steps: Tuple[str, ...]


@dataclass(frozen=True)
class Services:
    client: ApiClient
    gate: AuthGate
    api: BlogApi


def build_services(
    settings: Settings,
    store: SessionStore,
    session: Optional[requests.Session] = None,
    navigate=None,
    current_location=None,
) -> Services:
    transport = auth.build_transport(settings)
    client = ApiClient(settings.api_base_url, transport, store, timeout=settings.request_timeout, session=session)
    cache = QueryCache(stale_time=settings.stale_time_seconds)
    gate = AuthGate(store, transport, client, navigate=navigate, current_location=current_location)

    def _drop_cache_on_logout(snapshot):
        if snapshot.state == AuthState.LOGGED_OUT:
            cache.clear()

    gate.subscribe(_drop_cache_on_logout)
    return Services(client=client, gate=gate, api=BlogApi(DataAccess(client, cache)))


def _build_store(settings: Settings) -> SessionStore:
    if settings.session_file:
        return FileSessionStore(settings.session_file)
    return session_manager.BrowserSessionStore()


def run_startup() -> StartupResult:
    """Create this browser session's services (idempotent) and resolve the initial auth state."""
    executed_steps = []

    session_manager.init_session_state()
    executed_steps.append("init_session_state")

    if session_manager.st.session_state.auth_gate is None:
        try:
            settings = load_settings()
        except ValueError as e:
            log.error(f"Invalid configuration: {e}")
            executed_steps.append("invalid_settings")
            return StartupResult(status="STOP", planned_steps=tuple(executed_steps))
        executed_steps.append("load_settings")
        services = build_services(
            settings,
            _build_store(settings),
            navigate=session_manager.navigate,
            current_location=session_manager.current_route,
        )
        session_manager.st.session_state.auth_gate = services.gate
        session_manager.st.session_state.blog_api = services.api
        executed_steps.append("build_services")
        log.info(f"Dashboard session wired to {settings.api_base_url} ({settings.auth_mode} auth)")

    session_manager.st.session_state.auth_gate.init()
    executed_steps.append("auth_gate_init")

    return StartupResult(status="CONTINUE", planned_steps=tuple(executed_steps))
