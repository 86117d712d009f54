from unittest.mock import MagicMock, patch

import streamlit as st

from use_cases import auth_flow
from use_cases.session_models import AuthSnapshot, AuthState, CurrentUser


def _gate(state, is_loading=False, username=None):
    gate = MagicMock()
    gate.snapshot.return_value = AuthSnapshot(
        state=state,
        user=CurrentUser(username) if username else None,
        is_loading=is_loading,
    )
    return gate


def _session(gate, route):
    st.session_state.clear()
    st.session_state.auth_gate = gate
    st.session_state.route = route
    st.session_state.redirect_from = None


def test_stop_when_not_bootstrapped():
    st.session_state.clear()
    result = auth_flow.ensure_authenticated_session()
    assert result.status == "STOP"
    assert result.reason == "not_bootstrapped"


def test_wait_while_initial_check_runs():
    _session(_gate(AuthState.INITIALIZING, is_loading=True), "/blogs")
    result = auth_flow.ensure_authenticated_session()
    assert result.status == "WAIT"
    assert st.session_state.redirect_from is None


def test_logged_out_redirects_and_remembers_origin():
    _session(_gate(AuthState.LOGGED_OUT), "/blogs/3/edit")
    result = auth_flow.ensure_authenticated_session()
    assert result.status == "STOP"
    assert result.reason == "auth_required"
    assert result.redirect_to == "/login"
    assert st.session_state.redirect_from == "/blogs/3/edit"


def test_continue_when_logged_in():
    _session(_gate(AuthState.LOGGED_IN, username="admin"), "/stories")
    result = auth_flow.ensure_authenticated_session()
    assert result.status == "CONTINUE"
    assert result.username == "admin"


def test_login_route_renders_login_view_when_logged_out():
    _session(_gate(AuthState.LOGGED_OUT), "/login")
    result = auth_flow.ensure_authenticated_session()
    assert result.status == "LOGIN"


@patch("use_cases.auth_flow.session_manager.pop_redirect_target", return_value="/feedback")
def test_login_route_bounces_logged_in_user(mock_pop):
    _session(_gate(AuthState.LOGGED_IN, username="admin"), "/login")
    result = auth_flow.ensure_authenticated_session()
    assert result.status == "STOP"
    assert result.reason == "already_authenticated"
    assert result.redirect_to == "/feedback"
    mock_pop.assert_called_once()
