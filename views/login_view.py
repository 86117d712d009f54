import time

import streamlit as st

from infrastructure.http_client import ApiError
from utils import session_manager

LOGIN_FAILED_FALLBACK = "Login failed. Please check your credentials."
PERSIST_DELAY_SECONDS = 0.5


def render_auth_screen():
    st.title("📘 Blog Admin Dashboard")
    st.caption("Sign in to access the admin dashboard")

    gate = st.session_state.auth_gate

    with st.form("login_form", clear_on_submit=False):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", disabled=gate.is_loading)

    if not submitted:
        return

    if not username.strip():
        st.error("Username is required")
        return
    if not password:
        st.error("Password is required")
        return

    try:
        with st.spinner("Signing in..."):
            gate.login(username.strip(), password)
    except ApiError as e:
        st.error(e.message or LOGIN_FAILED_FALLBACK)
        return

    time.sleep(PERSIST_DELAY_SECONDS)  # give the cookie script time to run before the rerun
    session_manager.navigate(session_manager.pop_redirect_target())
