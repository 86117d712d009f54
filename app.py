import re

import streamlit as st

from infrastructure.observability import setup_observability
setup_observability()

import sentry_sdk

import ui
from utils import session_manager
from use_cases import auth_flow, bootstrap
from views import (
    blogs_view, comments_view, dashboard_view, feedback_view, login_view, stories_view
)

# --- PAGE SETUP ---
st.set_page_config(page_title="Blog Admin Dashboard", page_icon="📘", layout="wide", initial_sidebar_state="expanded")

ui.setup_style()

NAV_ITEMS = [
    ("📊 Dashboard", "/dashboard"),
    ("📝 Blogs", "/blogs"),
    ("💬 Comments", "/comments"),
    ("⭐ Feedback", "/feedback"),
    ("📖 Stories", "/stories"),
]

BLOG_DETAIL_RE = re.compile(r"^/blogs/(\d+)$")
BLOG_EDIT_RE = re.compile(r"^/blogs/(\d+)/edit$")

# --- STARTUP ORCHESTRATION ---
startup_result = bootstrap.run_startup()
if startup_result.status == "STOP":
    st.error("Dashboard is misconfigured. Check AUTH_MODE and the other settings.")
    st.stop()

# --- ROUTE GUARD ---
auth_result = auth_flow.ensure_authenticated_session()

if auth_result.status == "LOGIN":
    login_view.render_auth_screen()
    st.stop()

if auth_result.status == "WAIT":
    ui.render_waiting()
    st.stop()

if auth_result.status == "STOP":
    if auth_result.redirect_to:
        session_manager.navigate(auth_result.redirect_to)
    st.stop()

# === MAIN INTERFACE ===
if sentry_sdk.get_client().is_active() and auth_result.username:
    sentry_sdk.set_user({"username": auth_result.username})

route = session_manager.current_route()
api = st.session_state.blog_api

with st.sidebar:
    st.markdown("## 📘 Blog Admin")
    if auth_result.username:
        st.caption(f"Signed in as **{auth_result.username}**")
    st.divider()

    for label, path in NAV_ITEMS:
        active = route == path or route.startswith(path + "/")
        if st.button(label, key=f"nav_{path}", use_container_width=True, type="primary" if active else "secondary"):
            session_manager.navigate(path)

    st.divider()
    if st.button("Logout", key="logout_btn", type="secondary", use_container_width=True):
        session_manager.logout()

ui.show_flash(session_manager.pop_flash())

# --- ROUTING ---
detail_match = BLOG_DETAIL_RE.match(route)
edit_match = BLOG_EDIT_RE.match(route)

if route == "/dashboard":
    dashboard_view.render_dashboard(api)
elif route == "/blogs":
    blogs_view.render_blog_list(api)
elif route == "/blogs/new":
    blogs_view.render_blog_form(api)
elif detail_match:
    blogs_view.render_blog_detail(api, int(detail_match.group(1)))
elif edit_match:
    blogs_view.render_blog_form(api, int(edit_match.group(1)))
elif route == "/comments":
    comments_view.render_comment_list(api)
elif route == "/feedback":
    feedback_view.render_feedback_list(api)
elif route == "/stories":
    stories_view.render_story_list(api)
else:
    session_manager.navigate(session_manager.DEFAULT_ROUTE)
