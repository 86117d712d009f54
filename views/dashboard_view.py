import streamlit as st

import ui
from services import moderation_service
from utils import session_manager


def render_dashboard(api):
    head_l, head_r = st.columns([4, 1])
    head_l.title("Dashboard")
    if head_r.button("➕ New Blog", type="primary", use_container_width=True):
        session_manager.navigate("/blogs/new")

    with st.spinner("Loading dashboard..."):
        blogs = api.list_blogs()
        comments = api.list_comments()
        feedback = api.list_feedback()
        stories = api.list_stories()

    for result in (blogs, comments, feedback, stories):
        if result.error is not None:
            st.warning(result.error.message)

    stats = moderation_service.build_dashboard_stats(blogs.data, comments.data, feedback.data, stories.data)

    c1, c2, c3, c4 = st.columns(4)
    ui.render_stat_card(c1, "Total Blogs", stats.blog_count)
    ui.render_stat_card(c2, "Comments", stats.comment_count)
    ui.render_stat_card(c3, "Avg. Rating", f"{stats.average_rating:.1f}")
    ui.render_stat_card(c4, "Pending Stories", stats.pending_stories)

    st.divider()
    col_blogs, col_comments = st.columns(2)

    with col_blogs:
        st.subheader("Recent Blogs")
        if not stats.recent_blogs:
            st.info("No blogs yet.")
        for blog in stats.recent_blogs:
            if st.button(f"📄 {blog.title}", key=f"dash_blog_{blog.id}", use_container_width=True):
                session_manager.navigate(f"/blogs/{blog.id}")
            st.caption(f"{blog.estimated_read_time} min read · {blog.created_at[:10]}")
        if st.button("View all blogs", key="dash_all_blogs"):
            session_manager.navigate("/blogs")

    with col_comments:
        st.subheader("Recent Comments")
        if not stats.recent_comments:
            st.info("No comments yet.")
        for comment in stats.recent_comments:
            st.markdown(f"**{comment.name}** · blog #{comment.blog}")
            st.caption(ui.truncate(comment.content, 120))
        if st.button("View all comments", key="dash_all_comments"):
            session_manager.navigate("/comments")
