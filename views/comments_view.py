import streamlit as st

import ui
from services import moderation_service
from utils import session_manager
from views.blogs_view import select_blog_filter

COMMENT_COLUMNS = ["id", "name", "content", "blog", "created_at"]


def render_comment_list(api):
    st.title("Comments")
    blog_filter = select_blog_filter(api, key="comments_blog_filter")

    result = api.list_comments(blog_filter)
    if result.error is not None:
        st.error(f"Error loading comments: {result.error.message}")
        return
    comments = result.data or []
    if not comments:
        st.info("No comments found.")
        return

    frame = moderation_service.to_frame(comments, COMMENT_COLUMNS)
    frame["content"] = frame["content"].map(ui.truncate)
    st.dataframe(frame, use_container_width=True, hide_index=True)

    options = {c.id: c for c in comments}
    selected = st.selectbox(
        "Comment",
        list(options),
        format_func=lambda i: f"#{i} {options[i].name}: {ui.truncate(options[i].content, 40)}",
    )
    c1, c2 = st.columns(2)
    if c1.button("↗ Open blog", use_container_width=True):
        session_manager.navigate(f"/blogs/{options[selected].blog}")
    confirm = c2.checkbox("Confirm delete", key=f"confirm_delete_comment_{selected}")
    if c2.button("🗑 Delete", use_container_width=True, disabled=not confirm):
        deleted = api.delete_comment(selected)
        if deleted.ok:
            session_manager.flash("success", "Comment deleted successfully")
            st.rerun()
        else:
            st.error(f"Error deleting comment: {deleted.error.message}")
