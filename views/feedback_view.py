import streamlit as st

import ui
from services import moderation_service
from utils import session_manager
from views.blogs_view import select_blog_filter

FEEDBACK_COLUMNS = ["id", "rating", "email", "message", "blog", "submitted_at"]
SORT_LABELS = {"submitted_at": "Date", "rating": "Rating"}


def render_feedback_list(api):
    st.title("Feedback")
    c_filter, c_field, c_order = st.columns([3, 1, 1])
    with c_filter:
        blog_filter = select_blog_filter(api, key="feedback_blog_filter")
    sort_field = c_field.radio("Sort by", list(SORT_LABELS), format_func=SORT_LABELS.get, horizontal=True)
    sort_order = c_order.radio("Order", ["desc", "asc"], format_func=lambda o: "↓" if o == "desc" else "↑", horizontal=True)

    result = api.list_feedback(blog_filter)
    if result.error is not None:
        st.error(f"Error loading feedback: {result.error.message}")
        return
    feedback = moderation_service.sort_feedback(result.data or [], sort_field, sort_order)
    if not feedback:
        st.info("No feedback found.")
        return

    st.caption(f"Average rating: {moderation_service.average_rating(feedback):.1f} from {len(feedback)} responses")
    frame = moderation_service.to_frame(feedback, FEEDBACK_COLUMNS)
    frame["rating"] = frame["rating"].map(ui.stars)
    frame["message"] = frame["message"].map(ui.truncate)
    st.dataframe(frame, use_container_width=True, hide_index=True)

    options = {f.id: f for f in feedback}
    selected = st.selectbox("Feedback", list(options), format_func=lambda i: f"#{i} {options[i].email}")
    c1, c2 = st.columns(2)
    if c1.button("↗ Open blog", use_container_width=True):
        session_manager.navigate(f"/blogs/{options[selected].blog}")
    confirm = c2.checkbox("Confirm delete", key=f"confirm_delete_feedback_{selected}")
    if c2.button("🗑 Delete", use_container_width=True, disabled=not confirm):
        deleted = api.delete_feedback(selected)
        if deleted.ok:
            session_manager.flash("success", "Feedback deleted successfully")
            st.rerun()
        else:
            st.error(f"Error deleting feedback: {deleted.error.message}")
