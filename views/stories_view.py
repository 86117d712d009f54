import streamlit as st

import ui
from services import moderation_service
from utils import session_manager

PUBLISH_FILTERS = {"all": "All", "approved": "Approved", "pending": "Pending"}


def render_story_list(api):
    st.title("Stories")
    c_filter, c_order = st.columns([3, 1])
    publish_filter = c_filter.radio(
        "Status", list(PUBLISH_FILTERS), format_func=PUBLISH_FILTERS.get, horizontal=True
    )
    sort_order = c_order.radio("Date", ["desc", "asc"], format_func=lambda o: "↓" if o == "desc" else "↑", horizontal=True)

    result = api.list_stories()
    if result.error is not None:
        st.error(f"Error loading stories: {result.error.message}")
        return
    stories = moderation_service.filter_and_sort_stories(result.data or [], publish_filter, sort_order)
    if not stories:
        st.info("No stories found.")
        return

    for story in stories:
        with st.container(border=True):
            status = "✅ Approved" if story.allow_publish else "⏳ Pending"
            st.markdown(f"**#{story.id}** · {status} · {story.submitted_at[:10]}")
            with st.expander(ui.truncate(story.story_text, 100)):
                st.write(story.story_text)
            c1, c2 = st.columns(2)
            label = "Unpublish" if story.allow_publish else "Approve"
            if c1.button(label, key=f"toggle_story_{story.id}", use_container_width=True):
                updated = api.set_story_publish(story.id, not story.allow_publish)
                if updated.ok:
                    session_manager.flash("success", "Story updated successfully")
                    st.rerun()
                else:
                    st.error(f"Error updating story: {updated.error.message}")
            confirm = c2.checkbox("Confirm delete", key=f"confirm_delete_story_{story.id}")
            if c2.button("🗑 Delete", key=f"delete_story_{story.id}", use_container_width=True, disabled=not confirm):
                deleted = api.delete_story(story.id)
                if deleted.ok:
                    session_manager.flash("success", "Story deleted successfully")
                    st.rerun()
                else:
                    st.error(f"Error deleting story: {deleted.error.message}")
