import html

import streamlit as st

import ui
from services import moderation_service
from utils import session_manager

BLOG_COLUMNS = ["id", "title", "slug", "estimated_read_time", "created_at"]


def render_blog_list(api):
    head_l, head_r = st.columns([4, 1])
    head_l.title("Blogs")
    if head_r.button("➕ New Blog", type="primary", use_container_width=True):
        session_manager.navigate("/blogs/new")

    result = api.list_blogs()
    if result.error is not None:
        st.error(f"Error loading blogs: {result.error.message}")
        return
    blogs = result.data or []
    if not blogs:
        st.info("No blogs found. Create your first blog post.")
        return

    frame = moderation_service.to_frame(blogs, BLOG_COLUMNS)
    frame["estimated_read_time"] = frame["estimated_read_time"].astype(str) + " min"
    st.dataframe(frame, use_container_width=True, hide_index=True)

    options = {blog.id: blog.title for blog in blogs}
    selected = st.selectbox("Blog", list(options), format_func=lambda i: f"#{i} {options[i]}")
    c1, c2, c3 = st.columns(3)
    if c1.button("👁 View", use_container_width=True):
        session_manager.navigate(f"/blogs/{selected}")
    if c2.button("✏️ Edit", use_container_width=True):
        session_manager.navigate(f"/blogs/{selected}/edit")
    confirm = c3.checkbox("Confirm delete", key=f"confirm_delete_blog_{selected}")
    if c3.button("🗑 Delete", use_container_width=True, disabled=not confirm):
        deleted = api.delete_blog(selected)
        if deleted.ok:
            session_manager.flash("success", "Blog deleted successfully")
            st.rerun()
        else:
            st.error(f"Error deleting blog: {deleted.error.message}")


def render_blog_detail(api, blog_id: int):
    if st.button("← Back to blogs"):
        session_manager.navigate("/blogs")

    result = api.get_blog(blog_id)
    if result.error is not None:
        st.error(f"Error loading blog: {result.error.message}")
        return
    blog = result.data
    if blog is None:
        st.warning("Blog not found.")
        return

    st.title(blog.title)
    st.caption(f"{blog.estimated_read_time} min read · {blog.created_at[:10]} · slug: {blog.slug}")
    if blog.image:
        st.image(blog.image, use_container_width=True)
    st.subheader(blog.subheading)
    st.info(f"**TL;DR** {blog.tldr}")
    st.markdown(blog.content)

    c1, c2 = st.columns(2)
    if c1.button("✏️ Edit", use_container_width=True):
        session_manager.navigate(f"/blogs/{blog.id}/edit")
    confirm = c2.checkbox("Confirm delete", key=f"confirm_delete_detail_{blog.id}")
    if c2.button("🗑 Delete", use_container_width=True, disabled=not confirm):
        deleted = api.delete_blog(blog.id)
        if deleted.ok:
            session_manager.flash("success", "Blog deleted successfully")
            session_manager.navigate("/blogs")
        else:
            st.error(f"Error deleting blog: {deleted.error.message}")

    st.divider()
    comments = api.list_comments(blog.id).data or []
    feedback = api.list_feedback(blog.id).data or []

    col_c, col_f = st.columns(2)
    with col_c:
        st.subheader(f"Comments ({len(comments)})")
        for comment in comments:
            st.markdown(f"**{comment.name}** · {comment.created_at[:10]}")
            st.write(comment.content)
    with col_f:
        st.subheader(f"Feedback ({len(feedback)}) · ⭐ {moderation_service.average_rating(feedback):.1f}")
        for item in feedback:
            st.markdown(f"<span class='stars'>{ui.stars(item.rating)}</span> {html.escape(item.email)}", unsafe_allow_html=True)
            st.write(item.message)


def render_blog_form(api, blog_id=None):
    is_edit = blog_id is not None
    if st.button("← Back to blogs"):
        session_manager.navigate("/blogs")
    st.title("Edit Blog" if is_edit else "Create New Blog")

    initial = {
        "title": "", "slug": "", "subheading": "", "tldr": "",
        "content": "", "image": "", "estimated_read_time": 5,
    }
    if is_edit:
        result = api.get_blog(blog_id)
        if result.error is not None:
            st.error(f"Error loading blog: {result.error.message}")
            return
        if result.data is not None:
            initial.update(result.data.to_payload())

    with st.form(f"blog_form_{blog_id or 'new'}"):
        title = st.text_input("Title", value=initial["title"])
        slug = st.text_input("Slug", value=initial["slug"], help="Leave empty to generate from the title")
        subheading = st.text_input("Subheading", value=initial["subheading"])
        tldr = st.text_area("TLDR", value=initial["tldr"], height=80)
        content = st.text_area("Content", value=initial["content"], height=300)
        image = st.text_input("Image URL", value=initial["image"])
        read_time = st.number_input("Estimated Read Time (minutes)", value=int(initial["estimated_read_time"] or 1), step=1)
        submitted = st.form_submit_button("Update Blog" if is_edit else "Create Blog", type="primary")

    if not submitted:
        return

    form = {
        "title": title,
        "slug": slug.strip() or moderation_service.generate_slug(title),
        "subheading": subheading,
        "tldr": tldr,
        "content": content,
        "image": image,
        "estimated_read_time": read_time,
    }
    errors = moderation_service.validate_blog_form(form)
    if errors:
        for message in errors.values():
            st.error(message)
        return

    payload = moderation_service.blog_form_payload(form)
    saved = api.update_blog(blog_id, payload) if is_edit else api.create_blog(payload)
    if saved.ok:
        session_manager.flash("success", "Blog updated successfully" if is_edit else "Blog created successfully")
        session_manager.navigate("/blogs")
    else:
        action = "updating" if is_edit else "creating"
        st.error(f"Error {action} blog: {saved.error.message}")


def select_blog_filter(api, key: str):
    """Blog picker used by the comment and feedback lists; None means all blogs."""
    blogs = api.list_blogs().data or []
    options = [None] + [blog.id for blog in blogs]
    titles = {blog.id: blog.title for blog in blogs}
    return st.selectbox(
        "Filter by blog",
        options,
        format_func=lambda i: "All blogs" if i is None else f"#{i} {titles.get(i, '')}",
        key=key,
    )
