import streamlit as st


def setup_style():
    st.markdown("""
    <style>
        :root {
            --primary: #3b82f6;
            --primary-soft: rgba(59, 130, 246, 0.12);
            --text-soft: #6b7280;
            --card-border: #e5e7eb;
        }

        .main .block-container {
            padding-top: 1.6rem;
            padding-bottom: 2rem;
        }

        .stat-card {
            border: 1px solid var(--card-border);
            border-radius: 12px;
            padding: 1rem 1.2rem;
            background: #ffffff;
        }

        .stat-card .label {
            color: var(--text-soft);
            font-size: 0.85rem;
        }

        .stat-card .value {
            font-size: 1.8rem;
            font-weight: 700;
        }

        .stars {
            color: #f59e0b;
            letter-spacing: 2px;
        }

        .waiting {
            height: 60vh;
            display: flex;
            align-items: center;
            justify-content: center;
            color: var(--text-soft);
        }
    </style>
    """, unsafe_allow_html=True)


def render_waiting(message="Loading..."):
    """Neutral placeholder while the initial auth check is running."""
    st.markdown(f"<div class='waiting'>{message}</div>", unsafe_allow_html=True)


def render_stat_card(container, label, value):
    container.markdown(
        f"<div class='stat-card'><div class='label'>{label}</div><div class='value'>{value}</div></div>",
        unsafe_allow_html=True,
    )


def stars(rating: int) -> str:
    rating = max(0, min(5, int(rating or 0)))
    return "★" * rating + "☆" * (5 - rating)


def truncate(text: str, limit: int = 80) -> str:
    text = text or ""
    return text if len(text) <= limit else text[: limit - 1] + "…"


def show_flash(message):
    if not message:
        return
    level, text = message
    if level == "success":
        st.success(text)
    elif level == "error":
        st.error(text)
    else:
        st.info(text)
