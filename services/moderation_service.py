import re
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence

import pandas as pd

from use_cases.domain_models import Blog, Comment, Feedback, Story

SortOrder = Literal["asc", "desc"]
FeedbackSortField = Literal["rating", "submitted_at"]
PublishFilter = Literal["all", "approved", "pending"]

RECENT_LIMIT = 5
BLOG_FIELD_LABELS = {
    "title": "Title",
    "slug": "Slug",
    "subheading": "Subheading",
    "tldr": "TLDR",
    "content": "Content",
    "image": "Image URL",
}
BLOG_TEXT_FIELDS = tuple(BLOG_FIELD_LABELS)


@dataclass(frozen=True)
class DashboardStats:
    blog_count: int
    comment_count: int
    average_rating: float
    pending_stories: int
    recent_blogs: List[Blog]
    recent_comments: List[Comment]


def average_rating(feedback: Optional[Sequence[Feedback]]) -> float:
    if not feedback:
        return 0.0
    return sum(item.rating for item in feedback) / len(feedback)


def build_dashboard_stats(
    blogs: Optional[Sequence[Blog]],
    comments: Optional[Sequence[Comment]],
    feedback: Optional[Sequence[Feedback]],
    stories: Optional[Sequence[Story]],
) -> DashboardStats:
    blogs = list(blogs or [])
    comments = list(comments or [])
    return DashboardStats(
        blog_count=len(blogs),
        comment_count=len(comments),
        average_rating=average_rating(feedback),
        pending_stories=sum(1 for s in (stories or []) if not s.allow_publish),
        recent_blogs=blogs[:RECENT_LIMIT],
        recent_comments=comments[:RECENT_LIMIT],
    )


def _timestamp(value: str) -> float:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()
    except (AttributeError, ValueError):
        return 0.0


def sort_feedback(
    feedback: Iterable[Feedback],
    field: FeedbackSortField = "submitted_at",
    order: SortOrder = "desc",
) -> List[Feedback]:
    reverse = order == "desc"
    if field == "rating":
        return sorted(feedback, key=lambda item: item.rating, reverse=reverse)
    return sorted(feedback, key=lambda item: _timestamp(item.submitted_at), reverse=reverse)


def filter_and_sort_stories(
    stories: Iterable[Story],
    publish_filter: PublishFilter = "all",
    order: SortOrder = "desc",
) -> List[Story]:
    if publish_filter == "approved":
        stories = [s for s in stories if s.allow_publish]
    elif publish_filter == "pending":
        stories = [s for s in stories if not s.allow_publish]
    return sorted(stories, key=lambda s: _timestamp(s.submitted_at), reverse=(order == "desc"))


def generate_slug(title: str) -> str:
    """Lowercase, drop punctuation, join words with dashes."""
    slug = re.sub(r"[^\w\s]", "", title.lower())
    return re.sub(r"\s+", "-", slug.strip())


def validate_blog_form(form: Dict[str, Any]) -> Dict[str, str]:
    """Return field -> message for every invalid field; empty dict means valid."""
    errors: Dict[str, str] = {}
    for field in BLOG_TEXT_FIELDS:
        if not str(form.get(field) or "").strip():
            errors[field] = f"{BLOG_FIELD_LABELS[field]} is required"

    raw_time = form.get("estimated_read_time")
    if raw_time in (None, ""):
        errors["estimated_read_time"] = "Read time is required"
    else:
        try:
            read_time = int(raw_time)
        except (TypeError, ValueError):
            errors["estimated_read_time"] = "Read time must be a number"
        else:
            if read_time < 1:
                errors["estimated_read_time"] = "Read time must be at least 1 minute"
    return errors


def blog_form_payload(form: Dict[str, Any]) -> Dict[str, Any]:
    payload = {field: str(form.get(field) or "").strip() for field in BLOG_TEXT_FIELDS}
    payload["estimated_read_time"] = int(form["estimated_read_time"])
    return payload


def to_frame(items: Iterable[Any], columns: Sequence[str]) -> pd.DataFrame:
    """Table view of dataclass snapshots restricted to ``columns``."""
    rows = [asdict(item) for item in items]
    if not rows:
        return pd.DataFrame(columns=list(columns))
    return pd.DataFrame(rows)[list(columns)]
