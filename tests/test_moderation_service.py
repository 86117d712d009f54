import pytest

from services import moderation_service as ms
from use_cases.domain_models import Blog, Comment, Feedback, Story


def _feedback(id, rating, submitted_at):
    return Feedback(id=id, blog=1, rating=rating, submitted_at=submitted_at)


def _story(id, allow, submitted_at):
    return Story(id=id, story_text=f"story {id}", allow_publish=allow, submitted_at=submitted_at)


def test_dashboard_stats():
    blogs = [Blog(id=i) for i in range(7)]
    comments = [Comment(id=i, blog=1) for i in range(3)]
    feedback = [_feedback(1, 5, ""), _feedback(2, 2, "")]
    stories = [_story(1, True, ""), _story(2, False, ""), _story(3, False, "")]

    stats = ms.build_dashboard_stats(blogs, comments, feedback, stories)

    assert stats.blog_count == 7
    assert stats.comment_count == 3
    assert stats.average_rating == pytest.approx(3.5)
    assert stats.pending_stories == 2
    assert len(stats.recent_blogs) == ms.RECENT_LIMIT
    assert stats.recent_comments == comments


def test_dashboard_stats_tolerates_missing_data():
    stats = ms.build_dashboard_stats(None, None, None, None)
    assert stats.blog_count == 0
    assert stats.average_rating == 0.0
    assert stats.pending_stories == 0


def test_sort_feedback_by_rating_and_date():
    items = [
        _feedback(1, 3, "2024-01-02T00:00:00Z"),
        _feedback(2, 5, "2024-01-01T00:00:00Z"),
        _feedback(3, 1, "2024-01-03T00:00:00Z"),
    ]
    assert [f.id for f in ms.sort_feedback(items, "rating", "desc")] == [2, 1, 3]
    assert [f.id for f in ms.sort_feedback(items, "rating", "asc")] == [3, 1, 2]
    assert [f.id for f in ms.sort_feedback(items, "submitted_at", "desc")] == [3, 1, 2]
    assert [f.id for f in ms.sort_feedback(items, "submitted_at", "asc")] == [2, 1, 3]


def test_filter_and_sort_stories():
    stories = [
        _story(1, True, "2024-03-01T00:00:00Z"),
        _story(2, False, "2024-03-03T00:00:00Z"),
        _story(3, False, "2024-03-02T00:00:00Z"),
    ]
    assert [s.id for s in ms.filter_and_sort_stories(stories, "all", "desc")] == [2, 3, 1]
    assert [s.id for s in ms.filter_and_sort_stories(stories, "pending", "asc")] == [3, 2]
    assert [s.id for s in ms.filter_and_sort_stories(stories, "approved")] == [1]


def test_unparseable_dates_sort_first_ascending():
    stories = [_story(1, True, "2024-03-01T00:00:00Z"), _story(2, True, "not a date")]
    assert [s.id for s in ms.filter_and_sort_stories(stories, "all", "asc")] == [2, 1]


@pytest.mark.parametrize(
    "title, slug",
    [
        ("Hello World", "hello-world"),
        ("  Django & React: Tips!  ", "django-react-tips"),
        ("Multiple   spaces", "multiple-spaces"),
    ],
)
def test_generate_slug(title, slug):
    assert ms.generate_slug(title) == slug


def _form(**overrides):
    form = {
        "title": "Title",
        "slug": "title",
        "subheading": "Sub",
        "tldr": "Short",
        "content": "Body",
        "image": "https://img.test/a.png",
        "estimated_read_time": 3,
    }
    form.update(overrides)
    return form


def test_validate_blog_form_accepts_complete_form():
    assert ms.validate_blog_form(_form()) == {}


def test_validate_blog_form_reports_each_field():
    errors = ms.validate_blog_form(_form(title=" ", image="", estimated_read_time=""))
    assert errors == {
        "title": "Title is required",
        "image": "Image URL is required",
        "estimated_read_time": "Read time is required",
    }


@pytest.mark.parametrize(
    "value, message",
    [("abc", "Read time must be a number"), (0, "Read time must be at least 1 minute")],
)
def test_validate_blog_form_read_time(value, message):
    assert ms.validate_blog_form(_form(estimated_read_time=value))["estimated_read_time"] == message


def test_blog_form_payload_strips_and_casts():
    payload = ms.blog_form_payload(_form(title="  Padded  ", estimated_read_time="7"))
    assert payload["title"] == "Padded"
    assert payload["estimated_read_time"] == 7
    assert set(payload) == set(ms.BLOG_TEXT_FIELDS) | {"estimated_read_time"}


def test_to_frame_selects_columns():
    frame = ms.to_frame([Blog(id=1, title="A"), Blog(id=2, title="B")], ["id", "title"])
    assert list(frame.columns) == ["id", "title"]
    assert frame["title"].tolist() == ["A", "B"]


def test_to_frame_empty():
    frame = ms.to_frame([], ["id", "title"])
    assert frame.empty
    assert list(frame.columns) == ["id", "title"]
