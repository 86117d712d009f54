from use_cases.domain_models import Blog, Feedback
from use_cases.session_models import AuthSnapshot, AuthState, CurrentUser


def test_snapshot_is_logged_in() -> None:
    assert AuthSnapshot(AuthState.LOGGED_IN, CurrentUser("admin"), False).is_logged_in is True
    assert AuthSnapshot(AuthState.LOGGED_OUT, None, False).is_logged_in is False
    assert AuthSnapshot(AuthState.INITIALIZING, None, True).is_logged_in is False


def test_domain_models_ignore_unknown_fields() -> None:
    feedback = Feedback.from_dict({"id": 1, "blog": 2, "rating": 4, "email": "a@b.c", "extra": "x"})
    assert feedback.rating == 4
    assert not hasattr(feedback, "extra")


def test_blog_payload_excludes_server_fields() -> None:
    blog = Blog(id=3, title="T", slug="t", estimated_read_time=2, created_at="2024-01-01")
    payload = blog.to_payload()
    assert "id" not in payload
    assert "created_at" not in payload
    assert payload["title"] == "T"
    assert payload["estimated_read_time"] == 2
