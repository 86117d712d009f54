import logging
from unittest.mock import patch

from infrastructure import observability


def test_scrub_event_masks_credentials():
    event = {
        "request": {
            "headers": {"Authorization": "Bearer abc.def.ghi", "X-CSRFToken": "tok", "Accept": "application/json"},
            "data": "csrfmiddlewaretoken=secret123&username=admin&next=/admin/",
        },
        "exception": {
            "values": [{"stacktrace": {"frames": [{"vars": {"password": "hunter2", "username": "admin"}}]}}]
        },
        "breadcrumbs": [{"message": "sent Bearer xyz123"}],
    }

    scrubbed = observability.scrub_event(event, {})

    headers = scrubbed["request"]["headers"]
    assert headers["Authorization"] == "[REDACTED]"
    assert headers["X-CSRFToken"] == "[REDACTED]"
    assert headers["Accept"] == "application/json"
    assert "secret123" not in scrubbed["request"]["data"]
    assert "username=admin" in scrubbed["request"]["data"]
    frame_vars = scrubbed["exception"]["values"][0]["stacktrace"]["frames"][0]["vars"]
    assert frame_vars == {"password": "[REDACTED]", "username": "admin"}
    assert scrubbed["breadcrumbs"][0]["message"] == "sent Bearer [REDACTED]"


def test_long_token_strings_are_masked():
    token = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9abcdef"
    assert observability._mask_string(f"token {token}") == "token [REDACTED]"


@patch("infrastructure.observability.logging.basicConfig")
def test_setup_without_dsn_skips_sentry(mock_basic, monkeypatch):
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "debug")

    with patch("sentry_sdk.init") as mock_init:
        observability.setup_observability()

    mock_init.assert_not_called()
    assert mock_basic.call_args.kwargs["level"] == logging.DEBUG


@patch("infrastructure.observability.logging.basicConfig")
def test_setup_with_dsn_registers_scrubber(_mock_basic, monkeypatch):
    monkeypatch.setenv("SENTRY_DSN", "https://key@sentry.test/1")
    monkeypatch.setenv("SENTRY_ENV", "staging")

    with patch("sentry_sdk.init") as mock_init:
        observability.setup_observability()

    kwargs = mock_init.call_args.kwargs
    assert kwargs["environment"] == "staging"
    assert kwargs["before_send"] is observability.scrub_event
    assert kwargs["send_default_pii"] is False
