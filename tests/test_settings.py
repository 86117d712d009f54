from unittest.mock import patch

import pytest

import settings


@patch("settings.get_secret", return_value=None)
def test_defaults(_mock_secret, monkeypatch):
    for key in ("API_BASE_URL", "AUTH_MODE", "TOKEN_PATH", "REQUEST_TIMEOUT", "STALE_TIME_SECONDS", "SESSION_FILE"):
        monkeypatch.delenv(key, raising=False)

    cfg = settings.load_settings()

    assert cfg.api_base_url == settings.DEFAULT_API_BASE_URL
    assert cfg.auth_mode == "csrf"
    assert cfg.token_path == "/api/token/"
    assert cfg.request_timeout == 10.0
    assert cfg.stale_time_seconds == 300.0
    assert cfg.session_file is None


@patch("settings.get_secret", return_value=None)
def test_env_overrides(_mock_secret, monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "http://localhost:8000/")
    monkeypatch.setenv("AUTH_MODE", "Bearer")
    monkeypatch.setenv("STALE_TIME_SECONDS", "30")
    monkeypatch.setenv("REQUEST_TIMEOUT", "fast")

    cfg = settings.load_settings()

    assert cfg.api_base_url == "http://localhost:8000"
    assert cfg.auth_mode == "bearer"
    assert cfg.stale_time_seconds == 30.0
    assert cfg.request_timeout == settings.DEFAULT_REQUEST_TIMEOUT


def test_secrets_win_over_env(monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "http://env.test")
    with patch("settings.get_secret", side_effect=lambda key: "http://secret.test" if key == "API_BASE_URL" else None):
        assert settings.load_settings().api_base_url == "http://secret.test"


@patch("settings.get_secret", return_value=None)
def test_unknown_auth_mode_rejected(_mock_secret, monkeypatch):
    monkeypatch.setenv("AUTH_MODE", "oauth")
    with pytest.raises(ValueError, match="AUTH_MODE"):
        settings.load_settings()
