"""Runtime configuration read from Streamlit secrets with environment fallback."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import streamlit as st

log = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://stocai-blog-backend.onrender.com"
DEFAULT_TOKEN_PATH = "/api/token/"
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_STALE_TIME_SECONDS = 300.0
AUTH_MODES = ("csrf", "bearer")


def get_secret(key):
    try:
        return st.secrets.get(key)
    except FileNotFoundError:
        return None


def _read(key, default=None):
    value = get_secret(key) or os.getenv(key)
    if value is None or value == "":
        return default
    return value


def _read_float(key, default: float) -> float:
    raw = _read(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        log.warning(f"Invalid value for {key}: {raw!r}, using {default}")
        return default


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_BASE_URL
    auth_mode: str = "csrf"
    token_path: str = DEFAULT_TOKEN_PATH
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    stale_time_seconds: float = DEFAULT_STALE_TIME_SECONDS
    session_file: Optional[str] = None


def load_settings() -> Settings:
    auth_mode = str(_read("AUTH_MODE", "csrf")).strip().lower()
    if auth_mode not in AUTH_MODES:
        raise ValueError(f"AUTH_MODE must be one of {AUTH_MODES}, got {auth_mode!r}")

    return Settings(
        api_base_url=str(_read("API_BASE_URL", DEFAULT_API_BASE_URL)).rstrip("/"),
        auth_mode=auth_mode,
        token_path=str(_read("TOKEN_PATH", DEFAULT_TOKEN_PATH)),
        request_timeout=_read_float("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        stale_time_seconds=_read_float("STALE_TIME_SECONDS", DEFAULT_STALE_TIME_SECONDS),
        session_file=_read("SESSION_FILE"),
    )
