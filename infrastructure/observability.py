"""
Centralized Observability Infrastructure.
Structured logging setup and Sentry SDK initialization, governed by
environment variables (LOG_LEVEL, SENTRY_DSN, SENTRY_ENV).
"""

import os
import logging
import re
from typing import Any, Dict

log = logging.getLogger(__name__)

SENSITIVE_KEYS = {
    "authorization", "cookie", "set-cookie", "x-csrftoken",
    "csrfmiddlewaretoken", "password", "access", "refresh", "credential",
    "sessionid", "csrftoken", "cookies",
}

SENSITIVE_PATTERNS = [
    re.compile(r"(Bearer\s+)[A-Za-z0-9_\-\.=]+"),
    re.compile(r"(csrfmiddlewaretoken=)[^&\s\"]+"),
    re.compile(r"()([A-Za-z0-9_\-]{30,})"),  # long token-looking strings
]


def _mask_string(val: str) -> str:
    for pattern in SENSITIVE_PATTERNS:
        val = pattern.sub(lambda m: f"{m.group(1)}[REDACTED]", val)
    return val


def _recursive_scrub(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {
            k: "[REDACTED]" if str(k).lower() in SENSITIVE_KEYS else _recursive_scrub(v)
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [_recursive_scrub(i) for i in obj]
    if isinstance(obj, str):
        return _mask_string(obj)
    return obj


def scrub_event(event: Dict[str, Any], hint: Dict[str, Any]) -> Dict[str, Any]:
    """
    Sentry before_send hook. Removes session credentials, CSRF tokens and
    passwords from request data and stack frame locals.
    """
    if "request" in event:
        event["request"] = _recursive_scrub(event["request"])

    for exc in event.get("exception", {}).get("values", []):
        for frame in exc.get("stacktrace", {}).get("frames", []):
            if "vars" in frame:
                frame["vars"] = _recursive_scrub(frame["vars"])

    if "breadcrumbs" in event:
        event["breadcrumbs"] = _recursive_scrub(event["breadcrumbs"])

    return event


def setup_observability() -> None:
    """
    Initializes global logging and Sentry (if DSN is present).
    Should be called once at application startup.
    """
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    sentry_dsn = os.getenv("SENTRY_DSN")
    if sentry_dsn:
        import sentry_sdk

        sentry_env = os.getenv("SENTRY_ENV", "development")
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=sentry_env,
            traces_sample_rate=1.0,
            send_default_pii=False,
            before_send=scrub_event,
        )
        log.info(f"Sentry SDK initialized (env: {sentry_env})")
    else:
        log.info("SENTRY_DSN not provided. Running without Sentry.")

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
