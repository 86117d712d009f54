"""Decides whether a protected view may render for the current auth snapshot."""

from dataclasses import dataclass
from typing import Literal, Optional

from use_cases.session_models import AuthSnapshot

LOGIN_PATH = "/login"

GuardStatus = Literal["WAIT", "REDIRECT", "RENDER"]


@dataclass(frozen=True)
class GuardDecision:
    status: GuardStatus
    redirect_to: Optional[str] = None
    from_location: Optional[str] = None


def guard_route(snapshot: AuthSnapshot, location: str) -> GuardDecision:
    # No decision while the initial check is still running, so there is no flash redirect.
    if snapshot.is_loading:
        return GuardDecision(status="WAIT")
    if not snapshot.is_logged_in:
        return GuardDecision(status="REDIRECT", redirect_to=LOGIN_PATH, from_location=location)
    return GuardDecision(status="RENDER")
