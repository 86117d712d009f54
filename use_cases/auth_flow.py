"""Authentication flow orchestration (application layer)."""

from dataclasses import dataclass
from typing import Literal, Optional

from use_cases.route_guard import LOGIN_PATH, GuardDecision, guard_route
from utils import session_manager

AuthFlowStatus = Literal["CONTINUE", "WAIT", "LOGIN", "STOP"]


@dataclass(frozen=True)
class AuthFlowResult:
    """Result contract for auth flow orchestration."""

    status: AuthFlowStatus
    reason: str
    username: Optional[str] = None
    redirect_to: Optional[str] = None


def ensure_authenticated_session() -> AuthFlowResult:
    """Run the route guard for the current route and return a control-flow status."""
    gate = session_manager.st.session_state.get("auth_gate")
    if gate is None:
        return AuthFlowResult(status="STOP", reason="not_bootstrapped")

    route = session_manager.current_route()
    snapshot = gate.snapshot()

    if route == LOGIN_PATH:
        if snapshot.is_logged_in:
            return AuthFlowResult(
                status="STOP",
                reason="already_authenticated",
                username=snapshot.user.username if snapshot.user else None,
                redirect_to=session_manager.pop_redirect_target(),
            )
        return AuthFlowResult(status="LOGIN", reason="login_view")

    decision: GuardDecision = guard_route(snapshot, route)
    if decision.status == "WAIT":
        return AuthFlowResult(status="WAIT", reason="auth_loading")
    if decision.status == "REDIRECT":
        session_manager.st.session_state.redirect_from = decision.from_location
        return AuthFlowResult(status="STOP", reason="auth_required", redirect_to=decision.redirect_to)

    return AuthFlowResult(
        status="CONTINUE",
        reason="authenticated",
        username=snapshot.user.username if snapshot.user else None,
    )
