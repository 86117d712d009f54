"""Application layer contracts for orchestrating high-level flows."""

from .domain_models import Blog, Comment, Feedback, Story
from .route_guard import LOGIN_PATH, GuardDecision, GuardStatus, guard_route
from .session_models import AuthSnapshot, AuthState, CurrentUser

__all__ = [
    "AuthSnapshot",
    "AuthState",
    "Blog",
    "Comment",
    "CurrentUser",
    "Feedback",
    "GuardDecision",
    "GuardStatus",
    "LOGIN_PATH",
    "Story",
    "guard_route",
]
