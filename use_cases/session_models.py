"""Session DTOs shared across application layers."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AuthState(str, Enum):
    INITIALIZING = "INITIALIZING"
    LOGGED_OUT = "LOGGED_OUT"
    LOGGED_IN = "LOGGED_IN"


@dataclass(frozen=True)
class CurrentUser:
    username: str


@dataclass(frozen=True)
class AuthSnapshot:
    state: AuthState
    user: Optional[CurrentUser]
    is_loading: bool

    @property
    def is_logged_in(self) -> bool:
        return self.state == AuthState.LOGGED_IN
