from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from domain.models import Role, SessionState, User

ADMIN_HOME = "/Dashboard/AdminDash"
USER_HOME = "/UserProfile/Profile"
LOGIN_PATH = "/login"


class GateAction(str, Enum):
    RENDER = "render"
    LOADING = "loading"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_HOME = "redirect_home"


@dataclass(frozen=True)
class GateDecision:
    action: GateAction
    target: str | None = None
    return_to: str | None = None


def home_for(role: Role) -> str:
    return ADMIN_HOME if role == Role.ADMIN else USER_HOME


def authorize(
    state: SessionState, user: User | None, required_role: Role | None, path: str
) -> GateDecision:
    """
    Never redirects while the session is still loading. A wrong role is sent
    to its own home page, not to login and not to an error page.
    """
    if state == SessionState.UNKNOWN:
        return GateDecision(GateAction.LOADING)
    if state == SessionState.ANONYMOUS or user is None:
        return GateDecision(GateAction.REDIRECT_LOGIN, target=LOGIN_PATH, return_to=path)
    if required_role is not None and user.role != required_role:
        return GateDecision(GateAction.REDIRECT_HOME, target=home_for(user.role))
    return GateDecision(GateAction.RENDER, target=path)
