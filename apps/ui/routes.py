from __future__ import annotations

import re
from dataclasses import dataclass

from domain.models import Role
from services.auth.gate import ADMIN_HOME, LOGIN_PATH, USER_HOME


@dataclass(frozen=True)
class Route:
    name: str
    pattern: re.Pattern
    protected: bool = True
    required_role: Role | None = None
    redirect_to: str | None = None


ROUTES: list[Route] = [
    Route("root", re.compile(r"/"), protected=False, redirect_to=LOGIN_PATH),
    Route("login", re.compile(r"/login"), protected=False),
    Route("signup", re.compile(r"/signup"), protected=False),
    Route("admin_dashboard", re.compile(re.escape(ADMIN_HOME)), required_role=Role.ADMIN),
    Route("loan_detail", re.compile(r"/dashboard/admin/loan/(?P<loan_id>[^/]+)"), required_role=Role.ADMIN),
    Route("profile", re.compile(re.escape(USER_HOME)), required_role=Role.USER),
    Route("apply_loan", re.compile(r"/apply-loan/(?P<loan_type_id>[^/]+)")),
]


def match_route(path: str) -> tuple[Route, dict[str, str]] | None:
    path = "/" + (path or "").strip("/") if path not in ("", "/") else "/"
    for route in ROUTES:
        m = route.pattern.fullmatch(path)
        if m:
            return route, m.groupdict()
    return None
