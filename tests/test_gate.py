import pytest

from domain.models import Role, SessionState, User
from services.auth.gate import ADMIN_HOME, USER_HOME, GateAction, authorize, home_for

ROLES = [None, Role.USER, Role.ADMIN]


@pytest.mark.parametrize("required", ROLES)
def test_unknown_always_shows_placeholder(required):
    user = User(id="u", role=Role.ADMIN)
    decision = authorize(SessionState.UNKNOWN, user, required, "/Dashboard/AdminDash")
    assert decision.action == GateAction.LOADING


@pytest.mark.parametrize("required", ROLES)
def test_anonymous_goes_to_login_and_remembers_path(required):
    decision = authorize(SessionState.ANONYMOUS, None, required, "/apply-loan/2")
    assert decision.action == GateAction.REDIRECT_LOGIN
    assert decision.target == "/login"
    assert decision.return_to == "/apply-loan/2"


@pytest.mark.parametrize(
    "role, required, home",
    [(Role.USER, Role.ADMIN, USER_HOME), (Role.ADMIN, Role.USER, ADMIN_HOME)],
)
def test_role_mismatch_goes_home_not_login(role, required, home):
    decision = authorize(SessionState.AUTHENTICATED, User(id="u", role=role), required, "/x")
    assert decision.action == GateAction.REDIRECT_HOME
    assert decision.target == home


@pytest.mark.parametrize("role", [Role.USER, Role.ADMIN])
def test_matching_or_open_role_renders(role):
    user = User(id="u", role=role)
    assert authorize(SessionState.AUTHENTICATED, user, role, "/p").action == GateAction.RENDER
    assert authorize(SessionState.AUTHENTICATED, user, None, "/p").action == GateAction.RENDER


def test_home_for():
    assert home_for(Role.ADMIN) == "/Dashboard/AdminDash"
    assert home_for(Role.USER) == "/UserProfile/Profile"
