import streamlit as st

from apps.ui.context import current_route, get_context, navigate, unmount_all
from apps.ui.routes import match_route
from apps.ui.views import admin_dashboard, apply_loan, loan_detail, login, profile, signup
from apps.ui.views.common import show_flash
from core.logging import configure_logging, logger
from domain.models import SessionState
from services.auth.gate import GateAction, authorize

st.set_page_config(page_title="Online Loan Service", layout="wide")

if "logging_configured" not in st.session_state:
    configure_logging()
    st.session_state["logging_configured"] = True

VIEWS = {
    "login": login.render,
    "signup": signup.render,
    "admin_dashboard": admin_dashboard.render,
    "loan_detail": loan_detail.render,
    "profile": profile.render,
    "apply_loan": apply_loan.render,
}

ctx = get_context()
show_flash()
if ctx.session.loading:
    with st.spinner("Loading..."):
        ctx.session.init()

path = current_route()
if st.session_state.get("mounted_path") != path:
    unmount_all()
    st.session_state["mounted_path"] = path

matched = match_route(path)
if matched is None:
    logger.info("unknown route %s; sending to login", path)
    navigate("/login")
    st.rerun()

route, params = matched
if route.redirect_to:
    navigate(route.redirect_to)
    st.rerun()

if route.protected:
    decision = authorize(ctx.session.state, ctx.session.user, route.required_role, path)
    if decision.action == GateAction.LOADING:
        st.info("Loading...")
        st.stop()
    if decision.action in (GateAction.REDIRECT_LOGIN, GateAction.REDIRECT_HOME):
        if decision.return_to:
            st.session_state["return_to"] = decision.return_to
        navigate(decision.target)
        st.rerun()

VIEWS[route.name](ctx, **params)

# a 401 during the page's requests has already cleared the session
if route.protected and ctx.session.state != SessionState.AUTHENTICATED:
    st.rerun()
