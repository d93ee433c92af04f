import streamlit as st

from apps.ui.views.common import flash, go, show_field_errors
from services.auth.flows import FormRejected, perform_login


def render(ctx) -> None:
    st.title("Sign in")
    st.caption("Access your online loan dashboard")

    with st.form("login"):
        email = st.text_input("Email address", placeholder="Enter your email")
        password = st.text_input("Password", type="password", placeholder="Enter your password")
        submitted = st.form_submit_button("Sign in")

    if submitted:
        try:
            with st.spinner("Logging in..."):
                home = perform_login(ctx.session, email, password)
        except FormRejected as e:
            st.toast(e.message, icon="⚠️")
            show_field_errors(e.errors)
        else:
            flash("Login successful!")
            st.session_state.pop("return_to", None)
            go(home)

    if st.button("Don't have an account? Sign up"):
        go("/signup")
