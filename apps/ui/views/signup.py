import streamlit as st

from apps.ui.views.common import flash, go
from services.auth.flows import FormRejected, perform_signup


def render(ctx) -> None:
    st.title("Create your account")
    st.caption("Start your journey with our online loan service")

    with st.form("signup"):
        name = st.text_input("Full name")
        email = st.text_input("Email address")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign up")

    if submitted:
        try:
            with st.spinner("Creating account..."):
                target = perform_signup(ctx.client, name, email, password)
        except FormRejected as e:
            st.toast(e.message, icon="⚠️")
        else:
            flash("Account created successfully!")
            go(target)

    if st.button("Already have an account? Sign in"):
        go("/login")
