import streamlit as st

from apps.ui.context import mounted
from apps.ui.views.common import go, money
from domain.models import LOAN_TYPES
from services.dashboards.profile import ProfileView


def render(ctx) -> None:
    view: ProfileView = mounted("profile", lambda: ProfileView(ctx.client))
    user = ctx.session.user

    head, actions = st.columns([4, 1])
    head.title(f"Welcome, {user.name or user.email}")
    if actions.button("Logout"):
        ctx.session.logout()
        st.rerun()

    s = view.stats
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Applications", s.total_loans)
    c2.metric("Approved", s.approved_loans)
    c3.metric("Pending", s.pending_loans)
    c4.metric("Approved Amount", money(s.approved_amount))

    with st.expander("Personal Information"):
        st.write(f"**Name:** {user.name}")
        st.write(f"**Email:** {user.email}")
        st.write(f"**Phone:** {user.phone or 'Not provided'}")
        st.write(f"**Address:** {user.address or 'Not provided'}")

    st.subheader("Apply for a Loan")
    cols = st.columns(3)
    for i, loan_type in enumerate(LOAN_TYPES):
        with cols[i % 3]:
            st.markdown(f"**{loan_type.name}**  \n{loan_type.interest_rate}% · up to {money(loan_type.max_amount)}")
            if st.button("Apply", key=f"apply-{loan_type.id}"):
                go(f"/apply-loan/{loan_type.id}")

    left, right = st.columns([4, 1])
    left.subheader("My Loan Applications")
    if right.button("Refresh Loan Status"):
        with st.spinner("Refreshing..."):
            view.refresh()

    if view.error:
        st.error(view.error)
    if not view.loans:
        st.info("You have not applied for any loans yet.")
        return

    st.dataframe(
        [
            {
                "Loan ID": ln.loanId,
                "Type": ln.loanType,
                "Amount": money(ln.loanAmount),
                "Tenure": f"{ln.term_months} months",
                "Interest": f"{ln.interestRate or 0}%",
                "Status": ln.status.value,
                "Applied": ln.applicationDate.date().isoformat() if ln.applicationDate else "N/A",
            }
            for ln in view.loans
        ],
        use_container_width=True,
        hide_index=True,
    )
