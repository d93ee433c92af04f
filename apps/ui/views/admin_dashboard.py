import streamlit as st

from apps.ui.context import mounted
from apps.ui.views.common import flash, go, money, show_field_errors, show_notices
from domain.models import LoanStatus
from services.auth.flows import FormRejected, create_admin
from services.dashboards.admin import AdminDashboardView

CONFIRM_KEY = "view:admin:confirm_delete"


def _create_admin_form(ctx) -> None:
    with st.expander("Create Admin"):
        with st.form("create_admin", clear_on_submit=False):
            form = {
                "name": st.text_input("Name"),
                "email": st.text_input("Email"),
                "password": st.text_input("Password", type="password"),
                "confirmPassword": st.text_input("Confirm Password", type="password"),
                "phone": st.text_input("Phone"),
                "address": st.text_area("Address"),
            }
            submitted = st.form_submit_button("Create Admin")
        if submitted:
            try:
                create_admin(ctx.client, form)
            except FormRejected as e:
                st.toast(e.message, icon="⚠️")
                show_field_errors(e.errors)
            else:
                st.toast("Admin created successfully!")


def _loan_row(view: AdminDashboardView, loan) -> None:
    cols = st.columns([2, 2, 2, 2, 2, 4])
    cols[0].write(loan.loanId)
    cols[1].write(loan.userName or "Unknown")
    cols[2].write(loan.loanType)
    cols[3].write(money(loan.loanAmount))
    cols[4].write(loan.status.value)
    with cols[5]:
        b = st.columns(5)
        if b[0].button("View", key=f"view-{loan.loanId}"):
            go(f"/dashboard/admin/loan/{loan.loanId}")
        if loan.status == LoanStatus.PENDING:
            for col, label, status in (
                (b[1], "Approve", LoanStatus.APPROVED),
                (b[2], "Reject", LoanStatus.REJECTED),
                (b[3], "Review", LoanStatus.UNDER_REVIEW),
            ):
                if col.button(label, key=f"{label}-{loan.loanId}", disabled=view.is_updating):
                    view.update_status(loan.loanId, status)
                    st.rerun()
        if b[4].button("Delete", key=f"delete-{loan.loanId}", disabled=view.is_updating):
            st.session_state[CONFIRM_KEY] = loan.loanId
            st.rerun()


def _confirm_delete(view: AdminDashboardView) -> None:
    loan_id = st.session_state.get(CONFIRM_KEY)
    if not loan_id:
        return
    st.warning(
        f"Are you sure you want to delete loan application #{loan_id}? This action cannot be undone."
    )
    yes, no = st.columns(2)
    if yes.button("Yes, delete", type="primary"):
        st.session_state.pop(CONFIRM_KEY, None)
        view.delete_loan(loan_id, confirm=lambda: True)
        st.rerun()
    if no.button("Cancel"):
        st.session_state.pop(CONFIRM_KEY, None)
        view.delete_loan(loan_id, confirm=lambda: False)
        st.rerun()


def render(ctx) -> None:
    view: AdminDashboardView = mounted("admin", lambda: AdminDashboardView(ctx.client))

    head, actions = st.columns([4, 1])
    head.title("Admin Dashboard")
    if actions.button("Logout"):
        ctx.session.logout()
        flash("Logged out successfully")
        st.rerun()

    show_notices(view.notices)
    for message in view.errors.values():
        st.error(message)

    s = view.stats
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric("Total Loans", s.totalLoans)
    c2.metric("Pending", s.pendingLoans)
    c3.metric("Approved", s.approvedLoans)
    c4.metric("Rejected", s.rejectedLoans)
    c5.metric("Total Amount", money(s.totalAmount))

    st.subheader("Loan Applications")
    _confirm_delete(view)
    if not view.loans:
        st.info("No loan applications found.")
    for loan in view.loans:
        _loan_row(view, loan)

    st.subheader("Recent Users")
    _create_admin_form(ctx)
    if view.recent_users:
        st.dataframe(
            [
                {
                    "Name": u.name,
                    "Email": u.email,
                    "Role": u.role.value,
                    "Joined": u.createdAt.date().isoformat() if u.createdAt else "N/A",
                }
                for u in view.recent_users
            ],
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("No recent users.")
