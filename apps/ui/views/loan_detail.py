import streamlit as st

from apps.ui.context import mounted
from apps.ui.views.common import go, money, show_notices
from domain.models import LoanStatus
from services.auth.gate import ADMIN_HOME
from services.dashboards.loan_detail import LoanDetailView

ACTIONS = (
    ("Approve Application", LoanStatus.APPROVED),
    ("Reject Application", LoanStatus.REJECTED),
    ("Mark as Under Review", LoanStatus.UNDER_REVIEW),
    ("Mark as Pending", LoanStatus.PENDING),
)

DOCUMENT_LABELS = {
    "identityProof": "Identity Proof",
    "addressProof": "Address Proof",
    "incomeProof": "Income Proof",
    "bankStatements": "Bank Statements",
}


def render(ctx, loan_id: str) -> None:
    view: LoanDetailView = mounted(f"loan:{loan_id}", lambda: LoanDetailView(ctx.client, loan_id))

    if view.forbidden:
        st.toast(view.error, icon="⚠️")
        go(ADMIN_HOME)
    if view.loan is None:
        st.error(view.error or "Loan application not found")
        if st.button("Return to Dashboard"):
            go(ADMIN_HOME)
        return

    loan = view.loan
    st.title(f"Loan #{loan.loanId}")
    st.caption(f"Status: **{loan.status.value}**")
    show_notices(view.notices)

    details, actions = st.columns([3, 1])
    with details:
        st.subheader("Loan Details")
        st.write(f"**Type:** {loan.loanType}")
        st.write(f"**Amount:** {money(loan.loanAmount)}")
        st.write(f"**Tenure:** {loan.term_months} months")
        st.write(f"**Interest Rate:** {loan.interestRate or 'N/A'}%")
        emi = loan.estimated_emi()
        st.write(f"**Estimated EMI:** {money(emi)}/month")
        st.write(f"**Purpose:** {loan.purpose or loan.loanPurpose or 'N/A'}")
        st.write(f"**Applied:** {loan.applicationDate or 'N/A'}")

        st.subheader("Applicant")
        st.write(f"**Name:** {loan.userName or 'N/A'}")
        st.write(f"**Email:** {loan.userEmail or 'N/A'}")
        st.write(f"**Monthly Income:** {money(loan.monthlyIncome)}")
        st.write(f"**Annual Income:** {money(loan.annualIncome)}")
        st.write(f"**Credit Score:** {loan.creditScore or 'N/A'}")
        st.write(f"**Repayment Capacity:** {money(loan.repaymentCapacity)}")
        st.write(f"**Employment:** {loan.employmentType or 'N/A'}")
        st.write(f"**Residence:** {loan.residentialStatus or 'N/A'}")
        st.write(f"**Co-applicant:** {'Yes' if loan.coApplicant else 'No'}")

        st.subheader("Status History")
        if loan.statusHistory:
            for h in loan.statusHistory:
                line = f"- {h.status} - {h.date or ''}"
                st.markdown(line + (f" - {h.comment}" if h.comment else ""))
        else:
            st.write("No status history available")

        st.subheader("Documents")
        docs = view.documents()
        if not docs:
            st.write("No documents uploaded")
        for kind in docs:
            label = DOCUMENT_LABELS.get(kind, kind)
            if st.button(f"Fetch {label}", key=f"doc-{kind}"):
                fetched = view.fetch_document(kind)
                if fetched:
                    content, content_type = fetched
                    st.download_button(f"Download {label}", content, file_name=kind, mime=content_type)

    with actions:
        st.subheader("Actions")
        for label, status in ACTIONS:
            if st.button(label, disabled=not view.can_set(status), use_container_width=True):
                view.update_status(status)
                st.rerun()
        if st.button("Return to Dashboard", use_container_width=True):
            go(ADMIN_HOME)
