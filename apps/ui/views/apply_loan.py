from __future__ import annotations

from datetime import date

import streamlit as st

from apps.ui.views.common import flash, go
from domain.models import loan_type_by_id
from services.api.errors import ApiError, describe_error
from services.auth.gate import home_for
from services.forms.loan_application import (
    STEP_TITLES,
    TOTAL_STEPS,
    LoanApplicationForm,
    StepValidationError,
)

FORM_KEY = "view:apply_form"
WIDGET_PREFIX = "view:apply:"


def _form(ctx, loan_type_id: str) -> LoanApplicationForm:
    form = st.session_state.get(FORM_KEY)
    if form is None:
        current = ctx.session.session
        user_id = current.user.id if current else None
        form = LoanApplicationForm(loan_type_by_id(loan_type_id), user_id=user_id)
        st.session_state[FORM_KEY] = form
    return form


def _text(form: LoanApplicationForm, path: str, label: str, **kw) -> None:
    key = WIDGET_PREFIX + path
    if key not in st.session_state:
        section, field = path.split(".")
        st.session_state[key] = getattr(form.draft.section(section), field)
    st.text_input(label, key=key, **kw)
    form.update(path, st.session_state[key])


def _area(form: LoanApplicationForm, path: str, label: str, **kw) -> None:
    key = WIDGET_PREFIX + path
    if key not in st.session_state:
        section, field = path.split(".")
        st.session_state[key] = getattr(form.draft.section(section), field)
    st.text_area(label, key=key, **kw)
    form.update(path, st.session_state[key])


def _select(form: LoanApplicationForm, path: str, label: str, options: list[str]) -> None:
    key = WIDGET_PREFIX + path
    if key not in st.session_state:
        section, field = path.split(".")
        st.session_state[key] = getattr(form.draft.section(section), field)
    st.selectbox(label, options, key=key)
    form.update(path, st.session_state[key])


def _date(form: LoanApplicationForm, path: str, label: str) -> None:
    section, field = path.split(".")
    raw = getattr(form.draft.section(section), field)
    picked = st.date_input(
        label,
        value=date.fromisoformat(raw) if raw else None,
        min_value=date(1900, 1, 1),
        max_value=date.today(),
        key=WIDGET_PREFIX + path,
    )
    form.update(path, picked)


def _step_1(form: LoanApplicationForm) -> None:
    st.text_input("Loan Type", value=form.draft.terms.loan_type, disabled=True)
    _text(form, "terms.amount", "Loan Amount (₹)*", placeholder="Enter amount between 1,000 and 10,000,000")
    _text(form, "terms.term", "Loan Term (months)*", placeholder="Enter term between 6 and 600 months")
    _area(form, "terms.purpose", "Purpose of Loan*",
          placeholder="Please describe the purpose of this loan in at least 10 characters")
    c1, c2 = st.columns(2)
    c1.metric("Interest Rate (%)", form.draft.terms.interest_rate)
    c2.metric("Processing Fee", form.loan_type.processing_fee)


def _step_2(form: LoanApplicationForm) -> None:
    _text(form, "financials.monthly_income", "Monthly Income (₹)*", placeholder="min 10,000")
    _text(form, "financials.annual_income", "Annual Income (₹)*", placeholder="min 120,000")
    _text(form, "financials.other_income", "Other Income (₹)")
    _text(form, "financials.total_monthly_expenses", "Total Monthly Expenses (₹)")
    _select(form, "financials.existing_loans", "Existing Loans", ["No", "Yes"])
    if form.draft.financials.existing_loans == "Yes":
        _text(form, "financials.existing_emi", "Existing EMI (₹)")
    _text(form, "financials.credit_score", "Credit Score*", placeholder="300 - 900")


def _step_3(form: LoanApplicationForm) -> None:
    _text(form, "applicant.first_name", "First Name*")
    _text(form, "applicant.middle_name", "Middle Name")
    _text(form, "applicant.last_name", "Last Name*")
    _date(form, "applicant.date_of_birth", "Date of Birth*")
    _select(form, "applicant.gender", "Gender", ["Male", "Female", "Other"])
    _select(form, "applicant.marital_status", "Marital Status", ["Single", "Married", "Divorced", "Widowed"])
    _text(form, "applicant.phone", "Phone Number*", placeholder="10-digit mobile number")
    _text(form, "applicant.email", "Email Address*")


def _step_4(form: LoanApplicationForm) -> None:
    _select(form, "employment.employment_type", "Employment Type",
            ["Salaried", "Self-employed", "Business", "Government", "Retired", "Student"])
    _text(form, "employment.employer_name", "Employer Name*")
    _text(form, "employment.position", "Position/Designation*")
    _text(form, "employment.years_at_current_employer", "Years at Current Employer*")
    _text(form, "employment.monthly_salary", "Monthly Salary (₹)")
    _select(form, "employment.sector", "Sector",
            ["Information Technology", "Banking/Finance", "Healthcare", "Education",
             "Manufacturing", "Retail", "Government", "Other"])


def _step_5(form: LoanApplicationForm) -> None:
    _select(form, "residence.residential_status", "Residential Status",
            ["Owned", "Rented", "Parental", "Company Provided"])
    _text(form, "residence.address_line1", "Address Line 1*")
    _text(form, "residence.address_line2", "Address Line 2")
    _text(form, "residence.city", "City*")
    _text(form, "residence.state", "State*")
    _text(form, "residence.postal_code", "Postal Code*", placeholder="6 digits")
    st.text_input("Country", value=form.draft.residence.country, disabled=True)
    _text(form, "residence.years_at_current_address", "Years at Current Address*")


def _step_6(form: LoanApplicationForm) -> None:
    _text(form, "bank.account_number", "Account Number*", placeholder="9-18 digits")
    _select(form, "bank.account_type", "Account Type", ["Savings", "Current", "Salary"])
    _text(form, "bank.bank_name", "Bank Name*")
    _text(form, "bank.ifsc_code", "IFSC Code*", placeholder="e.g., HDFC0001234")
    _text(form, "bank.account_holder_name", "Account Holder Name*")

    has_co = st.radio("Add a co-applicant?", ["No", "Yes"], index=1 if form.draft.bank.co_applicant else 0,
                      horizontal=True, key=WIDGET_PREFIX + "bank.co_applicant") == "Yes"
    if has_co != form.draft.bank.co_applicant:
        form.set_co_applicant(has_co)
    if has_co:
        _text(form, "bank.co_applicant_name", "Co-applicant Full Name")
        _select(form, "bank.co_applicant_relationship", "Relationship",
                ["Spouse", "Parent", "Sibling", "Child", "Other"])
        _text(form, "bank.co_applicant_monthly_income", "Co-applicant Monthly Income (₹)")


STEPS = {1: _step_1, 2: _step_2, 3: _step_3, 4: _step_4, 5: _step_5, 6: _step_6}


def render(ctx, loan_type_id: str) -> None:
    form = _form(ctx, loan_type_id)
    st.title(f"Apply for {form.loan_type.name}")
    st.caption(form.loan_type.description)
    st.progress(form.current_step / TOTAL_STEPS, text=f"Step {form.current_step} of {TOTAL_STEPS}")
    st.subheader(f"Step {form.current_step}: {STEP_TITLES[form.current_step]}")

    STEPS[form.current_step](form)

    back, forward = st.columns(2)
    if form.current_step > 1 and back.button("Previous"):
        form.retreat()
        st.rerun()

    if form.current_step < TOTAL_STEPS:
        if forward.button("Next", type="primary"):
            result = form.advance()
            if not result.valid:
                st.toast(result.message, icon="⚠️")
            else:
                st.rerun()
        return

    accepted = st.checkbox(
        "I agree to the terms and conditions and confirm that the information provided is accurate"
    )
    if forward.button("Submit Application", type="primary", disabled=form.is_submitting or not accepted):
        try:
            with st.spinner("Submitting..."):
                form.submit(ctx.client)
        except StepValidationError as e:
            st.toast(e.result.message, icon="⚠️")
        except ApiError as e:
            st.toast(describe_error(e, "Failed to submit loan application"), icon="⚠️")
        else:
            st.session_state.pop(FORM_KEY, None)
            flash("Loan application submitted successfully!")
            go(home_for(ctx.session.user.role))
