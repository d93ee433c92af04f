from datetime import date, datetime, timezone

import pytest

from domain.models import loan_type_by_id
from services.forms.loan_application import LoanApplicationForm, StepValidationError

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def test_advance_blocked_below_minimum_amount():
    form = LoanApplicationForm()
    form.update("terms.amount", "500")
    form.update("terms.purpose", "Wedding expenses")

    result = form.advance()

    assert not result.valid
    assert result.message == "Loan amount must be between 1,000 and 10,000,000"
    assert form.current_step == 1


def test_advance_through_all_steps(valid_form):
    for expected in range(2, 7):
        assert valid_form.advance().valid
        assert valid_form.current_step == expected
    # terminal step stays put
    assert valid_form.advance().valid
    assert valid_form.current_step == 6


def test_retreat(valid_form):
    assert valid_form.retreat() is False
    valid_form.advance()
    valid_form.update("financials.credit_score", "")
    assert valid_form.retreat() is True
    assert valid_form.current_step == 1


def test_retreat_then_advance_is_idempotent(valid_form):
    valid_form.advance()
    valid_form.advance()
    before = valid_form.draft.model_dump()

    valid_form.retreat()
    valid_form.advance()

    assert valid_form.current_step == 3
    assert valid_form.draft.model_dump() == before


def test_update_rejects_unknown_paths(valid_form):
    with pytest.raises(KeyError):
        valid_form.update("terms.nope", "1")
    with pytest.raises(KeyError):
        valid_form.update("nowhere.amount", "1")
    with pytest.raises(KeyError):
        valid_form.update("amount", "1")


def test_update_stores_dates_as_iso(valid_form):
    valid_form.update("applicant.date_of_birth", date(1988, 2, 29))
    assert valid_form.draft.applicant.date_of_birth == "1988-02-29"


def test_submission_payload(valid_form):
    valid_form.current_step = 6

    payload = valid_form.build_submission(now=NOW)

    assert payload["loanAmount"] == 1000.0
    assert payload["loanTerm"] == 6 and payload["loanTenure"] == 6
    assert payload["purpose"] == "Home renovation"
    assert payload["creditScore"] == 300
    assert payload["repaymentCapacity"] == 1000
    assert payload["annualIncome"] == 120000
    assert payload["applicantDetails"]["nationality"] == "Indian"
    assert payload["applicantDetails"]["dateOfBirth"] == "1990-05-01"
    assert payload["residentialAddress"]["country"] == "India"
    assert payload["employmentDetails"]["employmentStatus"] == "Permanent"
    assert payload["coApplicantDetails"] == {"fullName": "", "relationship": "Spouse", "monthlyIncome": 0.0}
    assert payload["identityInformation"]["idType"] == "Aadhar Card"
    assert payload["previousAddresses"] == [] and payload["statusHistory"] == []
    assert payload["userId"] == "U1"
    assert payload["status"] == "Pending"
    assert payload["applicationDate"] == "2026-03-01T09:30:00.000Z"


def test_submission_clamps_income_and_capacity(valid_form):
    valid_form.update("financials.annual_income", "999999999")
    valid_form.update("financials.repayment_capacity", "250")
    valid_form.update("employment.years_at_current_employer", "-3")

    payload = valid_form.build_submission(now=NOW)

    assert payload["annualIncome"] == 120_000_000
    assert payload["repaymentCapacity"] == 1000
    assert payload["employmentDetails"]["yearsAtCurrentEmployer"] == 0


def test_submission_uses_loan_type_and_co_applicant(valid_form):
    form = LoanApplicationForm(loan_type_by_id("2"), user_id="U2")
    form.draft = valid_form.draft
    form.draft.update_terms(loan_type="Home Loan", interest_rate=8.5, processing_fee=0.5)
    form.set_co_applicant(True)
    form.update("bank.co_applicant_relationship", "Parent")
    form.update("bank.co_applicant_monthly_income", "25000")

    payload = form.build_submission(now=NOW)

    assert payload["loanType"] == "Home Loan"
    assert payload["interestRate"] == 8.5
    assert payload["processingFee"] == 0.5
    assert payload["coApplicant"] is True
    assert payload["coApplicantDetails"]["relationship"] == "Parent"
    assert payload["coApplicantDetails"]["monthlyIncome"] == 25000.0

    form.set_co_applicant(False)
    assert form.build_submission(now=NOW)["coApplicantDetails"]["relationship"] == "Spouse"


def test_unknown_loan_type_falls_back_to_personal():
    assert loan_type_by_id("99").name == "Personal Loan"
    assert loan_type_by_id("abc").name == "Personal Loan"
    assert loan_type_by_id(4).processing_fee_pct == 1.0


def test_submission_blocked_by_invalid_current_step(valid_form):
    valid_form.current_step = 6
    valid_form.update("bank.bank_name", "")

    with pytest.raises(StepValidationError) as exc:
        valid_form.build_submission()

    assert exc.value.step == 6
    assert str(exc.value) == "Bank name is required"


def test_submission_blocked_by_earlier_step_edited_later(valid_form):
    valid_form.current_step = 6
    valid_form.update("terms.amount", "")

    with pytest.raises(StepValidationError) as exc:
        valid_form.build_submission()

    assert exc.value.step == 1


@pytest.mark.parametrize("value", ["inf", "Infinity", "1e400"])
def test_submission_blocked_by_non_finite_years(valid_form, value):
    valid_form.current_step = 6
    valid_form.update("employment.years_at_current_employer", value)

    with pytest.raises(StepValidationError) as exc:
        valid_form.build_submission()

    assert exc.value.step == 4


def test_submit_posts_payload(valid_form, client, backend):
    backend.on("POST", "/loans", json={"success": True, "loan": {"loanId": "L9"}})
    valid_form.current_step = 6

    loan = valid_form.submit(client)

    assert loan == {"loanId": "L9"}
    (req,) = backend.sent("POST", "/loans")
    assert backend.body(req)["loanAmount"] == 1000.0
    assert valid_form.is_submitting is False


def test_invalid_submit_sends_nothing(client, backend):
    form = LoanApplicationForm()
    with pytest.raises(StepValidationError):
        form.submit(client)
    assert backend.calls == []
