import pytest

from domain.draft import LoanApplicationDraft
from services.forms.loan_application import LoanApplicationForm
from services.forms.rules import validate_step


@pytest.mark.parametrize(
    "path, value, ok",
    [
        ("terms.amount", "1000", True),
        ("terms.amount", "999", False),
        ("terms.amount", "10000000", True),
        ("terms.amount", "10000001", False),
        ("terms.amount", "abc", False),
        ("terms.term", "6", True),
        ("terms.term", "5", False),
        ("terms.term", "600", True),
        ("terms.term", "601", False),
        ("terms.purpose", "x" * 10, True),
        ("terms.purpose", "x" * 9, False),
        ("financials.monthly_income", "10000", True),
        ("financials.monthly_income", "9999", False),
        ("financials.annual_income", "120000", True),
        ("financials.annual_income", "119999", False),
        ("financials.credit_score", "300", True),
        ("financials.credit_score", "299", False),
        ("financials.credit_score", "900", True),
        ("financials.credit_score", "901", False),
        ("applicant.first_name", "Al", True),
        ("applicant.first_name", "A", False),
        ("applicant.last_name", "B", False),
        ("applicant.email", "asha@example", False),
        ("applicant.email", "a@b.c", True),
        ("applicant.phone", "987654321", False),
        ("applicant.phone", "98765432100", False),
        ("applicant.phone", "98765-4321", False),
        ("employment.years_at_current_employer", "0", True),
        ("employment.years_at_current_employer", "two", False),
        ("employment.years_at_current_employer", "inf", False),
        ("employment.years_at_current_employer", "Infinity", False),
        ("employment.years_at_current_employer", "1e400", False),
        ("residence.years_at_current_address", "-inf", False),
        ("financials.monthly_income", "inf", False),
        ("terms.amount", "nan", False),
        ("residence.postal_code", "41100", False),
        ("residence.postal_code", "4110011", False),
        ("residence.years_at_current_address", "1.5", True),
        ("bank.account_number", "12345678", False),
        ("bank.account_number", "1" * 18, True),
        ("bank.account_number", "1" * 19, False),
        ("bank.ifsc_code", "hdfc0001234", False),
        ("bank.ifsc_code", "HDFC1001234", False),
        ("bank.ifsc_code", "SBIN0AB12CD", True),
    ],
)
def test_bounds(valid_form, path, value, ok):
    step = {"terms": 1, "financials": 2, "applicant": 3, "employment": 4, "residence": 5, "bank": 6}[path.split(".")[0]]
    valid_form.update(path, value)
    assert validate_step(valid_form.draft, step).valid is ok


REQUIRED = {
    1: ["terms.amount", "terms.term", "terms.purpose"],
    2: ["financials.monthly_income", "financials.annual_income", "financials.credit_score"],
    3: ["applicant.first_name", "applicant.last_name", "applicant.email", "applicant.phone", "applicant.date_of_birth"],
    4: ["employment.employer_name", "employment.position", "employment.years_at_current_employer"],
    5: ["residence.address_line1", "residence.city", "residence.state", "residence.postal_code",
        "residence.years_at_current_address"],
    6: ["bank.account_number", "bank.bank_name", "bank.ifsc_code", "bank.account_holder_name"],
}


@pytest.mark.parametrize("step, path", [(s, p) for s, paths in REQUIRED.items() for p in paths])
def test_missing_required_field_rejected(valid_form, step, path):
    assert validate_step(valid_form.draft, step).valid
    valid_form.update(path, "")
    result = validate_step(valid_form.draft, step)
    assert not result.valid
    assert result.message


def test_first_failure_wins():
    result = validate_step(LoanApplicationDraft(), 1)
    assert result.message == "Loan amount must be between 1,000 and 10,000,000"
    assert result.rule == "loan_amount"


def test_messages_name_the_failing_rule(valid_form):
    valid_form.update("bank.ifsc_code", "HDFC001234")
    assert validate_step(valid_form.draft, 6).message == "Valid IFSC code is required (e.g., HDFC0001234)"


def test_unknown_step():
    with pytest.raises(ValueError):
        validate_step(LoanApplicationDraft(), 7)


def test_every_step_accepts_minimal_draft(valid_form):
    for step in range(1, 7):
        assert validate_step(valid_form.draft, step).valid, step


def test_defaults_follow_loan_type():
    form = LoanApplicationForm()
    assert form.draft.terms.loan_type == "Personal Loan"
    assert form.draft.terms.interest_rate == 10.5
    assert form.draft.terms.processing_fee == 1.0
