from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from domain.draft import LoanApplicationDraft
from domain.models import LoanType, LOAN_TYPES
from services.api import endpoints
from services.api.client import ApiClient
from services.forms.rules import StepValidation, validate_step

logger = logging.getLogger(__name__)

TOTAL_STEPS = 6
STEP_TITLES = {
    1: "Basic Loan Information",
    2: "Financial Information",
    3: "Applicant Information",
    4: "Employment Information",
    5: "Residence Information",
    6: "Bank Details",
}

ANNUAL_INCOME_MIN = 120_000
ANNUAL_INCOME_MAX = 120_000_000
REPAYMENT_CAPACITY_MIN = 1_000


class StepValidationError(Exception):
    def __init__(self, step: int, result: StepValidation):
        super().__init__(result.message)
        self.step = step
        self.result = result


def _float(raw: Any, default: float = 0.0) -> float:
    try:
        return float(raw) if raw not in (None, "") else default
    except (TypeError, ValueError):
        return default


def _int(raw: Any, default: int = 0) -> int:
    # parseInt semantics: "12.9" -> 12
    return int(_float(raw, default))


def _iso_now(now: datetime | None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LoanApplicationForm:
    """Six-step loan application: per-step validation, then one submission payload."""

    def __init__(self, loan_type: LoanType | None = None, user_id: str | None = None):
        self.loan_type = loan_type or LOAN_TYPES[0]
        self.user_id = user_id
        self.current_step = 1
        self.is_submitting = False
        self.draft = LoanApplicationDraft()
        self.draft.update_terms(
            loan_type=self.loan_type.name,
            interest_rate=self.loan_type.interest_rate,
            processing_fee=self.loan_type.processing_fee_pct,
        )

    def update(self, path: str, value: Any) -> None:
        self.draft.update(path, value)

    def set_co_applicant(self, enabled: bool) -> None:
        bank = self.draft.bank
        relationship = (bank.co_applicant_relationship or "Spouse") if enabled else "Spouse"
        self.draft.update_bank(co_applicant=enabled, co_applicant_relationship=relationship)

    def validate_step(self, step: int | None = None) -> StepValidation:
        return validate_step(self.draft, step or self.current_step)

    def advance(self) -> StepValidation:
        result = self.validate_step(self.current_step)
        if result.valid and self.current_step < TOTAL_STEPS:
            self.current_step += 1
        return result

    def retreat(self) -> bool:
        if self.current_step <= 1:
            return False
        self.current_step -= 1
        return True

    def _check_all(self) -> None:
        # current step first so its message is the one surfaced
        order = [self.current_step] + [s for s in range(1, TOTAL_STEPS + 1) if s != self.current_step]
        for step in order:
            result = validate_step(self.draft, step)
            if not result.valid:
                raise StepValidationError(step, result)

    def build_submission(self, now: datetime | None = None) -> dict[str, Any]:
        """Validated draft mapped onto the backend's loan schema."""
        self._check_all()
        d = self.draft
        t, f, a, e, r, b, i = d.terms, d.financials, d.applicant, d.employment, d.residence, d.bank, d.identity

        monthly_income = _float(f.monthly_income)
        annual_income = _float(f.annual_income, monthly_income * 12)
        term = _int(t.term)

        return {
            "loanAmount": _float(t.amount),
            "loanTerm": term,
            "loanTenure": term,
            "purpose": t.purpose.strip(),
            "loanType": t.loan_type,
            "loanPurpose": t.loan_purpose,
            "interestRate": float(t.interest_rate),
            "processingFee": float(t.processing_fee),
            "monthlyIncome": monthly_income,
            "annualIncome": min(max(annual_income, ANNUAL_INCOME_MIN), ANNUAL_INCOME_MAX),
            "otherIncome": _float(f.other_income),
            "totalMonthlyExpenses": _float(f.total_monthly_expenses),
            "existingLoans": f.existing_loans,
            "existingEMI": _float(f.existing_emi),
            "creditScore": _int(f.credit_score),
            "repaymentCapacity": max(
                _float(f.repayment_capacity, REPAYMENT_CAPACITY_MIN), REPAYMENT_CAPACITY_MIN
            ),
            "applicantDetails": {
                "firstName": a.first_name,
                "middleName": a.middle_name or "",
                "lastName": a.last_name,
                "dateOfBirth": a.date_of_birth,
                "gender": a.gender,
                "maritalStatus": a.marital_status,
                "phone": a.phone,
                "email": a.email,
                "education": a.education,
                "dependents": _int(a.dependents),
                "children": 0,
                "familyMembers": 1,
                "nationality": "Indian",
                "preferredContactMethod": "Phone",
                "contactTime": "Anytime",
                "taxResidencyStatus": "Resident",
                "taxFilingStatus": "Regular",
            },
            "employmentType": e.employment_type,
            "employmentDetails": {
                "employerName": e.employer_name,
                "position": e.position,
                "yearsAtCurrentEmployer": max(_int(e.years_at_current_employer), 0),
                "employmentStatus": "Permanent",
                "monthlySalary": _float(e.monthly_salary),
                "sector": e.sector,
                "bonuses": 0,
                "otherCompensation": 0,
                "employerAddress": {"country": "India"},
            },
            "residentialStatus": r.residential_status,
            "residentialAddress": {
                "addressLine1": r.address_line1,
                "addressLine2": r.address_line2 or "",
                "city": r.city,
                "state": r.state,
                "postalCode": r.postal_code,
                "country": "India",
                "addressType": "Residential",
                "isBillingAddress": True,
                "isMailingAddress": True,
            },
            "yearsAtCurrentAddress": _int(r.years_at_current_address),
            "monthsAtCurrentAddress": 0,
            "previousAddresses": [],
            "bankDetails": {
                "accountNumber": b.account_number,
                "accountType": b.account_type,
                "bankName": b.bank_name,
                "ifscCode": b.ifsc_code,
                "accountHolderName": b.account_holder_name,
                "internetBankingEnabled": False,
            },
            "coApplicant": b.co_applicant,
            "coApplicantDetails": {
                "fullName": b.co_applicant_name or "",
                "relationship": (b.co_applicant_relationship or "Spouse") if b.co_applicant else "Spouse",
                "monthlyIncome": _float(b.co_applicant_monthly_income),
            },
            "identityInformation": {
                "idType": i.id_type or "Aadhar Card",
                "idNumber": i.id_number or "",
                "otherBankAccounts": [],
            },
            "processingInfo": {"internalNotes": [], "verificationCalls": []},
            "statusHistory": [],
            "references": [],
            "housingLoanDetails": {"existingLoan": False},
            "userId": self.user_id,
            "applicationDate": _iso_now(now),
            "status": "Pending",
        }

    def submit(self, client: ApiClient) -> dict[str, Any]:
        """Build and POST the application. Raises StepValidationError or ApiError."""
        if self.is_submitting:
            raise RuntimeError("submission already in flight")
        payload = self.build_submission()
        self.is_submitting = True
        try:
            loan = endpoints.apply_for_loan(client, payload)
        finally:
            self.is_submitting = False
        logger.info("loan application submitted: type=%s amount=%s", payload["loanType"], payload["loanAmount"])
        return loan
