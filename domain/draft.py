"""
The in-progress loan application, one section per form step.

Fields hold raw user input (text) exactly as typed; coercion to numbers and
ISO dates happens once, when the submission payload is built.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class LoanTerms(_Section):
    amount: str = ""
    term: str = "12"
    purpose: str = ""
    loan_type: str = "Personal Loan"
    loan_purpose: str = "Personal Expenses"
    interest_rate: float = 10.5
    processing_fee: float = 1.0


class Financials(_Section):
    monthly_income: str = ""
    annual_income: str = ""
    other_income: str = ""
    total_monthly_expenses: str = ""
    existing_loans: str = "No"
    existing_emi: str = "0"
    credit_score: str = ""
    repayment_capacity: str = "0"


class ApplicantDetails(_Section):
    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""
    date_of_birth: str = ""
    gender: str = "Male"
    marital_status: str = "Single"
    phone: str = ""
    email: str = ""
    education: str = "Bachelor's"
    dependents: str = "0"


class Employment(_Section):
    employment_type: str = "Salaried"
    employer_name: str = ""
    position: str = ""
    years_at_current_employer: str = ""
    monthly_salary: str = ""
    sector: str = "Information Technology"


class Residence(_Section):
    residential_status: str = "Owned"
    address_line1: str = ""
    address_line2: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = "India"
    years_at_current_address: str = ""


class BankAndCoApplicant(_Section):
    account_number: str = ""
    account_type: str = "Savings"
    bank_name: str = ""
    ifsc_code: str = ""
    account_holder_name: str = ""
    co_applicant: bool = False
    co_applicant_name: str = ""
    co_applicant_relationship: str = "Spouse"
    co_applicant_monthly_income: str = "0"


class IdentityInformation(_Section):
    # never collected by the form; the backend schema requires it
    id_type: str = "Aadhar Card"
    id_number: str = "000000000000"


def _as_input(section: _Section, field: str, value: Any) -> Any:
    if field not in type(section).model_fields:
        raise KeyError(f"{type(section).__name__} has no field {field!r}")
    annotation = type(section).model_fields[field].annotation
    if annotation is bool:
        return bool(value)
    if annotation is float:
        return float(value)
    if value is None:
        return ""
    # dates from a date picker become ISO strings here
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


class LoanApplicationDraft(BaseModel):
    terms: LoanTerms = Field(default_factory=LoanTerms)
    financials: Financials = Field(default_factory=Financials)
    applicant: ApplicantDetails = Field(default_factory=ApplicantDetails)
    employment: Employment = Field(default_factory=Employment)
    residence: Residence = Field(default_factory=Residence)
    bank: BankAndCoApplicant = Field(default_factory=BankAndCoApplicant)
    identity: IdentityInformation = Field(default_factory=IdentityInformation)

    def section(self, name: str) -> _Section:
        if name not in type(self).model_fields:
            raise KeyError(f"draft has no section {name!r}")
        return getattr(self, name)

    def update(self, path: str, value: Any) -> None:
        """Set `section.field`; no validation happens here."""
        head, _, field = path.partition(".")
        if not field or "." in field:
            raise KeyError(f"field path must be 'section.field', got {path!r}")
        section = self.section(head)
        setattr(section, field, _as_input(section, field, value))

    def _update_section(self, name: str, fields: dict[str, Any]) -> None:
        section = self.section(name)
        for field, value in fields.items():
            setattr(section, field, _as_input(section, field, value))

    def update_terms(self, **fields: Any) -> None:
        self._update_section("terms", fields)

    def update_financials(self, **fields: Any) -> None:
        self._update_section("financials", fields)

    def update_applicant(self, **fields: Any) -> None:
        self._update_section("applicant", fields)

    def update_employment(self, **fields: Any) -> None:
        self._update_section("employment", fields)

    def update_residence(self, **fields: Any) -> None:
        self._update_section("residence", fields)

    def update_bank(self, **fields: Any) -> None:
        self._update_section("bank", fields)
