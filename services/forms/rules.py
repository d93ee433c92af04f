from __future__ import annotations

import math
import re
from collections.abc import Callable
from dataclasses import dataclass

from domain.draft import LoanApplicationDraft

EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
PHONE_RE = re.compile(r"[0-9]{10}")
POSTAL_CODE_RE = re.compile(r"[0-9]{6}")
ACCOUNT_NUMBER_RE = re.compile(r"[0-9]{9,18}")
IFSC_RE = re.compile(r"[A-Z]{4}0[A-Z0-9]{6}")


@dataclass(frozen=True)
class StepValidation:
    valid: bool
    message: str = ""
    rule: str | None = None


@dataclass(frozen=True)
class Rule:
    id: str
    check: Callable[[LoanApplicationDraft], bool]
    message: str


def _number(raw: str) -> float | None:
    """Parsed value, or None when the input is empty, not numeric or not finite."""
    if raw is None or str(raw).strip() == "" or "_" in str(raw):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def _between(raw: str, low: float, high: float) -> bool:
    value = _number(raw)
    return value is not None and low <= value <= high


def _at_least(raw: str, low: float) -> bool:
    value = _number(raw)
    return value is not None and value >= low


def _matches(pattern: re.Pattern, raw: str) -> bool:
    return bool(raw) and pattern.fullmatch(raw) is not None


STEP_RULES: dict[int, list[Rule]] = {
    1: [
        Rule("loan_amount", lambda d: _between(d.terms.amount, 1_000, 10_000_000),
             "Loan amount must be between 1,000 and 10,000,000"),
        Rule("loan_term", lambda d: _between(d.terms.term, 6, 600),
             "Loan term must be between 6 and 600 months"),
        Rule("purpose", lambda d: len(d.terms.purpose) >= 10,
             "Please provide a valid purpose of at least 10 characters"),
    ],
    2: [
        Rule("monthly_income", lambda d: _at_least(d.financials.monthly_income, 10_000),
             "Monthly income must be at least 10,000"),
        Rule("annual_income", lambda d: _at_least(d.financials.annual_income, 120_000),
             "Annual income must be at least 120,000"),
        Rule("credit_score", lambda d: _between(d.financials.credit_score, 300, 900),
             "Credit score must be between 300 and 900"),
    ],
    3: [
        Rule("first_name", lambda d: len(d.applicant.first_name) >= 2,
             "First name is required and must be at least 2 characters"),
        Rule("last_name", lambda d: len(d.applicant.last_name) >= 2,
             "Last name is required and must be at least 2 characters"),
        Rule("email", lambda d: _matches(EMAIL_RE, d.applicant.email),
             "Valid email address is required"),
        Rule("phone", lambda d: _matches(PHONE_RE, d.applicant.phone),
             "Valid 10-digit phone number is required"),
        Rule("date_of_birth", lambda d: bool(d.applicant.date_of_birth),
             "Date of birth is required"),
    ],
    4: [
        Rule("employer_name", lambda d: bool(d.employment.employer_name),
             "Employer name is required"),
        Rule("position", lambda d: bool(d.employment.position),
             "Position is required"),
        Rule("years_at_current_employer", lambda d: _number(d.employment.years_at_current_employer) is not None,
             "Years at current employer is required and must be a number"),
    ],
    5: [
        Rule("address_line1", lambda d: bool(d.residence.address_line1),
             "Address line 1 is required"),
        Rule("city", lambda d: bool(d.residence.city), "City is required"),
        Rule("state", lambda d: bool(d.residence.state), "State is required"),
        Rule("postal_code", lambda d: _matches(POSTAL_CODE_RE, d.residence.postal_code),
             "Valid 6-digit postal code is required"),
        Rule("years_at_current_address", lambda d: _number(d.residence.years_at_current_address) is not None,
             "Years at current address is required and must be a number"),
    ],
    6: [
        Rule("account_number", lambda d: _matches(ACCOUNT_NUMBER_RE, d.bank.account_number),
             "Valid account number between 9-18 digits is required"),
        Rule("bank_name", lambda d: bool(d.bank.bank_name), "Bank name is required"),
        Rule("ifsc_code", lambda d: _matches(IFSC_RE, d.bank.ifsc_code),
             "Valid IFSC code is required (e.g., HDFC0001234)"),
        Rule("account_holder_name", lambda d: bool(d.bank.account_holder_name),
             "Account holder name is required"),
    ],
}


def validate_step(draft: LoanApplicationDraft, step: int) -> StepValidation:
    """Ordered checks for one step; stops at the first failing rule."""
    if step not in STEP_RULES:
        raise ValueError(f"no such step: {step}")
    for rule in STEP_RULES[step]:
        if not rule.check(draft):
            return StepValidation(valid=False, message=rule.message, rule=rule.id)
    return StepValidation(valid=True)
