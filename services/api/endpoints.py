"""
One function per backend endpoint. Each unwraps its own payload key and
returns typed records; a payload that does not fit the record is reported
as an ApplicationError like any other bad response.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from domain.models import AdminStats, LoanRecord, LoanStatus, LoanType, RecentUser, User, LOAN_TYPES
from services.api.client import ApiClient
from services.api.errors import ApplicationError

DOCUMENT_TYPES = ("identityProof", "addressProof", "incomeProof", "bankStatements")

M = TypeVar("M", bound=BaseModel)


def _parse(model: type[M], raw: Any) -> M:
    try:
        return model.model_validate(raw or {})
    except ValidationError as e:
        raise ApplicationError(f"Unexpected {model.__name__} payload from server") from e


def _parse_all(model: type[M], raw: Any) -> list[M]:
    return [_parse(model, item) for item in raw or []]


# --- auth ---


def login(client: ApiClient, email: str, password: str) -> tuple[str, User]:
    body = client.post("/auth/login", json={"email": email, "password": password})
    if not body.get("token"):
        raise ApplicationError("Login response did not include a token")
    return body["token"], _parse(User, body.get("user"))


def signup(client: ApiClient, name: str, email: str, password: str, role: str = "user") -> dict[str, Any]:
    return client.post(
        "/auth/signup", json={"name": name, "email": email, "password": password, "role": role}
    )


def create_admin(client: ApiClient, form: dict[str, Any]) -> dict[str, Any]:
    return client.post("/auth/create-admin", json={**form, "role": "admin"})


def get_profile(client: ApiClient) -> User:
    return _parse(User, client.get("/auth/profile").get("user"))


# --- loans (user) ---


def get_loan_types(client: ApiClient) -> list[LoanType]:
    """Server catalog when it has one; the built-in catalog otherwise."""
    body = client.get("/loans/types")
    raw = body.get("loanTypes") or body.get("data")
    if not raw:
        return list(LOAN_TYPES)
    return _parse_all(LoanType, raw)


def apply_for_loan(client: ApiClient, payload: dict[str, Any]) -> dict[str, Any]:
    body = client.post("/loans", json=payload)
    return body.get("loan") or body.get("data") or {}


def get_my_loans(client: ApiClient) -> list[LoanRecord]:
    body = client.get("/loans/my-loans")
    # the backend sends these under `data`, older builds under `loans`
    return _parse_all(LoanRecord, body.get("data") or body.get("loans"))


# --- loans (admin) ---


def get_admin_stats(client: ApiClient) -> AdminStats:
    return _parse(AdminStats, client.get("/loans/admin/stats").get("data"))


def get_all_loans(client: ApiClient) -> list[LoanRecord]:
    return _parse_all(LoanRecord, client.get("/loans/admin/all-loans").get("data"))


def get_recent_users(client: ApiClient) -> list[RecentUser]:
    return _parse_all(RecentUser, client.get("/loans/admin/recent-users").get("data"))


def update_loan_status(client: ApiClient, loan_id: str, status: LoanStatus) -> dict[str, Any]:
    return client.put(
        "/loans/admin/update-status", json={"loanId": loan_id, "status": LoanStatus(status).value}
    )


def delete_loan(client: ApiClient, loan_id: str) -> dict[str, Any]:
    return client.delete(f"/loans/admin/loan/{loan_id}")


def get_loan(client: ApiClient, loan_id: str) -> LoanRecord:
    body = client.get(f"/loans/admin/loan/{loan_id}")
    return _parse(LoanRecord, body.get("data") or body.get("loan"))


def document_path(loan_id: str, doc_type: str) -> str:
    return f"/loans/admin/loan/{loan_id}/document/{doc_type}"


def get_document(client: ApiClient, loan_id: str, doc_type: str) -> tuple[bytes, str]:
    return client.download(document_path(loan_id, doc_type))
