from __future__ import annotations

import json

import httpx
import pytest

from services.api.client import ApiClient
from services.auth.session import SessionStore
from services.auth.token_store import FileTokenStore
from services.forms.loan_application import LoanApplicationForm


class FakeBackend:
    """Route table for httpx.MockTransport; records every request it sees."""

    def __init__(self):
        self.routes: dict[tuple[str, str], dict] = {}
        self.calls: list[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, json=None, raises=None, content=None, headers=None) -> None:
        self.routes[(method, path)] = dict(status=status, json=json, raises=raises, content=content, headers=headers)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"success": False, "message": "Not found"})
        route = self.routes[key]
        if route["raises"] is not None:
            raise route["raises"]("simulated failure", request=request)
        if route["content"] is not None:
            return httpx.Response(route["status"], content=route["content"], headers=route["headers"])
        return httpx.Response(route["status"], json=route["json"])

    def sent(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.calls if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request):
        return json.loads(request.content)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def token_store(tmp_path) -> FileTokenStore:
    return FileTokenStore(tmp_path / "session.json")


@pytest.fixture
def client(backend, token_store) -> ApiClient:
    c = ApiClient(token_store, base_url="http://backend.test", timeout=10, transport=httpx.MockTransport(backend))
    yield c
    c.close()


@pytest.fixture
def navigations() -> list[str]:
    return []


@pytest.fixture
def session(client, token_store, navigations) -> SessionStore:
    return SessionStore(client, token_store, navigations.append)


def fill_valid(form: LoanApplicationForm) -> LoanApplicationForm:
    """Every step at its minimal valid values."""
    form.draft.update_terms(amount="1000", term="6", purpose="Home renovation")
    form.draft.update_financials(monthly_income="10000", annual_income="120000", credit_score="300")
    form.draft.update_applicant(
        first_name="Asha", last_name="Rao", email="asha@example.com", phone="9876543210",
        date_of_birth="1990-05-01",
    )
    form.draft.update_employment(employer_name="Acme Ltd", position="Engineer", years_at_current_employer="3")
    form.draft.update_residence(
        address_line1="12 MG Road", city="Pune", state="Maharashtra", postal_code="411001",
        years_at_current_address="2",
    )
    form.draft.update_bank(
        account_number="123456789", bank_name="HDFC Bank", ifsc_code="HDFC0001234",
        account_holder_name="Asha Rao",
    )
    return form


@pytest.fixture
def valid_form() -> LoanApplicationForm:
    return fill_valid(LoanApplicationForm(user_id="U1"))
