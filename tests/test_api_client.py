import httpx
import pytest

from services.api import endpoints
from services.api.errors import (
    ApplicationError,
    AuthenticationError,
    CONNECTION_MESSAGE,
    TransportError,
    describe_error,
)


def test_bearer_token_attached_when_persisted(backend, client, token_store):
    token_store.save("T", {"id": "u1"})
    backend.on("GET", "/loans/my-loans", json={"success": True, "data": []})

    endpoints.get_my_loans(client)

    (req,) = backend.sent("GET", "/loans/my-loans")
    assert req.headers["Authorization"] == "Bearer T"
    assert req.headers["Content-Type"] == "application/json"


def test_no_authorization_header_without_token(backend, client):
    backend.on("GET", "/loans/types", json={"success": True, "loanTypes": []})

    endpoints.get_loan_types(client)

    (req,) = backend.sent("GET", "/loans/types")
    assert "Authorization" not in req.headers


def test_401_clears_token_and_fires_hook(backend, client, token_store):
    token_store.save("stale", None)
    fired = []
    client.on_unauthorized = lambda: fired.append(True)
    backend.on("GET", "/loans/admin/stats", status=401, json={"success": False})

    with pytest.raises(AuthenticationError):
        endpoints.get_admin_stats(client)

    assert token_store.get_token() is None
    assert fired == [True]


def test_success_false_on_200_is_application_error(backend, client):
    backend.on("POST", "/loans", json={"success": False, "message": "Duplicate application"})

    with pytest.raises(ApplicationError) as exc:
        endpoints.apply_for_loan(client, {})

    assert exc.value.message == "Duplicate application"
    assert exc.value.status_code == 200


def test_field_errors_are_enumerated(backend, client):
    backend.on(
        "POST",
        "/loans",
        status=400,
        json={"success": False, "message": "bad", "errors": {"loanAmount": {"message": "too small"}, "purpose": "required"}},
    )

    with pytest.raises(ApplicationError) as exc:
        endpoints.apply_for_loan(client, {})

    assert exc.value.detail() == "Validation failed: loanAmount: too small; purpose: required"


def test_missing_fields_listed_when_no_field_errors(backend, client):
    backend.on("POST", "/loans", status=422, json={"success": False, "missingFields": ["loanTenure", "userId"]})

    with pytest.raises(ApplicationError) as exc:
        endpoints.apply_for_loan(client, {})

    assert describe_error(exc.value, "x") == "Missing required fields: loanTenure, userId"


def test_transport_failure_fails_once_without_retry(backend, client):
    backend.on("GET", "/loans/my-loans", raises=httpx.ConnectError)

    with pytest.raises(TransportError) as exc:
        endpoints.get_my_loans(client)

    assert exc.value.message == CONNECTION_MESSAGE
    assert len(backend.sent("GET", "/loans/my-loans")) == 1


def test_timeout_is_a_transport_failure(backend, client):
    backend.on("GET", "/auth/profile", raises=httpx.ReadTimeout)

    with pytest.raises(TransportError):
        endpoints.get_profile(client)


def test_update_status_body(backend, client):
    backend.on("PUT", "/loans/admin/update-status", json={"success": True})

    endpoints.update_loan_status(client, "L123", "Under Review")

    (req,) = backend.sent("PUT", "/loans/admin/update-status")
    assert backend.body(req) == {"loanId": "L123", "status": "Under Review"}


def test_loan_types_fall_back_to_builtin_catalog(backend, client):
    backend.on("GET", "/loans/types", json={"success": True})

    types = endpoints.get_loan_types(client)

    assert [t.name for t in types][:2] == ["Personal Loan", "Home Loan"]
    assert len(types) == 7


def test_server_loan_types_accept_camel_case(backend, client):
    backend.on(
        "GET",
        "/loans/types",
        json={"success": True, "loanTypes": [{"id": 9, "name": "Solar Loan", "interestRate": 6.5, "processingFee": 1}]},
    )

    (t,) = endpoints.get_loan_types(client)

    assert t.interest_rate == 6.5
    assert t.processing_fee_pct == 1.0


def test_document_download(backend, client):
    path = "/loans/admin/loan/L1/document/identityProof"
    backend.on("GET", path, content=b"%PDF-1.4", headers={"content-type": "application/pdf"})

    content, content_type = endpoints.get_document(client, "L1", "identityProof")

    assert content == b"%PDF-1.4"
    assert content_type == "application/pdf"
    assert client.url_for(endpoints.document_path("L1", "identityProof")) == "http://backend.test" + path
