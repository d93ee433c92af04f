from __future__ import annotations

from typing import Any

CONNECTION_MESSAGE = "No server response. Please check your internet connection."


class ApiError(Exception):
    """Base class for every failure surfaced by the backend client."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TransportError(ApiError):
    """The request never got a response (connect error, timeout)."""

    def __init__(self, message: str = CONNECTION_MESSAGE):
        super().__init__(message)


class AuthenticationError(ApiError):
    """HTTP 401. The persisted token is already gone when this is raised."""

    DEFAULT_MESSAGE = "Session expired. Please log in again."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.DEFAULT_MESSAGE, status_code=401)
        self.from_server = message is not None


class ApplicationError(ApiError):
    """`success: false`, or a non-2xx response carrying a body."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: dict[str, Any] | None = None,
        missing_fields: list[str] | None = None,
    ):
        super().__init__(message, status_code)
        self.errors = errors or {}
        self.missing_fields = missing_fields or []

    @classmethod
    def from_body(cls, body: Any, status_code: int | None, fallback: str) -> "ApplicationError":
        body = body if isinstance(body, dict) else {}
        errors = body.get("errors")
        missing = body.get("missingFields")
        return cls(
            message=body.get("message") or fallback,
            status_code=status_code,
            errors=errors if isinstance(errors, dict) else None,
            missing_fields=missing if isinstance(missing, list) else None,
        )

    def detail(self) -> str:
        """Best-effort human summary: field errors, then missing fields, then the message."""
        if self.errors:
            parts = []
            for key, value in self.errors.items():
                if isinstance(value, dict):
                    value = value.get("message", value)
                parts.append(f"{key}: {value}")
            return "Validation failed: " + "; ".join(parts)
        if self.missing_fields:
            return "Missing required fields: " + ", ".join(self.missing_fields)
        return self.message


def describe_error(exc: Exception, fallback: str) -> str:
    """Message for a transient notice, per failure kind."""
    if isinstance(exc, TransportError):
        return exc.message
    if isinstance(exc, ApplicationError):
        return exc.detail() or fallback
    if isinstance(exc, ApiError):
        return exc.message or fallback
    return str(exc) or fallback
