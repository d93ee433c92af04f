from __future__ import annotations

import logging

from services.api import endpoints
from services.api.client import ApiClient
from services.api.errors import ApiError, ApplicationError, AuthenticationError, describe_error
from services.auth.gate import LOGIN_PATH, home_for
from services.auth.session import SessionStore
from services.forms.credentials import FormErrors, validate_admin, validate_login, validate_signup

logger = logging.getLogger(__name__)


class FormRejected(Exception):
    """Client-side validation failed; nothing was sent."""

    def __init__(self, message: str, errors: FormErrors | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


def perform_login(session: SessionStore, email: str, password: str) -> str:
    """Log in and persist the token; returns the route to land on."""
    errors = validate_login(email, password)
    if errors:
        raise FormRejected(next(iter(errors.values())), errors)
    email, password = (email or "").strip(), (password or "").strip()
    try:
        token, user = endpoints.login(session.client, email, password)
    except AuthenticationError as e:
        logger.info("login rejected for %s", email)
        raise FormRejected(e.message if e.from_server else "Invalid credentials") from e
    except ApiError as e:
        logger.info("login failed for %s: %s", email, e.message)
        raise FormRejected(describe_error(e, "Login failed. Please try again.")) from e
    session.token_store.save(token, user.model_dump(mode="json"))
    session.login(user)
    logger.info("login ok: %s as %s", user.email, user.role.value)
    return home_for(user.role)


def perform_signup(client: ApiClient, name: str, email: str, password: str) -> str:
    message = validate_signup(name, email, password)
    if message:
        raise FormRejected(message)
    try:
        endpoints.signup(client, name.strip(), email.strip(), password, role="user")
    except ApiError as e:
        raise FormRejected(describe_error(e, "Signup failed")) from e
    logger.info("account created for %s", email.strip())
    return LOGIN_PATH


def create_admin(client: ApiClient, form: dict[str, str]) -> None:
    errors = validate_admin(form)
    if errors:
        raise FormRejected("Please fix the highlighted fields", errors)
    try:
        endpoints.create_admin(client, form)
    except ApiError as e:
        server_errors = e.errors if isinstance(e, ApplicationError) and e.status_code == 400 else {}
        raise FormRejected(
            e.message or "Failed to create admin",
            {k: str(v.get("message", v) if isinstance(v, dict) else v) for k, v in server_errors.items()},
        ) from e
    logger.info("admin account created for %s", form.get("email"))
