from __future__ import annotations

import re

LOOSE_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
STRICT_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MIN_PASSWORD = 6

FormErrors = dict[str, str]


def validate_login(email: str, password: str) -> FormErrors:
    """Per-field errors; empty dict means the form can be sent."""
    errors: FormErrors = {}
    if not email:
        errors["email"] = "Email is required"
    elif not LOOSE_EMAIL_RE.search(email):
        errors["email"] = "Email is invalid"
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD:
        errors["password"] = "Password must be at least 6 characters"
    return errors


def validate_signup(name: str, email: str, password: str) -> str | None:
    """First failing check as a single message, or None."""
    if not name or not email or not password:
        return "All fields are required"
    if not LOOSE_EMAIL_RE.search(email):
        return "Please enter a valid email address"
    if len(password) < MIN_PASSWORD:
        return "Password must be at least 6 characters long"
    return None


def validate_admin(form: dict[str, str]) -> FormErrors:
    errors: FormErrors = {}
    get = lambda k: (form.get(k) or "")  # noqa: E731
    if not get("name").strip():
        errors["name"] = "Name is required"
    if not get("email").strip():
        errors["email"] = "Email is required"
    elif not STRICT_EMAIL_RE.fullmatch(get("email")):
        errors["email"] = "Email is invalid"
    if not get("password"):
        errors["password"] = "Password is required"
    elif len(get("password")) < MIN_PASSWORD:
        errors["password"] = "Password must be at least 6 characters"
    if get("password") != get("confirmPassword"):
        errors["confirmPassword"] = "Passwords do not match"
    if not get("phone").strip():
        errors["phone"] = "Phone number is required"
    if not get("address").strip():
        errors["address"] = "Address is required"
    return errors
