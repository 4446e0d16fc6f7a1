"""Register and sign-in flows."""

from __future__ import annotations

from typing import Any, Mapping

from flask import current_app

from vms.forms.validation import FORM_ERROR_SUMMARY, validate_login, validate_registration
from vms.services.errors import BackendError
from vms.services.notifications import Notice, failure, failure_from, info, success
from vms.services.session import SessionContext


def _clean(value: Any) -> str:
    return (value or "").strip()


def profile_seed(record: Mapping[str, Any]) -> dict[str, Any]:
    """Profile attributes sent with the sign-up and written to the new profile row."""
    return {
        "full_name": _clean(record.get("full_name")),
        "phone": _clean(record.get("phone")),
        "city": _clean(record.get("city")),
        "availability": record.get("availability"),
        "skills": list(record.get("skills") or []),
        "bio": _clean(record.get("bio")),
    }


class RegisterPage:
    def __init__(self, backend, session: SessionContext, site_name: str = "Al-Khidmat"):
        self.backend = backend
        self.session = session
        self.site_name = site_name
        self.errors: dict[str, str] = {}
        self.next_endpoint: str | None = None

    def submit(self, record: Mapping[str, Any]) -> Notice:
        self.next_endpoint = None
        self.errors = validate_registration(record)
        if self.errors:
            return failure("Validation Error", FORM_ERROR_SUMMARY)

        email = _clean(record.get("email"))
        seed = profile_seed(record)
        try:
            identity = self.session.sign_up(email, record.get("password") or "", seed)
        except BackendError as exc:
            current_app.logger.error(f"Registration failed for {email}: {exc.message}")
            return failure_from("Registration Failed", exc)

        if not identity.has_session:
            self.next_endpoint = "auth.login"
            return info(
                "Confirm Your Email",
                "Registration successful! Please check your email to confirm your account, then sign in.",
            )

        try:
            self.backend.profiles.update(identity, seed)
        except BackendError as exc:
            # The provider seeds the profile from sign-up metadata as well.
            current_app.logger.warning(f"Could not seed profile for {email}: {exc.message}")

        self.next_endpoint = "portal.dashboard"
        return success(
            "Registration Successful!",
            f"Welcome to {self.site_name} Volunteer Portal. Redirecting to dashboard...",
        )


class LoginPage:
    def __init__(self, backend, session: SessionContext):
        self.backend = backend
        self.session = session
        self.errors: dict[str, str] = {}

    def submit(self, email: str, password: str) -> Notice:
        email = _clean(email)
        self.errors = validate_login({"email": email, "password": password})
        if self.errors:
            return failure("Validation Error", FORM_ERROR_SUMMARY)
        try:
            self.session.sign_in(email, password)
        except BackendError as exc:
            current_app.logger.warning(f"Sign in failed for {email}: {exc.message}")
            return failure_from("Sign In Failed", exc)
        return success("Welcome back!", "You have signed in successfully.")


__all__ = ["LoginPage", "RegisterPage", "profile_seed"]
