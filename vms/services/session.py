"""Who is signed in, for the duration of one request.

``SessionContext`` is the only object that changes the signed-in identity.
Page controllers receive it explicitly and read ``identity`` when they
mount; they never reach for Flask-Login globals themselves.
"""

from __future__ import annotations

from typing import Any

from flask import current_app, g, session
from flask_login import current_user, login_user, logout_user

from vms.models import Identity
from vms.services.backend import get_backend
from vms.services.errors import BackendError

IDENTITY_SESSION_KEY = "identity"


class SessionContext:
    def __init__(self, backend, identity: Identity | None = None):
        self.backend = backend
        self._identity = identity

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def is_member(self) -> bool:
        return self._identity is not None

    def restore(self, stored: dict[str, Any] | None) -> Identity | None:
        """Ask the identity provider whether the stored session is still valid."""
        saved = Identity.from_session(stored)
        if saved is None or not saved.access_token:
            return None
        try:
            identity = self.backend.accounts.get_current(saved.access_token)
            if identity is None:
                return self._refresh(saved)
        except BackendError as exc:
            current_app.logger.warning(f"Could not verify session for {saved.email}: {exc}")
            return None
        if identity.id != saved.id:
            return None
        identity.refresh_token = saved.refresh_token
        self._identity = identity
        return identity

    def _refresh(self, saved: Identity) -> Identity | None:
        """Swap an expired access token for a fresh one and re-store it."""
        identity = self.backend.accounts.refresh(saved.refresh_token)
        if identity is None or identity.id != saved.id:
            return None
        if not identity.email:
            identity.email = saved.email
        session[IDENTITY_SESSION_KEY] = identity.to_session()
        self._identity = identity
        current_app.logger.info(f"Session refreshed for {identity.email}")
        return identity

    def sign_in(self, email: str, password: str) -> Identity:
        identity = self.backend.accounts.authenticate(email, password)
        self._establish(identity)
        current_app.logger.info(f"Volunteer signed in: {identity.email}")
        return identity

    def sign_up(self, email: str, password: str, seed: dict[str, Any]) -> Identity:
        """Create the account; sign in straight away when the provider issues a session."""
        identity = self.backend.accounts.create(email, password, seed)
        if identity.has_session:
            self._establish(identity)
        current_app.logger.info(f"Volunteer account created: {identity.email}")
        return identity

    def sign_out(self) -> None:
        identity = self._identity
        if identity is not None:
            try:
                self.backend.accounts.sign_out(identity)
            except BackendError as exc:
                current_app.logger.warning(f"Provider sign-out failed for {identity.email}: {exc}")
        logout_user()
        session.pop(IDENTITY_SESSION_KEY, None)
        self._identity = None
        g.pop("vms_session", None)
        if identity is not None:
            current_app.logger.info(f"Volunteer signed out: {identity.email}")

    def _establish(self, identity: Identity) -> None:
        session[IDENTITY_SESSION_KEY] = identity.to_session()
        login_user(identity)
        self._identity = identity


def load_identity(user_id: str) -> Identity | None:
    """Flask-Login ``user_loader``: revalidate the identity stored in the cookie."""
    stored = session.get(IDENTITY_SESSION_KEY)
    if not stored or stored.get("id") != user_id:
        return None
    return SessionContext(get_backend()).restore(stored)


def current_session() -> SessionContext:
    """The request's session handle, built once per request."""
    ctx = g.get("vms_session")
    if ctx is None:
        identity = current_user._get_current_object() if current_user.is_authenticated else None
        ctx = SessionContext(get_backend(), identity)
        g.vms_session = ctx
    return ctx


__all__ = ["IDENTITY_SESSION_KEY", "SessionContext", "current_session", "load_identity"]
