"""Adapter over the managed backend (Supabase auth + PostgREST tables).

The rest of the application only talks to the four collections exposed here
(``accounts``, ``profiles``, ``activities``, ``assignments``) and only sees
``vms.models`` types and ``vms.services.errors`` exceptions.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterator

import httpx
from flask import current_app
from supabase import AuthError, Client, ClientOptions, PostgrestAPIError, create_client

from vms.models import Activity, ActivityStatus, Assignment, AssignmentStatus, Identity, Profile
from vms.services.errors import (
    AuthenticationError,
    BackendError,
    BackendUnavailableError,
    ConflictError,
    NotFoundError,
)

PROFILES_TABLE = "profiles"
ACTIVITIES_TABLE = "volunteer_activities"
ASSIGNMENTS_TABLE = "volunteer_assignments"

ACTIVITY_COLUMNS = (
    "id, title, description, location, start_date, end_date, category, status, "
    "max_volunteers, current_volunteers, image_url"
)
ASSIGNMENT_COLUMNS = f"id, user_id, activity_id, status, assigned_at, {ACTIVITIES_TABLE} ({ACTIVITY_COLUMNS})"

ALREADY_JOINED_MESSAGE = "You have already joined this activity."

# Postgres error codes surfaced through PostgREST
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

ClientFactory = Callable[[str, str], Client]


def _default_client_factory(url: str, key: str) -> Client:
    # One short-lived client per call; auth state must never leak between volunteers.
    options = ClientOptions(auto_refresh_token=False, persist_session=False)
    return create_client(url, key, options=options)


@contextmanager
def translate_errors() -> Iterator[None]:
    """Re-raise client library errors as ``BackendError`` subclasses."""
    try:
        yield
    except BackendError:
        raise
    except AuthError as exc:
        raise AuthenticationError(getattr(exc, "message", None) or str(exc)) from exc
    except PostgrestAPIError as exc:
        code = getattr(exc, "code", None)
        message = getattr(exc, "message", None) or str(exc)
        if code == UNIQUE_VIOLATION:
            raise ConflictError(message) from exc
        if code == FOREIGN_KEY_VIOLATION:
            raise NotFoundError("Activity not found") from exc
        raise BackendError(message) from exc
    except httpx.HTTPError as exc:
        raise BackendUnavailableError(str(exc)) from exc


def _identity_from_auth(response: Any, fallback_email: str) -> Identity:
    user = getattr(response, "user", None)
    if user is None:
        raise AuthenticationError("Unable to authenticate. Please try again.")
    auth_session = getattr(response, "session", None)
    return Identity(
        id=str(user.id),
        email=getattr(user, "email", None) or fallback_email,
        access_token=getattr(auth_session, "access_token", None),
        refresh_token=getattr(auth_session, "refresh_token", None),
    )


class _Collection:
    def __init__(self, backend: SupabaseBackend):
        self.backend = backend

    def client(self, identity: Identity | None = None) -> Client:
        return self.backend.client(identity.access_token if identity else None)


class AccountsCollection(_Collection):
    def create(self, email: str, password: str, seed: dict[str, Any]) -> Identity:
        options: dict[str, Any] = {"data": seed}
        if self.backend.email_redirect_to:
            options["email_redirect_to"] = self.backend.email_redirect_to
        with translate_errors():
            response = self.client().auth.sign_up(
                {"email": email, "password": password, "options": options}
            )
        return _identity_from_auth(response, email)

    def authenticate(self, email: str, password: str) -> Identity:
        with translate_errors():
            response = self.client().auth.sign_in_with_password({"email": email, "password": password})
        return _identity_from_auth(response, email)

    def get_current(self, access_token: str | None) -> Identity | None:
        if not access_token:
            return None
        try:
            with translate_errors():
                response = self.client().auth.get_user(access_token)
        except AuthenticationError:
            return None
        user = getattr(response, "user", None) if response is not None else None
        if user is None:
            return None
        return Identity(id=str(user.id), email=getattr(user, "email", None) or "", access_token=access_token)

    def refresh(self, refresh_token: str | None) -> Identity | None:
        """Trade a refresh token for a new session; ``None`` once it is spent or revoked."""
        if not refresh_token:
            return None
        try:
            with translate_errors():
                response = self.client().auth.refresh_session(refresh_token)
        except AuthenticationError:
            return None
        if getattr(response, "session", None) is None:
            return None
        return _identity_from_auth(response, "")

    def sign_out(self, identity: Identity) -> None:
        if not identity.access_token:
            return
        with translate_errors():
            self.client().auth.admin.sign_out(identity.access_token)


class ProfilesCollection(_Collection):
    def get_one(self, identity: Identity) -> Profile:
        with translate_errors():
            response = (
                self.client(identity)
                .table(PROFILES_TABLE)
                .select("*")
                .eq("user_id", identity.id)
                .limit(1)
                .execute()
            )
        rows = response.data or []
        if not rows:
            raise NotFoundError("Profile not found")
        row = dict(rows[0])
        row.setdefault("email", identity.email)
        return Profile.from_row(row)

    def update(self, identity: Identity, changes: dict[str, Any]) -> None:
        payload = dict(changes)
        if "skills" in payload and payload["skills"] is not None:
            payload["skills"] = list(payload["skills"])
        with translate_errors():
            response = (
                self.client(identity)
                .table(PROFILES_TABLE)
                .update(payload)
                .eq("user_id", identity.id)
                .execute()
            )
        if not response.data:
            raise NotFoundError("Profile not found")


class ActivitiesCollection(_Collection):
    def list_open(self) -> list[Activity]:
        with translate_errors():
            response = (
                self.client()
                .table(ACTIVITIES_TABLE)
                .select("*")
                .eq("status", ActivityStatus.OPEN.value)
                .order("start_date", desc=False)
                .execute()
            )
        return [Activity.from_row(row) for row in response.data or []]

    def get_all(self) -> list[Activity]:
        with translate_errors():
            response = self.client().table(ACTIVITIES_TABLE).select("*").order("start_date", desc=False).execute()
        return [Activity.from_row(row) for row in response.data or []]


class AssignmentsCollection(_Collection):
    def list_for(self, identity: Identity, status: AssignmentStatus | None = None) -> list[Assignment]:
        with translate_errors():
            query = (
                self.client(identity)
                .table(ASSIGNMENTS_TABLE)
                .select(ASSIGNMENT_COLUMNS)
                .eq("user_id", identity.id)
            )
            if status is not None:
                query = query.eq("status", status.value)
            response = query.order("assigned_at", desc=True).execute()
        return [Assignment.from_row(row) for row in response.data or []]

    def insert(self, identity: Identity, activity_id: str) -> Assignment:
        client = self.client(identity)
        with translate_errors():
            existing = (
                client.table(ASSIGNMENTS_TABLE)
                .select("id")
                .eq("user_id", identity.id)
                .eq("activity_id", activity_id)
                .eq("status", AssignmentStatus.ACTIVE.value)
                .limit(1)
                .execute()
            )
            if existing.data:
                raise ConflictError(ALREADY_JOINED_MESSAGE)
        try:
            with translate_errors():
                response = (
                    client.table(ASSIGNMENTS_TABLE)
                    .insert(
                        {
                            "user_id": identity.id,
                            "activity_id": activity_id,
                            "status": AssignmentStatus.ACTIVE.value,
                        }
                    )
                    .execute()
                )
        except ConflictError as exc:
            # Lost a race with another join for the same activity
            raise ConflictError(ALREADY_JOINED_MESSAGE) from exc
        if not response.data:
            raise BackendError("Failed to join activity.")
        return Assignment.from_row(response.data[0])

    def update_status(self, identity: Identity, assignment_id: str, status: AssignmentStatus) -> None:
        with translate_errors():
            response = (
                self.client(identity)
                .table(ASSIGNMENTS_TABLE)
                .update({"status": status.value})
                .eq("id", assignment_id)
                .eq("user_id", identity.id)
                .execute()
            )
        if not response.data:
            raise NotFoundError("Assignment not found")


class SupabaseBackend:
    """Typed access to the managed backend's auth and tables."""

    def __init__(
        self,
        url: str,
        key: str,
        email_redirect_to: str | None = None,
        client_factory: ClientFactory | None = None,
    ):
        if not url or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be configured")
        self.url = url
        self.key = key
        self.email_redirect_to = email_redirect_to
        self._client_factory = client_factory or _default_client_factory

        self.accounts = AccountsCollection(self)
        self.profiles = ProfilesCollection(self)
        self.activities = ActivitiesCollection(self)
        self.assignments = AssignmentsCollection(self)

    def client(self, access_token: str | None = None) -> Client:
        client = self._client_factory(self.url, self.key)
        if access_token:
            client.postgrest.auth(access_token)
        return client


BACKEND_EXTENSION = "vms.backend"


def init_backend(app, backend=None) -> None:
    """Register ``backend`` on the app; ``None`` defers to config on first use."""
    app.extensions[BACKEND_EXTENSION] = backend


def get_backend():
    backend = current_app.extensions.get(BACKEND_EXTENSION)
    if backend is None:
        config = current_app.config
        backend = SupabaseBackend(
            config.get("SUPABASE_URL"),
            config.get("SUPABASE_ANON_KEY"),
            email_redirect_to=config.get("EMAIL_REDIRECT_URL"),
        )
        current_app.extensions[BACKEND_EXTENSION] = backend
        current_app.logger.info(f"Supabase backend configured for {backend.url}")
    return backend


__all__ = [
    "ACTIVITIES_TABLE",
    "ASSIGNMENTS_TABLE",
    "PROFILES_TABLE",
    "SupabaseBackend",
    "get_backend",
    "init_backend",
    "translate_errors",
]
