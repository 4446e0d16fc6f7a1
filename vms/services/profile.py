"""Profile page: view and edit the volunteer's own profile."""

from __future__ import annotations

from typing import Any, Mapping

from flask import current_app

from vms.forms.validation import FORM_ERROR_SUMMARY, validate_profile
from vms.models import Profile
from vms.services.notifications import Notice, failure, failure_from, info, success
from vms.services.session import SessionContext
from vms.services.sync import MutationInProgress, ViewState


def _clean(value: Any) -> str:
    return (value or "").strip()


def profile_changes(record: Mapping[str, Any]) -> dict[str, Any]:
    """Normalise submitted fields into the row update; blanks become NULL."""
    skills = list(record.get("skills") or [])
    return {
        "full_name": _clean(record.get("full_name")),
        "phone": _clean(record.get("phone")),
        "city": _clean(record.get("city")) or None,
        "availability": record.get("availability") or None,
        "skills": skills or None,
        "bio": _clean(record.get("bio")) or None,
    }


class ProfilePage:
    def __init__(self, backend, session: SessionContext):
        self.backend = backend
        self.session = session
        self.identity = None
        self.errors: dict[str, str] = {}
        self.profile: ViewState[Profile | None] = ViewState(None, name="profile")

    def mount(self) -> bool:
        self.identity = self.session.identity
        if self.identity is None:
            return False
        identity = self.identity
        return self.profile.load(lambda: self.backend.profiles.get_one(identity))

    @property
    def email(self) -> str:
        profile = self.profile.value
        if profile and profile.email:
            return profile.email
        return self.identity.email if self.identity else ""

    def form_data(self) -> dict[str, Any]:
        profile = self.profile.value
        if profile is None:
            return {"full_name": "", "phone": "", "city": "", "availability": "", "skills": [], "bio": ""}
        return {
            "full_name": profile.full_name or "",
            "phone": profile.phone or "",
            "city": profile.city or "",
            "availability": profile.availability or "",
            "skills": list(profile.skills),
            "bio": profile.bio or "",
        }

    def save(self, record: Mapping[str, Any]) -> Notice:
        if self.identity is None:
            return failure("Login Required", "Please login to update your profile.")

        self.errors = validate_profile(record)
        if self.errors:
            return failure("Validation Error", FORM_ERROR_SUMMARY)

        identity = self.identity
        changes = profile_changes(record)
        try:
            mutation = self.profile.mutate(
                identity.id,
                lambda current: current.with_changes(changes) if current is not None else current,
                lambda: self.backend.profiles.update(identity, changes),
            )
        except MutationInProgress:
            return info("Saving...", "Your profile is already being saved.")

        if mutation.committed:
            current_app.logger.info(f"Profile updated for {identity.email}")
            return success("Profile Updated", "Your profile has been saved successfully.")
        return failure_from("Update Failed", mutation.error, fallback="Failed to update profile.")


__all__ = ["ProfilePage", "profile_changes"]
