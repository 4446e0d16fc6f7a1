"""Dashboard page: greeting, summary counts and current assignments."""

from __future__ import annotations

from dataclasses import dataclass

from vms.models import Assignment, AssignmentStatus, Profile
from vms.services.session import SessionContext
from vms.services.sync import ViewState

FALLBACK_NAME = "Volunteer"


@dataclass(frozen=True)
class Stat:
    key: str
    label: str
    value: int


class DashboardPage:
    def __init__(self, backend, session: SessionContext):
        self.backend = backend
        self.session = session
        self.identity = None
        self.profile: ViewState[Profile | None] = ViewState(None, name="profile")
        self.assignments: ViewState[list[Assignment]] = ViewState([], name="active assignments")

    def mount(self) -> bool:
        self.identity = self.session.identity
        if self.identity is None:
            return False
        identity = self.identity
        loaded = self.profile.load(lambda: self.backend.profiles.get_one(identity))
        loaded = self.assignments.load(
            lambda: self.backend.assignments.list_for(identity, AssignmentStatus.ACTIVE)
        ) and loaded
        return loaded

    @property
    def greeting_name(self) -> str:
        profile = self.profile.value
        return (profile.full_name if profile else "") or FALLBACK_NAME

    @property
    def top_skills(self) -> tuple[str, ...]:
        profile = self.profile.value
        return profile.skills[:3] if profile else ()

    def stats(self) -> list[Stat]:
        # Completed, hours and impact are not tracked by the backend yet.
        return [
            Stat("active", "Active Assignments", len(self.assignments.value)),
            Stat("completed", "Completed", 0),
            Stat("hours", "Hours Volunteered", 0),
            Stat("impact", "Impact Score", 0),
        ]


__all__ = ["DashboardPage", "Stat"]
