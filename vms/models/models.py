from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any

from flask_login import UserMixin


class ActivityStatus(Enum):
    OPEN = "open"
    CLOSED = "closed"
    COMPLETED = "completed"


class AssignmentStatus(Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Availability(Enum):
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    FLEXIBLE = "flexible"
    EVENINGS = "evenings"

    @property
    def label(self) -> str:
        return AVAILABILITY_LABELS[self]


AVAILABILITY_LABELS = {
    Availability.WEEKDAYS: "Weekdays Only",
    Availability.WEEKENDS: "Weekends Only",
    Availability.FLEXIBLE: "Flexible Schedule",
    Availability.EVENINGS: "Evenings Only",
}

SKILL_OPTIONS: tuple[str, ...] = (
    "Healthcare",
    "Education",
    "Relief Work",
    "Administration",
    "IT & Technology",
    "Communications",
    "Fundraising",
    "Community Outreach",
    "Transportation",
    "Other",
)


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value)
    # PostgREST emits "Z" for UTC timestamps
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _as_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


class Identity(UserMixin):
    """The signed-in volunteer as reported by the identity provider."""

    def __init__(
        self,
        id: str,
        email: str,
        access_token: str | None = None,
        refresh_token: str | None = None,
    ):
        self.id = id
        self.email = email
        self.access_token = access_token
        self.refresh_token = refresh_token

    @property
    def display_name(self) -> str:
        return (self.email or "").split("@")[0]

    @property
    def has_session(self) -> bool:
        return bool(self.access_token)

    def to_session(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
        }

    @classmethod
    def from_session(cls, data: dict[str, Any] | None) -> Identity | None:
        if not data or not data.get("id"):
            return None
        return cls(
            id=data["id"],
            email=data.get("email") or "",
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
        )

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Identity) and other.id == self.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"<Identity {self.email}>"


@dataclass(frozen=True)
class Profile:
    user_id: str
    full_name: str = ""
    email: str = ""
    phone: str = ""
    city: str | None = None
    availability: str | None = None
    skills: tuple[str, ...] = ()
    bio: str | None = None
    avatar_url: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Profile:
        return cls(
            user_id=row.get("user_id") or row.get("id") or "",
            full_name=row.get("full_name") or "",
            email=row.get("email") or "",
            phone=row.get("phone") or "",
            city=row.get("city"),
            availability=row.get("availability"),
            skills=tuple(row.get("skills") or ()),
            bio=row.get("bio"),
            avatar_url=row.get("avatar_url"),
        )

    def with_changes(self, changes: dict[str, Any]) -> Profile:
        allowed = {k: v for k, v in changes.items() if k in EDITABLE_PROFILE_FIELDS}
        if "skills" in allowed:
            allowed["skills"] = tuple(allowed["skills"] or ())
        return replace(self, **allowed)


EDITABLE_PROFILE_FIELDS = ("full_name", "phone", "city", "availability", "skills", "bio")


@dataclass(frozen=True)
class Activity:
    id: str
    title: str
    start_date: datetime | None = None
    description: str | None = None
    location: str | None = None
    end_date: datetime | None = None
    category: str | None = None
    status: str | None = None
    max_volunteers: int | None = None
    current_volunteers: int | None = None
    image_url: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Activity:
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            start_date=_parse_datetime(row.get("start_date")),
            description=row.get("description"),
            location=row.get("location"),
            end_date=_parse_datetime(row.get("end_date")),
            category=row.get("category"),
            status=row.get("status"),
            max_volunteers=_as_int(row.get("max_volunteers")),
            current_volunteers=_as_int(row.get("current_volunteers")),
            image_url=row.get("image_url"),
        )


@dataclass(frozen=True)
class Assignment:
    id: str
    activity_id: str
    status: str = AssignmentStatus.ACTIVE.value
    user_id: str | None = None
    assigned_at: datetime | None = None
    activity: Activity | None = field(default=None, compare=False)

    @property
    def is_active(self) -> bool:
        return self.status == AssignmentStatus.ACTIVE.value

    def with_status(self, status: AssignmentStatus | str) -> Assignment:
        value = status.value if isinstance(status, AssignmentStatus) else str(status)
        return replace(self, status=value)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Assignment:
        embedded = row.get("volunteer_activities")
        activity = Activity.from_row(embedded) if embedded else None
        activity_id = row.get("activity_id") or (activity.id if activity else "")
        return cls(
            id=str(row["id"]),
            activity_id=str(activity_id),
            status=row.get("status") or AssignmentStatus.ACTIVE.value,
            user_id=row.get("user_id"),
            assigned_at=_parse_datetime(row.get("assigned_at")),
            activity=activity,
        )
