"""Open opportunities page: browse open activities and join them."""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from vms.models import Activity, AssignmentStatus
from vms.services.backend import ALREADY_JOINED_MESSAGE
from vms.services.notifications import Notice, failure, failure_from, info, success
from vms.services.session import SessionContext
from vms.services.sync import MutationInProgress, ViewState

DEFAULT_CAPACITY = 10
DEFAULT_CATEGORY = "General"
DEFAULT_DESCRIPTION = "Join us for this volunteer activity."
DEFAULT_IMAGES = (
    "https://images.unsplash.com/photo-1576091160550-2173dba999ef?auto=format&fit=crop&w=600&q=80",
    "https://images.unsplash.com/photo-1503676260728-1c00da094a0b?auto=format&fit=crop&w=600&q=80",
    "https://images.unsplash.com/photo-1593113598332-cd59a0c3a9e2?auto=format&fit=crop&w=600&q=80",
    "https://images.unsplash.com/photo-1559027615-cd4628902d4a?auto=format&fit=crop&w=600&q=80",
)


@dataclass(frozen=True)
class OpportunityCard:
    activity: Activity
    image_url: str
    category: str
    description: str
    spots_left: int
    is_full: bool
    is_joined: bool
    can_join: bool
    action: str

    @property
    def spots_label(self) -> str:
        return f"{self.spots_left} spots left" if self.spots_left > 0 else "No spots left"

    def to_dict(self) -> dict:
        activity = self.activity
        return {
            "id": activity.id,
            "title": activity.title,
            "description": self.description,
            "location": activity.location,
            "start_date": activity.start_date.isoformat() if activity.start_date else None,
            "end_date": activity.end_date.isoformat() if activity.end_date else None,
            "category": self.category,
            "image_url": self.image_url,
            "spots_left": self.spots_left,
            "is_full": self.is_full,
            "is_joined": self.is_joined,
            "can_join": self.can_join,
            "action": self.action,
        }


class OpportunitiesPage:
    def __init__(self, backend, session: SessionContext, default_capacity: int = DEFAULT_CAPACITY):
        self.backend = backend
        self.session = session
        self.default_capacity = default_capacity
        self.identity = None
        self.activities: ViewState[list[Activity]] = ViewState([], name="open activities")
        self.joined: ViewState[frozenset[str]] = ViewState(frozenset(), name="joined activity ids")

    def mount(self) -> bool:
        self.identity = self.session.identity
        loaded = self.activities.load(self.backend.activities.list_open)
        if self.identity is not None:
            identity = self.identity
            loaded = self.joined.load(
                lambda: frozenset(
                    a.activity_id
                    for a in self.backend.assignments.list_for(identity, AssignmentStatus.ACTIVE)
                )
            ) and loaded
        return loaded

    def find(self, activity_id: str) -> tuple[int, Activity] | None:
        for index, activity in enumerate(self.activities.value):
            if activity.id == activity_id:
                return index, activity
        return None

    def card_for(self, activity: Activity, index: int) -> OpportunityCard:
        capacity = activity.max_volunteers or self.default_capacity
        spots_left = capacity - (activity.current_volunteers or 0)
        is_full = spots_left <= 0
        is_joined = activity.id in self.joined.value
        if is_joined:
            action = "joined"
        elif is_full:
            action = "full"
        elif self.identity is not None:
            action = "join"
        else:
            action = "register"
        return OpportunityCard(
            activity=activity,
            image_url=activity.image_url or DEFAULT_IMAGES[index % len(DEFAULT_IMAGES)],
            category=activity.category or DEFAULT_CATEGORY,
            description=activity.description or DEFAULT_DESCRIPTION,
            spots_left=spots_left,
            is_full=is_full,
            is_joined=is_joined,
            can_join=action == "join",
            action=action,
        )

    def cards(self) -> list[OpportunityCard]:
        return [self.card_for(activity, index) for index, activity in enumerate(self.activities.value)]

    def join(self, activity_id: str) -> Notice:
        if self.identity is None:
            return failure("Login Required", "Please login to join activities.")

        found = self.find(activity_id)
        if found is None:
            return failure("Failed to Join", "Activity not found")
        card = self.card_for(found[1], found[0])
        if card.is_joined:
            return failure("Failed to Join", ALREADY_JOINED_MESSAGE)
        if card.is_full:
            return failure("Failed to Join", "This activity is full.")

        identity = self.identity
        try:
            mutation = self.joined.mutate(
                activity_id,
                lambda ids: ids | {activity_id},
                lambda: self.backend.assignments.insert(identity, activity_id),
            )
        except MutationInProgress:
            return info("Joining...", "Your request to join this activity is already in progress.")

        if mutation.committed:
            current_app.logger.info(f"{identity.email} joined activity {activity_id}")
            return success("Successfully Joined!", "You have been added to this volunteer activity.")
        return failure_from("Failed to Join", mutation.error)


__all__ = ["DEFAULT_CAPACITY", "DEFAULT_IMAGES", "OpportunitiesPage", "OpportunityCard"]
