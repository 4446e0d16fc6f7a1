"""My activities page: the volunteer's assignments grouped by status."""

from __future__ import annotations

from flask import current_app

from vms.models import Assignment, AssignmentStatus
from vms.services.notifications import Notice, failure, failure_from, info, success
from vms.services.session import SessionContext
from vms.services.sync import MutationInProgress, ViewState

PARTITIONS = (
    AssignmentStatus.ACTIVE.value,
    AssignmentStatus.COMPLETED.value,
    AssignmentStatus.CANCELLED.value,
)


def _mark(assignments: list[Assignment], assignment_id: str, status: AssignmentStatus) -> list[Assignment]:
    return [a.with_status(status) if a.id == assignment_id else a for a in assignments]


class ActivitiesPage:
    def __init__(self, backend, session: SessionContext):
        self.backend = backend
        self.session = session
        self.identity = None
        self.assignments: ViewState[list[Assignment]] = ViewState([], name="assignments")

    def mount(self) -> bool:
        self.identity = self.session.identity
        if self.identity is None:
            return False
        identity = self.identity
        return self.assignments.load(lambda: self.backend.assignments.list_for(identity))

    def partitions(self) -> dict[str, list[Assignment]]:
        groups: dict[str, list[Assignment]] = {status: [] for status in PARTITIONS}
        for assignment in self.assignments.value:
            if assignment.status in groups:
                groups[assignment.status].append(assignment)
        return groups

    def find(self, assignment_id: str) -> Assignment | None:
        return next((a for a in self.assignments.value if a.id == assignment_id), None)

    def cancel(self, assignment_id: str) -> Notice:
        if self.identity is None:
            return failure("Login Required", "Please login to manage your activities.")
        assignment = self.find(assignment_id)
        if assignment is None:
            return failure("Error", "Assignment not found")
        if not assignment.is_active:
            return failure("Error", "Only active activities can be cancelled.")

        identity = self.identity
        try:
            mutation = self.assignments.mutate(
                assignment_id,
                lambda items: _mark(items, assignment_id, AssignmentStatus.CANCELLED),
                lambda: self.backend.assignments.update_status(
                    identity, assignment_id, AssignmentStatus.CANCELLED
                ),
            )
        except MutationInProgress:
            return info("Cancelling...", "This activity is already being cancelled.")

        if mutation.committed:
            current_app.logger.info(f"{identity.email} cancelled assignment {assignment_id}")
            return success("Activity Cancelled", "You have been removed from this activity.")
        return failure_from("Error", mutation.error, fallback="Failed to cancel activity.")


__all__ = ["ActivitiesPage", "PARTITIONS"]
