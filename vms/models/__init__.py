from .models import (
    AVAILABILITY_LABELS,
    EDITABLE_PROFILE_FIELDS,
    SKILL_OPTIONS,
    Activity,
    ActivityStatus,
    Assignment,
    AssignmentStatus,
    Availability,
    Identity,
    Profile,
)

__all__ = [
    "AVAILABILITY_LABELS",
    "EDITABLE_PROFILE_FIELDS",
    "SKILL_OPTIONS",
    "Activity",
    "ActivityStatus",
    "Assignment",
    "AssignmentStatus",
    "Availability",
    "Identity",
    "Profile",
]
