"""
Adoption Intake Backend: Application Status State Machine
============================================================

What:  The transition table for application status and the checks built on it.
How:   Pure functions, no I/O. ApplicationService calls them before any write.

State Flow:
    DRAFT → SUBMITTED → UNDER_REVIEW → REQUIRES_DOCUMENTS | APPROVED | REJECTED
    SUBMITTED may also be decided directly, or sent back for documents.
    REQUIRES_DOCUMENTS → SUBMITTED (resubmission) | UNDER_REVIEW

Terminal States: APPROVED, REJECTED

DRAFT → SUBMITTED has preconditions (complete documents) and is only legal
through ApplicationService.submit; the generic update path refuses it.
"""

from typing import Dict, FrozenSet, List

from intake.exceptions import InvalidTransitionError
from intake.models.application import ApplicationStatus

ALLOWED_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.DRAFT: frozenset({ApplicationStatus.SUBMITTED}),
    ApplicationStatus.SUBMITTED: frozenset({
        ApplicationStatus.UNDER_REVIEW,
        ApplicationStatus.REQUIRES_DOCUMENTS,
        ApplicationStatus.APPROVED,
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.UNDER_REVIEW: frozenset({
        ApplicationStatus.REQUIRES_DOCUMENTS,
        ApplicationStatus.APPROVED,
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.REQUIRES_DOCUMENTS: frozenset({
        ApplicationStatus.SUBMITTED,
        ApplicationStatus.UNDER_REVIEW,
    }),
    ApplicationStatus.APPROVED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
}

# Statuses that only a reviewer sets; reviewed_at is stamped when one of them
# arrives together with a reviewer id.
REVIEW_STATUSES: FrozenSet[ApplicationStatus] = frozenset(ApplicationStatus) - {
    ApplicationStatus.DRAFT,
    ApplicationStatus.SUBMITTED,
}


def get_allowed_transitions(status: ApplicationStatus) -> List[ApplicationStatus]:
    """Targets reachable from `status`, in declaration order."""
    allowed = ALLOWED_TRANSITIONS.get(ApplicationStatus(status), frozenset())
    return [s for s in ApplicationStatus if s in allowed]


def can_transition(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    return ApplicationStatus(target) in ALLOWED_TRANSITIONS.get(ApplicationStatus(current), frozenset())


def is_terminal(status: ApplicationStatus) -> bool:
    return not ALLOWED_TRANSITIONS.get(ApplicationStatus(status))


def is_review_status(status: ApplicationStatus) -> bool:
    return ApplicationStatus(status) in REVIEW_STATUSES


def validate_transition(current: ApplicationStatus, target: ApplicationStatus) -> None:
    """
    Raise InvalidTransitionError unless `current → target` is in the table.

    The message names the current status and every legal target so the
    caller can correct the request.
    """
    current = ApplicationStatus(current)
    target = ApplicationStatus(target)
    if can_transition(current, target):
        return

    allowed = get_allowed_transitions(current)
    if allowed:
        hint = ", ".join(s.value for s in allowed)
    else:
        hint = "none (terminal status)"
    raise InvalidTransitionError(
        message=(
            f"Invalid status transition: {current.value} -> {target.value}. "
            f"Allowed transitions from {current.value}: {hint}"
        ),
        current_status=current.value,
        target_status=target.value,
        context={"allowed": [s.value for s in allowed]},
    )


def validate_update_transition(current: ApplicationStatus, target: ApplicationStatus) -> None:
    """
    Check a status change requested through the generic update operation.

    Re-setting the current status is not a transition and always passes.
    Leaving DRAFT is reserved for submit, which checks documents first.
    """
    current = ApplicationStatus(current)
    target = ApplicationStatus(target)
    if current == target:
        return
    if current == ApplicationStatus.DRAFT and target == ApplicationStatus.SUBMITTED:
        raise InvalidTransitionError(
            message=(
                "Draft applications must be submitted through the submit operation, "
                "which checks required documents"
            ),
            current_status=current.value,
            target_status=target.value,
        )
    validate_transition(current, target)
