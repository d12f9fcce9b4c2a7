"""
Case status transitions.

Each function checks the transition against the status graph, applies the
change to the in-memory case and returns it. Persisting is the caller's job.
Failures raise the typed exceptions from ``cases.exceptions``.
"""
import logging

from django.utils import timezone

from .enums import CaseStatus
from .exceptions import CaseValidationError, InvalidState, SafetyViolation
from .safety import get_allowed_transitions, is_valid_transition, sanitize, validate_content_safety

logger = logging.getLogger(__name__)

MIN_CHIEF_COMPLAINT_LENGTH = 5
MIN_REVIEWER_LENGTH = 2
MIN_DECISION_LENGTH = 5


def _require_transition(case, target, message: str | None = None):
    if not is_valid_transition(case.status, target):
        raise InvalidState(
            message or f"Cannot transition from {case.status} to {target}",
            allowed_transitions=get_allowed_transitions(case.status),
        )


def _move(case, target):
    logger.info(f"Case {case.id}: {case.status} -> {target}")
    case.status = target


def submit_for_review(case):
    _require_transition(case, CaseStatus.PENDING_REVIEW)

    if len((case.chief_complaint or "").strip()) < MIN_CHIEF_COMPLAINT_LENGTH:
        raise CaseValidationError("Chief complaint is required before submitting for review")

    _move(case, CaseStatus.PENDING_REVIEW)
    return case


def mark_reviewed(case, reviewed_by, now=None):
    _require_transition(case, CaseStatus.REVIEWED)

    reviewer = sanitize(reviewed_by) if isinstance(reviewed_by, str) else None
    if not reviewer or len(reviewer) < MIN_REVIEWER_LENGTH:
        raise CaseValidationError("Reviewer identifier is required")

    case.reviewed_by = reviewer
    case.reviewed_at = now or timezone.now()
    _move(case, CaseStatus.REVIEWED)
    return case


def close(case, decision):
    _require_transition(case, CaseStatus.CLOSED, f"Cannot close case from {case.status} status")

    text = decision.strip() if isinstance(decision, str) else ""
    if len(text) < MIN_DECISION_LENGTH:
        raise CaseValidationError("Decision must be at least 5 characters")

    verdict = validate_content_safety(text)
    if not verdict.safe:
        logger.warning(f"Case {case.id}: close blocked, prohibited terms {verdict.violations}")
        raise SafetyViolation(
            "Decision contains prohibited diagnosis/prescription language",
            violations=verdict.violations,
        )

    case.doctor_decision = sanitize(text)
    _move(case, CaseStatus.CLOSED)
    return case


def return_to_draft(case):
    """Send a pending case back to intake for revision."""
    _require_transition(case, CaseStatus.DRAFT)
    _move(case, CaseStatus.DRAFT)
    return case
