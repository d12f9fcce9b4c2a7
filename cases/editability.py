"""
Which case fields a client may change, given the current status.

Field names are the API (camelCase) names. Categories are checked in a fixed
precedence and the first match wins:

1. immutable        - never editable
2. system-managed   - written by the platform only
3. pre-review-only  - editable while the case is a DRAFT
4. doctor-only      - editable once submitted, until CLOSED
5. priority         - editable until CLOSED
6. anything else    - rejected as unknown
"""
from dataclasses import dataclass

from .enums import CaseStatus

IMMUTABLE_FIELDS = ("id", "patientId", "createdAt")

SYSTEM_MANAGED_FIELDS = (
    "updatedAt",
    "structuredSummary",
    "clinicalFlags",
    "recommendationId",
)

PRE_REVIEW_ONLY_FIELDS = (
    "chiefComplaint",
    "symptomDuration",
    "rawNotes",
    "vitalSigns",
    "attachments",
)

DOCTOR_ONLY_FIELDS = ("doctorNotes", "doctorDecision", "reviewedBy")

PRIORITY_FIELD = "priority"

# Fields surfaced to clients in the _meta block.
META_FIELDS = (
    "chiefComplaint",
    "symptomDuration",
    "rawNotes",
    "vitalSigns",
    "attachments",
    "priority",
    "doctorNotes",
    "doctorDecision",
)

# API name -> model attribute, for fields a patch may carry.
FIELD_ATTRS = {
    "chiefComplaint": "chief_complaint",
    "symptomDuration": "symptom_duration",
    "rawNotes": "raw_notes",
    "vitalSigns": "vital_signs",
    "attachments": "attachments",
    "priority": "priority",
    "doctorNotes": "doctor_notes",
    "doctorDecision": "doctor_decision",
    "reviewedBy": "reviewed_by",
}


@dataclass(frozen=True)
class Editability:
    editable: bool
    reason: str

    def to_dict(self) -> dict:
        return {"editable": self.editable, "reason": self.reason}


def is_editable(field_name: str, status) -> Editability:
    if field_name in IMMUTABLE_FIELDS:
        return Editability(False, "Field is immutable after creation")

    if field_name in SYSTEM_MANAGED_FIELDS:
        return Editability(False, "Field is managed by the system")

    if field_name in PRE_REVIEW_ONLY_FIELDS:
        if status == CaseStatus.DRAFT:
            return Editability(True, "Editable in draft status")
        return Editability(False, "Field is locked after submission for review")

    if field_name in DOCTOR_ONLY_FIELDS:
        if status == CaseStatus.DRAFT:
            return Editability(False, "Doctor fields not available in draft")
        if status == CaseStatus.CLOSED:
            return Editability(False, "Case is closed")
        return Editability(True, "Doctor can edit this field")

    if field_name == PRIORITY_FIELD:
        if status == CaseStatus.CLOSED:
            return Editability(False, "Case is closed")
        return Editability(True, "Priority can always be adjusted")

    return Editability(False, "Unknown field")


def blocked_fields(field_names, status) -> list[dict]:
    """Every field in ``field_names`` that may not change, with the reason."""
    blocked = []
    for name in field_names:
        verdict = is_editable(name, status)
        if not verdict.editable:
            blocked.append({"field": name, "reason": verdict.reason})
    return blocked


def editability_info(status) -> tuple[list[str], list[str]]:
    editable, read_only = [], []
    for name in META_FIELDS:
        (editable if is_editable(name, status).editable else read_only).append(name)
    return editable, read_only
