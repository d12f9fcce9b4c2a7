"""
Case orchestration.

``CaseService`` is the only place that mutates persisted case state. It
composes the lifecycle, editability and content-safety rules, and reports
expected failures as ``ServiceResult`` values instead of raising. Persistence
faults (``DatabaseError``) are left to propagate to the API boundary.
"""
import logging
import math

from django.conf import settings

from core.results import ErrorKind, ServiceResult
from patients.serializers import PatientSummarySerializer
from patients.services import PatientLookup
from cases import lifecycle
from cases.editability import FIELD_ATTRS, blocked_fields
from cases.enums import CasePriority, CaseSource, CaseStatus, WarningType
from cases.exceptions import CaseError, InvalidState
from cases.repositories import CaseRepository
from cases.safety import check_emergency, sanitize, suggest_priority, validate_content_safety
from cases.serializers import serialize_case
from cases.validation import (
    COMPLAINT_TOO_SHORT,
    MIN_COMPLAINT_LENGTH,
    CaseCreateInput,
    CaseUpdateInput,
    validate_input,
)
from .queue import order_queue, queue_stats

logger = logging.getLogger(__name__)

# free-text fields scanned for prohibited language before acceptance
SAFETY_SCANNED_FIELDS = ("chiefComplaint", "doctorNotes", "doctorDecision")
FREE_TEXT_FIELDS = ("chiefComplaint", "symptomDuration", "rawNotes", "doctorNotes", "doctorDecision", "reviewedBy")


def _error_result(exc: CaseError) -> ServiceResult:
    return ServiceResult.fail(
        exc.kind,
        exc.message,
        details=exc.details,
        allowed_transitions=getattr(exc, "allowed_transitions", None),
    )


def _short_complaint(validated, message) -> ServiceResult | None:
    """Markup can shrink a complaint below the minimum once sanitized."""
    if "chiefComplaint" not in validated:
        return None
    if len(sanitize(validated["chiefComplaint"]) or "") >= MIN_COMPLAINT_LENGTH:
        return None
    return ServiceResult.fail(
        ErrorKind.VALIDATION_ERROR,
        message,
        details=[{"path": ["chiefComplaint"], "message": COMPLAINT_TOO_SHORT}],
    )


def _page_param(raw, default: int, lo: int, hi: int | None = None) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value < lo:
        return lo
    if hi is not None and value > hi:
        return hi
    return value


class CaseService:
    """
    ``cases`` must provide find_by_id / find_all / create / update /
    record_transition; ``patients`` must provide get_by_id.
    """

    def __init__(self, cases, patients):
        self.cases = cases
        self.patients = patients

    # -----------------------------------------------------------------
    # create / read
    # -----------------------------------------------------------------
    def submit_case(self, data, *, source=CaseSource.DIRECT) -> ServiceResult:
        validated, errors = validate_input(CaseCreateInput, data)
        if errors:
            return ServiceResult.fail(ErrorKind.VALIDATION_ERROR, "Invalid case data", details=errors)
        short = _short_complaint(validated, "Invalid case data")
        if short is not None:
            return short

        patient_id = validated["patientId"]
        if self.patients.get_by_id(patient_id) is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"Patient not found: {patient_id}")

        chief_complaint = sanitize(validated["chiefComplaint"])
        raw_notes = sanitize(validated.get("rawNotes")) or None

        verdict = validate_content_safety(chief_complaint)
        if not verdict.safe:
            return ServiceResult.fail(
                ErrorKind.SAFETY_VIOLATION,
                "Content contains prohibited diagnosis/prescription language",
                details=verdict.violations,
            )

        requested_priority = validated.get("priority") or CasePriority.ROUTINE
        priority = requested_priority
        warnings = []

        emergency = check_emergency(chief_complaint)
        if emergency.is_emergency:
            priority = CasePriority.URGENT
            logger.warning(f"Emergency indicators for patient {patient_id}: {emergency.triggers}")
            warnings.append({
                "type": WarningType.EMERGENCY_ESCALATION.value,
                "message": emergency.message,
                "triggers": emergency.triggers,
            })

        suggestion = suggest_priority(chief_complaint, requested_priority)
        if suggestion.is_escalation:
            warnings.append({
                "type": WarningType.PRIORITY_SUGGESTION.value,
                "message": suggestion.reason,
                "suggestedPriority": str(suggestion.suggested_priority),
            })

        vital_signs = validated.get("vitalSigns")
        case = self.cases.create(
            patient_id=patient_id,
            status=CaseStatus.DRAFT,
            priority=priority,
            source=source,
            chief_complaint=chief_complaint,
            symptom_duration=sanitize(validated.get("symptomDuration")) or None,
            raw_notes=raw_notes,
            vital_signs=dict(vital_signs) if vital_signs else None,
            attachments=[dict(a) for a in validated.get("attachments") or []],
        )
        return ServiceResult.ok(serialize_case(case), warnings)

    def get_case(self, case_id) -> ServiceResult:
        case = self.cases.find_by_id(case_id)
        if case is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"Case not found: {case_id}")

        data = serialize_case(case)
        patient = self.patients.get_by_id(case.patient_id)
        if patient is not None:
            data["patient"] = PatientSummarySerializer(patient).data
        return ServiceResult.ok(data)

    def list_cases(self, filters=None) -> ServiceResult:
        """
        Filters: status, priority, patientId, page, limit. Unknown status or
        priority values are ignored rather than rejected.
        """
        filters = filters or {}
        status = filters.get("status")
        priority = filters.get("priority")
        if status not in CaseStatus.values:
            status = None
        if priority not in CasePriority.values:
            priority = None

        default_limit = getattr(settings, "CASES_PAGE_SIZE", 20)
        max_limit = getattr(settings, "CASES_MAX_PAGE_SIZE", 100)
        page = _page_param(filters.get("page"), 1, 1)
        limit = _page_param(filters.get("limit"), default_limit, 1, max_limit)

        ordered = order_queue(
            self.cases.find_all(status=status, priority=priority, patient_id=filters.get("patientId") or None)
        )
        total = len(ordered)
        start = (page - 1) * limit
        return ServiceResult.ok({
            "cases": [serialize_case(c) for c in ordered[start:start + limit]],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit) if total else 0,
            },
        })

    def get_patient_cases(self, patient_id) -> ServiceResult:
        if self.patients.get_by_id(patient_id) is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"Patient not found: {patient_id}")
        cases = sorted(
            self.cases.find_all(patient_id=patient_id),
            key=lambda c: c.created_at.timestamp() if c.created_at else 0.0,
            reverse=True,
        )
        return ServiceResult.ok([serialize_case(c) for c in cases])

    # -----------------------------------------------------------------
    # update
    # -----------------------------------------------------------------
    def update_case(self, case_id, patch) -> ServiceResult:
        case = self.cases.find_by_id(case_id)
        if case is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"Case not found: {case_id}")

        validated, errors = validate_input(CaseUpdateInput, patch)
        if errors:
            return ServiceResult.fail(ErrorKind.VALIDATION_ERROR, "Invalid update data", details=errors)
        short = _short_complaint(validated, "Invalid update data")
        if short is not None:
            return short

        # every key the client sent, including ones the validator does not know
        blocked = blocked_fields(list(patch.keys()), case.status)
        if blocked:
            return ServiceResult.fail(
                ErrorKind.INVALID_STATE,
                "Some fields cannot be edited in current status",
                details=blocked,
            )

        unsafe = []
        for name in SAFETY_SCANNED_FIELDS:
            if name in validated:
                unsafe += [t for t in validate_content_safety(validated[name]).violations if t not in unsafe]
        if unsafe:
            return ServiceResult.fail(
                ErrorKind.SAFETY_VIOLATION,
                "Content contains prohibited diagnosis/prescription language",
                details=unsafe,
            )

        changed = []
        for name, value in validated.items():
            if name in FREE_TEXT_FIELDS:
                value = sanitize(value)
            elif name == "vitalSigns":
                value = dict(value) if value else None
            elif name == "attachments":
                value = [dict(a) for a in value or []]
            attr = FIELD_ATTRS[name]
            setattr(case, attr, value)
            changed.append(attr)

        if not changed:
            return ServiceResult.ok(serialize_case(case))

        try:
            self.cases.update(case, changed)
        except InvalidState as exc:
            return _error_result(exc)
        return ServiceResult.ok(serialize_case(case))

    # -----------------------------------------------------------------
    # lifecycle wrappers
    # -----------------------------------------------------------------
    def _transition(self, case_id, apply, fields) -> ServiceResult:
        case = self.cases.find_by_id(case_id)
        if case is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"Case not found: {case_id}")

        from_status = case.status
        try:
            apply(case)
            self.cases.update(case, ["status", *fields])
        except CaseError as exc:
            # status only; the rejected case object is discarded by callers
            case.status = from_status
            return _error_result(exc)

        self.cases.record_transition(case, from_status, case.status)
        return ServiceResult.ok(serialize_case(case))

    def submit_for_review(self, case_id) -> ServiceResult:
        return self._transition(case_id, lifecycle.submit_for_review, [])

    def mark_as_reviewed(self, case_id, reviewed_by) -> ServiceResult:
        return self._transition(
            case_id,
            lambda c: lifecycle.mark_reviewed(c, reviewed_by),
            ["reviewed_by", "reviewed_at"],
        )

    def close_case(self, case_id, decision) -> ServiceResult:
        return self._transition(case_id, lambda c: lifecycle.close(c, decision), ["doctor_decision"])

    def return_to_draft(self, case_id) -> ServiceResult:
        return self._transition(case_id, lifecycle.return_to_draft, [])

    # -----------------------------------------------------------------
    # stats
    # -----------------------------------------------------------------
    def get_queue_stats(self) -> ServiceResult:
        return ServiceResult.ok(queue_stats(self.cases.find_all()))


def get_case_service() -> CaseService:
    return CaseService(CaseRepository(), PatientLookup())
