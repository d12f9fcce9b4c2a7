"""
Case persistence.

``CaseRepository`` is the only code that writes ``Case`` rows. Every write is
a compare-and-set on ``version``, so a stale in-memory case can never
overwrite a newer one. Test doubles implement the same methods in memory.
"""
import logging

from django.db.models import F
from django.utils import timezone

from audit.services import log_action
from .enums import CaseStatus, ProcessingStatus
from .exceptions import ConcurrentModification
from .models import Case

logger = logging.getLogger(__name__)


class CaseRepository:

    def find_by_id(self, case_id) -> Case | None:
        if not case_id:
            return None
        return Case.objects.filter(pk=str(case_id)).first()

    def find_all(self, *, status=None, priority=None, patient_id=None, source=None) -> list[Case]:
        q = Case.objects.all()
        if status:
            q = q.filter(status=status)
        if priority:
            q = q.filter(priority=priority)
        if patient_id:
            q = q.filter(patient_id=patient_id)
        if source:
            q = q.filter(source=source)
        return list(q)

    def create(self, **fields) -> Case:
        case = Case.objects.create(**fields)
        logger.info(f"Created case {case.id} for patient {case.patient_id} ({case.priority})")
        return case

    def update(self, case: Case, fields) -> Case:
        """
        Persist ``fields`` of ``case`` if nobody else saved it since it was read.
        Raises ConcurrentModification otherwise.
        """
        expected = case.version
        now = timezone.now()

        values = {}
        for name in fields:
            f = Case._meta.get_field(name)
            values[f.attname] = getattr(case, f.attname)
        values["version"] = expected + 1
        values["updated_at"] = now

        updated = Case.objects.filter(pk=case.pk, version=expected).update(**values)
        if not updated:
            logger.warning(f"Case {case.pk}: version conflict at v{expected}")
            raise ConcurrentModification("Case was modified concurrently; reload and retry")

        case.version = expected + 1
        case.updated_at = now
        return case

    def record_transition(self, case: Case, from_status, to_status, extra=None):
        log_action(
            obj=case,
            title=f"Case {from_status} -> {to_status}",
            extra={"from": str(from_status), "to": str(to_status), **(extra or {})},
        )

    # -----------------------------------------------------------------
    # AI processing
    # -----------------------------------------------------------------
    def claim_processing(self, case_id) -> bool:
        """
        Atomically mark a case as being processed. Only one caller can win for
        a given case; closed cases and cases that already have a
        recommendation are never claimed.
        """
        claimed = (
            Case.objects.filter(pk=case_id, recommendation__isnull=True)
            .exclude(status=CaseStatus.CLOSED)
            .exclude(processing_status=ProcessingStatus.PENDING)
            .update(
                processing_status=ProcessingStatus.PENDING,
                processing_error="",
                version=F("version") + 1,
                updated_at=timezone.now(),
            )
        )
        return claimed == 1

    def complete_processing(self, case_id, *, structured_summary, clinical_flags, recommendation) -> bool:
        done = (
            Case.objects.filter(pk=case_id, processing_status=ProcessingStatus.PENDING)
            .exclude(status=CaseStatus.CLOSED)
            .update(
                structured_summary=structured_summary,
                clinical_flags=list(clinical_flags or []),
                recommendation=recommendation,
                processing_status=ProcessingStatus.COMPLETED,
                processing_error="",
                version=F("version") + 1,
                updated_at=timezone.now(),
            )
        )
        return done == 1

    def fail_processing(self, case_id, error: str) -> bool:
        done = (
            Case.objects.filter(pk=case_id, processing_status=ProcessingStatus.PENDING)
            .update(
                processing_status=ProcessingStatus.FAILED,
                processing_error=(error or "")[:2000],
                version=F("version") + 1,
                updated_at=timezone.now(),
            )
        )
        return done == 1

    def reset_processing(self, case_id) -> bool:
        done = (
            Case.objects.filter(pk=case_id)
            .exclude(status=CaseStatus.CLOSED)
            .update(
                structured_summary=None,
                clinical_flags=[],
                recommendation=None,
                processing_status=ProcessingStatus.NOT_STARTED,
                processing_error="",
                version=F("version") + 1,
                updated_at=timezone.now(),
            )
        )
        return done == 1

    def find_pending_processing(self, limit: int = 50) -> list[Case]:
        return list(
            Case.objects.filter(processing_status=ProcessingStatus.PENDING)
            .exclude(status=CaseStatus.CLOSED)
            .order_by("updated_at")[:limit]
        )
