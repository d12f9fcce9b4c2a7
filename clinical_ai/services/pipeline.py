"""
AI processing pipeline for a case.

Stages: data structuring, clinical summarisation, integrated-care drafting,
cost optimisation and safety validation. A run is started by
``CaseProcessor.process`` and its progress is observed by polling
``get_processing_status``; there are no callbacks.

Delivery modes (settings.AI_PROCESSING_MODE):
- INLINE: run during the request
- THREAD: run in a background thread (non-blocking)
- QUEUE: only claim the case; `python manage.py process_pending_cases` runs it

Only one run may hold a case at a time. The claim is a compare-and-set on
``Case.processing_status``; a second trigger while a run is pending is
rejected. A failed run leaves the case lifecycle untouched and may be retried.
"""
import logging
import threading

from django.conf import settings
from django.db import close_old_connections, transaction
from django.utils import timezone

from cases.enums import CaseStatus, ProcessingStatus
from cases.repositories import CaseRepository
from cases.safety import STANDARD_DISCLAIMER, enforce_disclaimer, has_valid_disclaimer, validate_content_safety
from clinical_ai.enums import DeliveryMode, PipelineStage, ProcessingOutcome
from clinical_ai.models import ClinicalSummary, Recommendation
from clinical_ai.serializers import ClinicalSummarySerializer, RecommendationSerializer
from core.results import ErrorKind, ServiceResult
from patients.services import PatientLookup
from .recommendations import (
    APPROACH,
    CONSTITUTIONAL_NOTES,
    DEFAULT,
    clinical_flags_for,
    draft_recommendation,
    structured_summary_for,
)
from .summary import AISummaryGenerator, case_snapshot

logger = logging.getLogger(__name__)

STAGE_DESCRIPTIONS = {
    PipelineStage.DATA_STRUCTURING: "Normalise intake data and derive clinical flags",
    PipelineStage.CLINICAL_SUMMARIZATION: "Summarise reported symptoms and risk indicators",
    PipelineStage.INTEGRATED_CARE_DRAFTING: "Draft allopathy and ayurveda advisory tracks",
    PipelineStage.COST_OPTIMIZATION: "Prefer generic options and attach a cost estimate",
    PipelineStage.SAFETY_VALIDATION: "Remove prohibited language and enforce the disclaimer",
}


def delivery_mode(mode=None) -> str:
    value = (mode or getattr(settings, "AI_PROCESSING_MODE", DeliveryMode.THREAD) or DeliveryMode.THREAD).upper()
    return value if value in DeliveryMode.values else DeliveryMode.QUEUE.value


def _safe_items(items) -> list:
    return [i for i in items or [] if validate_content_safety(str(i)).safe]


def apply_safety_validation(draft: dict) -> dict:
    """
    Drop list entries that carry prohibited language, fall back to template
    text for unsafe scalar fields, and stamp the disclaimer.
    """
    out = dict(draft)
    allopathy = dict(out.get("allopathy") or {})
    ayurveda = dict(out.get("ayurveda") or {})

    if not validate_content_safety(allopathy.get("approach")).safe:
        allopathy["approach"] = APPROACH[DEFAULT]
    allopathy["suggestedActions"] = _safe_items(allopathy.get("suggestedActions")) or [APPROACH[DEFAULT]]

    if not validate_content_safety(ayurveda.get("constitutionalNote")).safe:
        ayurveda["constitutionalNote"] = CONSTITUTIONAL_NOTES[DEFAULT]
    for key in ("dietaryGuidance", "lifestyleGuidance", "herbSuggestions", "yogaRecommendations"):
        ayurveda[key] = _safe_items(ayurveda.get(key))

    out["allopathy"] = allopathy
    out["ayurveda"] = ayurveda
    out["contraindications"] = _safe_items(out.get("contraindications"))
    out["redFlags"] = _safe_items(out.get("redFlags"))
    return enforce_disclaimer(out)


class CaseProcessor:

    def __init__(self, cases=None, patients=None, generator=None):
        self.cases = cases or CaseRepository()
        self.patients = patients or PatientLookup()
        self.generator = generator or AISummaryGenerator()

    # -----------------------------------------------------------------
    # trigger
    # -----------------------------------------------------------------
    def process(self, case_id, *, mode=None) -> ServiceResult:
        case = self.cases.find_by_id(case_id)
        if case is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"Case not found: {case_id}")
        if case.status == CaseStatus.CLOSED:
            return ServiceResult.fail(ErrorKind.INVALID_STATE, "Closed cases cannot be processed")
        if case.recommendation_id:
            return ServiceResult.ok({
                "caseId": case.id,
                "status": ProcessingOutcome.ALREADY_PROCESSED.value,
                "recommendationId": case.recommendation_id,
            })

        if not self.cases.claim_processing(case.id):
            current = self.cases.find_by_id(case.id)
            if current is not None and current.recommendation_id:
                return ServiceResult.ok({
                    "caseId": case.id,
                    "status": ProcessingOutcome.ALREADY_PROCESSED.value,
                    "recommendationId": current.recommendation_id,
                })
            return ServiceResult.fail(
                ErrorKind.INVALID_STATE,
                f"AI processing already in progress for case {case.id}",
                details={"status": ProcessingOutcome.ALREADY_PROCESSING.value},
            )

        mode = delivery_mode(mode)
        logger.info(f"Claimed case {case.id} for AI processing ({mode})")

        if mode == DeliveryMode.INLINE:
            return self.run(case.id)
        if mode == DeliveryMode.THREAD:
            start_async_processing(case.id)
            outcome = ProcessingOutcome.STARTED
        else:
            outcome = ProcessingOutcome.QUEUED
        return ServiceResult.ok({
            "caseId": case.id,
            "status": outcome.value,
            "processingStatus": ProcessingStatus.PENDING.value,
        })

    # -----------------------------------------------------------------
    # run (case already claimed)
    # -----------------------------------------------------------------
    def run(self, case_id) -> ServiceResult:
        case = self.cases.find_by_id(case_id)
        if case is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"Case not found: {case_id}")

        stages = []
        try:
            patient = self.patients.get_by_id(case.patient_id)

            stages.append(PipelineStage.DATA_STRUCTURING.value)
            flags = clinical_flags_for(case.chief_complaint)

            stages.append(PipelineStage.CLINICAL_SUMMARIZATION.value)
            summary = self.generator.generate(case_snapshot(case))
            structured = summary["summary"] if summary.get("isAIGenerated") else structured_summary_for(case, patient)

            stages.append(PipelineStage.INTEGRATED_CARE_DRAFTING.value)
            draft = draft_recommendation(
                case,
                prakriti=getattr(patient, "prakriti", None),
                risk_flags=summary.get("riskFlags"),
            )

            stages.append(PipelineStage.COST_OPTIMIZATION.value)
            draft["allopathy"]["genericFirst"] = True

            stages.append(PipelineStage.SAFETY_VALIDATION.value)
            draft = apply_safety_validation(draft)
            if not has_valid_disclaimer(draft):
                raise ValueError("Recommendation is missing its disclaimer")

            with transaction.atomic():
                self._save_summary(case.id, summary)
                recommendation = self._save_recommendation(case.id, draft)
                attached = self.cases.complete_processing(
                    case.id,
                    structured_summary=structured,
                    clinical_flags=flags,
                    recommendation=recommendation,
                )
                if not attached:
                    transaction.set_rollback(True)
        except Exception as e:
            logger.exception(f"AI processing failed for case {case_id} at {stages[-1] if stages else 'start'}")
            self.cases.fail_processing(case_id, f"{type(e).__name__}: {e}")
            return ServiceResult.fail(
                ErrorKind.PROCESSING_ERROR,
                f"AI processing failed for case {case_id}",
                details={"status": ProcessingOutcome.FAILED.value, "stages": stages},
            )

        if not attached:
            # closed or re-claimed while we were working; keep the existing state
            logger.warning(f"Discarded AI output for case {case_id}: case no longer pending")
            self.cases.fail_processing(case_id, "Case changed state during processing")
            return ServiceResult.fail(
                ErrorKind.INVALID_STATE,
                f"Case {case_id} is no longer awaiting processing",
                details={"stages": stages},
            )

        logger.info(f"AI processing completed for case {case_id} ({recommendation.id})")
        return ServiceResult.ok({
            "caseId": case_id,
            "status": ProcessingOutcome.COMPLETED.value,
            "recommendationId": recommendation.id,
            "stages": stages,
            "isAIGenerated": bool(summary.get("isAIGenerated")),
        })

    def _save_summary(self, case_id, summary: dict) -> ClinicalSummary:
        obj, _ = ClinicalSummary.objects.update_or_create(
            case_file_id=case_id,
            defaults={
                "summary": summary.get("summary") or "",
                "risk_flags": summary.get("riskFlags") or [],
                "urgency_level": summary.get("urgencyLevel") or "ROUTINE",
                "key_symptoms": summary.get("keySymptoms") or [],
                "suggested_follow_up": summary.get("suggestedFollowUp") or "",
                "confidence_score": summary.get("confidenceScore") or 0,
                "model_version": summary.get("modelVersion") or "",
                "is_ai_generated": bool(summary.get("isAIGenerated")),
                "processing_time_ms": summary.get("processingTimeMs") or 0,
                "disclaimer": summary.get("disclaimer") or STANDARD_DISCLAIMER,
            },
        )
        return obj

    def _save_recommendation(self, case_id, draft: dict) -> Recommendation:
        return Recommendation.objects.create(
            case_file_id=case_id,
            generated_at=draft.get("generatedAt") or timezone.now(),
            ai_model_version=draft["aiModelVersion"],
            confidence_score=draft["confidenceScore"],
            allopathy=draft["allopathy"],
            ayurveda=draft["ayurveda"],
            contraindications=draft["contraindications"],
            red_flags=draft["redFlags"],
            estimated_cost_range=draft["estimatedCostRange"],
            disclaimer=draft["disclaimer"],
        )

    # -----------------------------------------------------------------
    # reads / maintenance
    # -----------------------------------------------------------------
    def get_processing_status(self, case_id) -> ServiceResult:
        case = self.cases.find_by_id(case_id)
        if case is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"Case not found: {case_id}")
        return ServiceResult.ok({
            "caseId": case.id,
            "caseStatus": case.status,
            "processingStatus": case.processing_status,
            "recommendationId": case.recommendation_id,
            "hasSummary": ClinicalSummary.objects.filter(case_file_id=case.id).exists(),
            "error": case.processing_error or None,
        })

    def get_recommendation(self, case_id) -> ServiceResult:
        case = self.cases.find_by_id(case_id)
        if case is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"Case not found: {case_id}")
        rec = Recommendation.objects.filter(pk=case.recommendation_id).first() if case.recommendation_id else None
        if rec is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"No recommendation generated for case {case_id}")
        return ServiceResult.ok(RecommendationSerializer(rec).data)

    def get_summary(self, case_id) -> ServiceResult:
        if self.cases.find_by_id(case_id) is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"Case not found: {case_id}")
        summary = ClinicalSummary.objects.filter(case_file_id=case_id).first()
        if summary is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"No summary generated for case {case_id}")
        return ServiceResult.ok(ClinicalSummarySerializer(summary).data)

    def delete_recommendation(self, case_id) -> ServiceResult:
        """Remove generated output so the case can be processed again."""
        case = self.cases.find_by_id(case_id)
        if case is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"Case not found: {case_id}")
        if case.status == CaseStatus.CLOSED:
            return ServiceResult.fail(ErrorKind.INVALID_STATE, "Closed cases cannot be modified")
        if not case.recommendation_id:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, f"No recommendation generated for case {case_id}")

        rec_id = case.recommendation_id
        with transaction.atomic():
            self.cases.reset_processing(case.id)
            Recommendation.objects.filter(pk=rec_id).delete()
            ClinicalSummary.objects.filter(case_file_id=case.id).delete()
        logger.info(f"Deleted recommendation {rec_id} for case {case.id}")
        return ServiceResult.ok({"caseId": case.id, "deletedRecommendationId": rec_id})

    def pipeline_info(self) -> ServiceResult:
        return ServiceResult.ok({
            "stages": [
                {"stage": stage.value, "order": idx, "description": STAGE_DESCRIPTIONS[stage]}
                for idx, stage in enumerate(PipelineStage, start=1)
            ],
            "mode": delivery_mode(),
            "aiAvailable": self.generator.is_available,
            "model": self.generator.model if self.generator.is_available else None,
        })


def start_async_processing(case_id):
    """Run an already-claimed case in a background thread."""
    def _run():
        close_old_connections()
        try:
            CaseProcessor().run(case_id)
        finally:
            close_old_connections()

    t = threading.Thread(target=_run, name=f"case-ai-{case_id}", daemon=True)
    t.start()


def get_processor() -> CaseProcessor:
    return CaseProcessor()
