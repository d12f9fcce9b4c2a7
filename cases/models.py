import uuid

from django.db import models

from patients.models import Patient
from .enums import CasePriority, CaseSource, CaseStatus, ProcessingStatus


def generate_case_id() -> str:
    return f"case_{uuid.uuid4().hex[:8]}"


class Case(models.Model):
    id = models.CharField(primary_key=True, max_length=32, default=generate_case_id, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="cases")

    status = models.CharField(max_length=16, choices=CaseStatus.choices, default=CaseStatus.DRAFT)
    priority = models.CharField(max_length=16, choices=CasePriority.choices, default=CasePriority.ROUTINE)
    source = models.CharField(max_length=16, choices=CaseSource.choices, default=CaseSource.DIRECT)

    # clinical input (editable while DRAFT)
    chief_complaint = models.TextField()
    symptom_duration = models.CharField(max_length=100, blank=True, null=True)
    raw_notes = models.TextField(blank=True, null=True)
    vital_signs = models.JSONField(null=True, blank=True)
    attachments = models.JSONField(default=list, blank=True)

    # AI-derived (system managed)
    structured_summary = models.TextField(blank=True, null=True)
    clinical_flags = models.JSONField(default=list, blank=True)
    recommendation = models.OneToOneField(
        "clinical_ai.Recommendation",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="case",
    )
    processing_status = models.CharField(
        max_length=16, choices=ProcessingStatus.choices, default=ProcessingStatus.NOT_STARTED
    )
    processing_error = models.TextField(blank=True, default="")

    # doctor review
    doctor_notes = models.TextField(blank=True, null=True)
    doctor_decision = models.TextField(blank=True, null=True)
    reviewed_by = models.CharField(max_length=100, blank=True, null=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)

    # optimistic concurrency
    version = models.PositiveIntegerField(default=1)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["priority", "created_at"]),
            models.Index(fields=["patient", "created_at"]),
            models.Index(fields=["processing_status"]),
        ]
        ordering = ["-created_at"]

    @property
    def is_closed(self) -> bool:
        return self.status == CaseStatus.CLOSED

    def __str__(self):
        return f"{self.id} [{self.status}/{self.priority}] P:{self.patient_id}"
