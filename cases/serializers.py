# cases/serializers.py
from rest_framework import serializers

from .editability import editability_info
from .models import Case
from .safety import get_allowed_transitions


def case_meta(status) -> dict:
    """Computed on every read from the current status; never stored."""
    editable, read_only = editability_info(status)
    return {
        "allowedTransitions": get_allowed_transitions(status),
        "editableFields": editable,
        "readOnlyFields": read_only,
    }


class CaseSerializer(serializers.ModelSerializer):
    patientId = serializers.CharField(source="patient_id", read_only=True)
    chiefComplaint = serializers.CharField(source="chief_complaint", read_only=True)
    symptomDuration = serializers.CharField(source="symptom_duration", read_only=True, allow_null=True)
    rawNotes = serializers.CharField(source="raw_notes", read_only=True, allow_null=True)
    vitalSigns = serializers.JSONField(source="vital_signs", read_only=True)
    structuredSummary = serializers.CharField(source="structured_summary", read_only=True, allow_null=True)
    clinicalFlags = serializers.JSONField(source="clinical_flags", read_only=True)
    recommendationId = serializers.CharField(source="recommendation_id", read_only=True, allow_null=True)
    processingStatus = serializers.CharField(source="processing_status", read_only=True)
    doctorNotes = serializers.CharField(source="doctor_notes", read_only=True, allow_null=True)
    doctorDecision = serializers.CharField(source="doctor_decision", read_only=True, allow_null=True)
    reviewedBy = serializers.CharField(source="reviewed_by", read_only=True, allow_null=True)
    reviewedAt = serializers.DateTimeField(source="reviewed_at", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Case
        fields = (
            "id",
            "patientId",
            "status",
            "priority",
            "source",
            "chiefComplaint",
            "symptomDuration",
            "rawNotes",
            "vitalSigns",
            "attachments",
            "structuredSummary",
            "clinicalFlags",
            "recommendationId",
            "processingStatus",
            "doctorNotes",
            "doctorDecision",
            "reviewedBy",
            "reviewedAt",
            "version",
            "createdAt",
            "updatedAt",
        )
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["_meta"] = case_meta(instance.status)
        return data


def serialize_case(case) -> dict:
    return CaseSerializer(case).data


# ─────────────────────────────────────────────────────────────
# Action payloads (HTTP layer only; rule checks live in the service)
# ─────────────────────────────────────────────────────────────

class ReviewActionSerializer(serializers.Serializer):
    reviewedBy = serializers.CharField(required=False, allow_blank=True)


class CloseActionSerializer(serializers.Serializer):
    decision = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
