"""
Input shape validation for case create / update payloads.

Validation problems are reported as a flat list of ``{"path": [...], "message": str}``
entries, one per violated field, so callers can point at the exact input.
"""
from rest_framework import serializers
from rest_framework.settings import api_settings

from .enums import AttachmentType, CasePriority

MAX_ATTACHMENTS = 10
MIN_COMPLAINT_LENGTH = 5
COMPLAINT_TOO_SHORT = f"Chief complaint must be at least {MIN_COMPLAINT_LENGTH} characters"


class VitalSignsInput(serializers.Serializer):
    temperature = serializers.FloatField(min_value=90, max_value=110, required=False, allow_null=True)
    bloodPressure = serializers.RegexField(
        r"^\d{2,3}/\d{2,3}$",
        required=False,
        allow_null=True,
        error_messages={"invalid": "Blood pressure must look like 120/80"},
    )
    pulseRate = serializers.IntegerField(min_value=30, max_value=250, required=False, allow_null=True)
    weight = serializers.FloatField(min_value=1, max_value=500, required=False, allow_null=True)


class AttachmentInput(serializers.Serializer):
    type = serializers.ChoiceField(choices=AttachmentType.choices)
    description = serializers.CharField(min_length=1, max_length=500)
    url = serializers.URLField(required=False, allow_null=True)


class _AttachmentsMixin:
    def validate_attachments(self, value):
        if value and len(value) > MAX_ATTACHMENTS:
            raise serializers.ValidationError(f"At most {MAX_ATTACHMENTS} attachments are allowed")
        return value


class CaseCreateInput(_AttachmentsMixin, serializers.Serializer):
    patientId = serializers.CharField(max_length=32)
    chiefComplaint = serializers.CharField(
        min_length=MIN_COMPLAINT_LENGTH,
        max_length=1000,
        error_messages={"min_length": COMPLAINT_TOO_SHORT},
    )
    symptomDuration = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    rawNotes = serializers.CharField(max_length=5000, required=False, allow_blank=True, allow_null=True)
    vitalSigns = VitalSignsInput(required=False, allow_null=True)
    attachments = AttachmentInput(many=True, required=False)
    priority = serializers.ChoiceField(choices=CasePriority.choices, required=False, default=CasePriority.ROUTINE)


class CaseUpdateInput(_AttachmentsMixin, serializers.Serializer):
    chiefComplaint = serializers.CharField(
        min_length=MIN_COMPLAINT_LENGTH,
        max_length=1000,
        required=False,
        error_messages={"min_length": COMPLAINT_TOO_SHORT},
    )
    symptomDuration = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    rawNotes = serializers.CharField(max_length=5000, required=False, allow_blank=True, allow_null=True)
    vitalSigns = VitalSignsInput(required=False, allow_null=True)
    attachments = AttachmentInput(many=True, required=False)
    priority = serializers.ChoiceField(choices=CasePriority.choices, required=False)
    doctorNotes = serializers.CharField(max_length=5000, required=False, allow_blank=True, allow_null=True)
    doctorDecision = serializers.CharField(max_length=2000, required=False, allow_blank=True, allow_null=True)
    reviewedBy = serializers.CharField(min_length=2, max_length=100, required=False)


def flatten_errors(errors, path=()) -> list[dict]:
    """Turn DRF's nested ``serializer.errors`` into path/message pairs."""
    out = []
    if isinstance(errors, dict):
        for key, value in errors.items():
            sub = path if key == api_settings.NON_FIELD_ERRORS_KEY else path + (key,)
            out.extend(flatten_errors(value, sub))
    elif isinstance(errors, (list, tuple)):
        for idx, item in enumerate(errors):
            if isinstance(item, (dict, list, tuple)):
                out.extend(flatten_errors(item, path + (idx,)))
            else:
                out.append({"path": list(path), "message": str(item)})
    else:
        out.append({"path": list(path), "message": str(errors)})
    return out


def validate_input(serializer_class, data) -> tuple[dict | None, list[dict]]:
    """Returns ``(validated_data, [])`` or ``(None, errors)``."""
    ser = serializer_class(data=data)
    if ser.is_valid():
        return dict(ser.validated_data), []
    return None, flatten_errors(ser.errors)
