import uuid

from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator
from django.db import models

from cases.safety import MIN_DISCLAIMER_LENGTH, STANDARD_DISCLAIMER
from .enums import UrgencyLevel


def generate_recommendation_id() -> str:
    return f"rec_{uuid.uuid4().hex[:8]}"


class Recommendation(models.Model):
    """
    Advisory output for one case: an allopathy track and an ayurveda track,
    safety lists, a cost estimate and a mandatory disclaimer. The owning case
    points here through ``Case.recommendation``.
    """
    id = models.CharField(primary_key=True, max_length=32, default=generate_recommendation_id, editable=False)
    case_file_id = models.CharField(max_length=32, db_index=True)

    generated_at = models.DateTimeField()
    ai_model_version = models.CharField(max_length=64)
    confidence_score = models.PositiveSmallIntegerField(validators=[MinValueValidator(0), MaxValueValidator(100)])

    allopathy = models.JSONField(default=dict)
    ayurveda = models.JSONField(default=dict)
    contraindications = models.JSONField(default=list, blank=True)
    red_flags = models.JSONField(default=list, blank=True)
    estimated_cost_range = models.JSONField(default=dict)

    disclaimer = models.TextField(default=STANDARD_DISCLAIMER, validators=[MinLengthValidator(MIN_DISCLAIMER_LENGTH)])

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        # never persist without a usable disclaimer
        if len((self.disclaimer or "").strip()) < MIN_DISCLAIMER_LENGTH:
            self.disclaimer = STANDARD_DISCLAIMER
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.id} for {self.case_file_id} ({self.ai_model_version})"


class ClinicalSummary(models.Model):
    case_file_id = models.CharField(max_length=32, unique=True)

    summary = models.TextField()
    risk_flags = models.JSONField(default=list, blank=True)
    urgency_level = models.CharField(max_length=16, choices=UrgencyLevel.choices, default=UrgencyLevel.ROUTINE)
    key_symptoms = models.JSONField(default=list, blank=True)
    suggested_follow_up = models.TextField(blank=True)

    confidence_score = models.PositiveSmallIntegerField(default=0)
    model_version = models.CharField(max_length=64)
    is_ai_generated = models.BooleanField(default=False)
    processing_time_ms = models.PositiveIntegerField(default=0)
    disclaimer = models.TextField(default=STANDARD_DISCLAIMER)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "clinical summaries"

    def __str__(self):
        return f"Summary for {self.case_file_id} ({self.model_version})"
