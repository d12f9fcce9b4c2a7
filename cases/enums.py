from django.db import models


class CaseStatus(models.TextChoices):
    """
    Review lifecycle:
    - DRAFT: intake still editing clinical input
    - PENDING_REVIEW: submitted, waiting on a doctor
    - REVIEWED: doctor has reviewed; may be re-opened for another review
    - CLOSED: terminal, nothing changes afterwards
    """
    DRAFT = "DRAFT", "Draft"
    PENDING_REVIEW = "PENDING_REVIEW", "Pending review"
    REVIEWED = "REVIEWED", "Reviewed"
    CLOSED = "CLOSED", "Closed"


class CasePriority(models.TextChoices):
    ROUTINE = "ROUTINE", "Routine"
    ELEVATED = "ELEVATED", "Elevated"
    URGENT = "URGENT", "Urgent"


class AttachmentType(models.TextChoices):
    LAB_REPORT = "LAB_REPORT", "Lab report"
    PRESCRIPTION = "PRESCRIPTION", "Prescription"
    IMAGE = "IMAGE", "Image"
    OTHER = "OTHER", "Other"


class ProcessingStatus(models.TextChoices):
    """State of the asynchronous summary / recommendation run for a case."""
    NOT_STARTED = "NOT_STARTED", "Not started"
    PENDING = "PENDING", "Pending"
    COMPLETED = "COMPLETED", "Completed"
    FAILED = "FAILED", "Failed"


class CaseSource(models.TextChoices):
    DIRECT = "DIRECT", "Direct intake"
    CHAT_BRIDGE = "CHAT_BRIDGE", "Chat bridge"
    BOOKING_BRIDGE = "BOOKING_BRIDGE", "Booking bridge"


class WarningType(models.TextChoices):
    EMERGENCY_ESCALATION = "EMERGENCY_ESCALATION", "Emergency escalation"
    PRIORITY_SUGGESTION = "PRIORITY_SUGGESTION", "Priority suggestion"
