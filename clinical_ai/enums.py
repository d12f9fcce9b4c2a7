from django.db import models


class PipelineStage(models.TextChoices):
    DATA_STRUCTURING = "DATA_STRUCTURING", "Data structuring"
    CLINICAL_SUMMARIZATION = "CLINICAL_SUMMARIZATION", "Clinical summarization"
    INTEGRATED_CARE_DRAFTING = "INTEGRATED_CARE_DRAFTING", "Integrated care drafting"
    COST_OPTIMIZATION = "COST_OPTIMIZATION", "Cost optimization"
    SAFETY_VALIDATION = "SAFETY_VALIDATION", "Safety validation"


class ProcessingOutcome(models.TextChoices):
    """Immediate answer to a processing trigger (the run itself may continue)."""
    STARTED = "STARTED", "Started"
    COMPLETED = "COMPLETED", "Completed"
    QUEUED = "QUEUED", "Queued"
    ALREADY_PROCESSED = "ALREADY_PROCESSED", "Already processed"
    ALREADY_PROCESSING = "ALREADY_PROCESSING", "Already processing"
    FAILED = "FAILED", "Failed"


class DeliveryMode(models.TextChoices):
    INLINE = "INLINE", "Inline"
    THREAD = "THREAD", "Background thread"
    QUEUE = "QUEUE", "Queued for worker"


class UrgencyLevel(models.TextChoices):
    ROUTINE = "ROUTINE", "Routine"
    ELEVATED = "ELEVATED", "Elevated"
    URGENT = "URGENT", "Urgent"
