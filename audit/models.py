import uuid

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models

from .enums import Verb


class AuditLog(models.Model):
    """
    Append-only record of a change to a patient, case, recommendation or
    account. Lifecycle transitions are stored as ACTION events with the
    from/to statuses in ``extra``.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    actor = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="audit_events")
    actor_email = models.CharField(max_length=255, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True, null=True)

    verb = models.CharField(max_length=8, choices=Verb.choices)
    message = models.CharField(max_length=255, blank=True)

    target_ct = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    target_id = models.CharField(max_length=64)
    target = GenericForeignKey("target_ct", "target_id")

    changes = models.JSONField(default=dict, blank=True)  # {"before": {...}, "after": {...}}
    extra = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["created_at"]),
            models.Index(fields=["target_ct", "target_id"]),
            models.Index(fields=["verb"]),
        ]
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.verb} {self.target_ct.model}#{self.target_id} ({self.message})"
